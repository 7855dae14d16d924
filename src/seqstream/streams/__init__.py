"""Lazy, single-use streams and their operators."""

from seqstream.streams.stream import (
    Stream,
    StreamBuilder,
    StreamState,
)
from seqstream.streams.operators import (
    StreamOperator,
    MapOperator,
    FilterOperator,
    PeekOperator,
    FlatMapOperator,
    LimitOperator,
    SkipOperator,
    TakeWhileOperator,
    DropWhileOperator,
    DistinctOperator,
    SortedOperator,
)

__all__ = [
    "Stream",
    "StreamBuilder",
    "StreamState",
    "StreamOperator",
    "MapOperator",
    "FilterOperator",
    "PeekOperator",
    "FlatMapOperator",
    "LimitOperator",
    "SkipOperator",
    "TakeWhileOperator",
    "DropWhileOperator",
    "DistinctOperator",
    "SortedOperator",
]
