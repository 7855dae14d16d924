"""
seqstream: lazy, single-use sequence pipelines.

Build a stream from values, a range or a generator function, chain
intermediate stages such as filter, map, limit, distinct and sorted, then
run one terminal operation to pull every element through the chain.
"""

from seqstream.config import StreamConfig
from seqstream.exceptions import (
    StreamError,
    AlreadyConsumedError,
    EmptySequenceError,
    NonTerminatingConfigurationError,
    BufferOverflowError,
)
from seqstream.summary import SummaryStatistics
from seqstream.streams import Stream, StreamBuilder, StreamState
from seqstream.memory import MemoryMonitor, MemoryPressureLevel
from seqstream import collectors

__version__ = "0.1.0"
__license__ = "Apache-2.0"

__all__ = [
    "StreamConfig",
    "StreamError",
    "AlreadyConsumedError",
    "EmptySequenceError",
    "NonTerminatingConfigurationError",
    "BufferOverflowError",
    "SummaryStatistics",
    "Stream",
    "StreamBuilder",
    "StreamState",
    "MemoryMonitor",
    "MemoryPressureLevel",
    "collectors",
]

# Configure default settings
StreamConfig.set_defaults()
