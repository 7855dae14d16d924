"""
Stream operators for transformation.

Each operator wraps the upstream iterator in a generator, so elements flow
through the whole chain one at a time and nothing is pulled from upstream
until a downstream consumer asks for it. Per-traversal state (seen sets,
sort buffers, counters) lives inside ``apply`` and never on the operator.
"""

import functools
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, Iterator, List, Optional, TypeVar

from seqstream.memory import monitor

T = TypeVar('T')
U = TypeVar('U')


class StreamOperator(ABC):
    """Base class for stream operators."""

    @abstractmethod
    def apply(self, iterator: Iterator[T]) -> Iterator[Any]:
        """Apply operator to iterator."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class MapOperator(StreamOperator):
    """Map each element to a new value."""

    def __init__(self, func: Callable[[T], U]):
        self.func = func

    def apply(self, iterator: Iterator[T]) -> Iterator[U]:
        for item in iterator:
            yield self.func(item)


class FilterOperator(StreamOperator):
    """Filter elements by predicate."""

    def __init__(self, predicate: Callable[[T], bool]):
        self.predicate = predicate

    def apply(self, iterator: Iterator[T]) -> Iterator[T]:
        for item in iterator:
            if self.predicate(item):
                yield item


class PeekOperator(StreamOperator):
    """Run a side effect on each element that reaches this stage."""

    def __init__(self, action: Callable[[T], Any]):
        self.action = action

    def apply(self, iterator: Iterator[T]) -> Iterator[T]:
        for item in iterator:
            self.action(item)
            yield item


class FlatMapOperator(StreamOperator):
    """Map each element to multiple elements."""

    def __init__(self, func: Callable[[T], Iterable[U]]):
        self.func = func

    def apply(self, iterator: Iterator[T]) -> Iterator[U]:
        for item in iterator:
            yield from self.func(item)


class LimitOperator(StreamOperator):
    """Emit at most n elements."""

    def __init__(self, n: int):
        if n < 0:
            raise ValueError(f"limit must be non-negative, got {n}")
        self.n = n

    def apply(self, iterator: Iterator[T]) -> Iterator[T]:
        if self.n == 0:
            return
        # Stop right after the n-th element; the (n+1)-th is never pulled
        for taken, item in enumerate(iterator, 1):
            yield item
            if taken >= self.n:
                return

    def __repr__(self) -> str:
        return f"LimitOperator({self.n})"


class SkipOperator(StreamOperator):
    """Skip first n elements."""

    def __init__(self, n: int):
        if n < 0:
            raise ValueError(f"skip must be non-negative, got {n}")
        self.n = n

    def apply(self, iterator: Iterator[T]) -> Iterator[T]:
        for i, item in enumerate(iterator):
            if i >= self.n:
                yield item

    def __repr__(self) -> str:
        return f"SkipOperator({self.n})"


class TakeWhileOperator(StreamOperator):
    """Take elements while predicate is true, then stop for good."""

    def __init__(self, predicate: Callable[[T], bool]):
        self.predicate = predicate

    def apply(self, iterator: Iterator[T]) -> Iterator[T]:
        for item in iterator:
            if not self.predicate(item):
                return
            yield item


class DropWhileOperator(StreamOperator):
    """Drop elements while predicate is true."""

    def __init__(self, predicate: Callable[[T], bool]):
        self.predicate = predicate

    def apply(self, iterator: Iterator[T]) -> Iterator[T]:
        dropping = True
        for item in iterator:
            if dropping and self.predicate(item):
                continue
            dropping = False
            yield item


class DistinctOperator(StreamOperator):
    """Remove duplicate elements, keeping first occurrences in order."""

    def __init__(self, key_func: Optional[Callable[[T], Any]] = None, guarded: bool = True):
        self.key_func = key_func or (lambda x: x)
        self.guarded = guarded

    def apply(self, iterator: Iterator[T]) -> Iterator[T]:
        seen = set()

        for item in iterator:
            key = self.key_func(item)
            if key not in seen:
                seen.add(key)
                if self.guarded:
                    monitor.guard_buffer(len(seen), "distinct")
                yield item


class SortedOperator(StreamOperator):
    """
    Buffer every upstream element, then emit them in sorted order.

    Nothing is emitted until upstream is exhausted, so this stage only makes
    sense on a finite stream. When ``guarded`` (upstream length unknown) it
    checks memory while buffering and raises
    :class:`~seqstream.exceptions.BufferOverflowError` instead of growing
    without bound. The sort is stable.
    """

    def __init__(self,
                 comparator: Optional[Callable[[T, T], int]] = None,
                 key: Optional[Callable[[T], Any]] = None,
                 reverse: bool = False,
                 guarded: bool = True):
        if comparator is not None and key is not None:
            raise ValueError("pass either a comparator or a key, not both")
        self.key = functools.cmp_to_key(comparator) if comparator else key
        self.reverse = reverse
        self.guarded = guarded

    def apply(self, iterator: Iterator[T]) -> Iterator[T]:
        buffer: List[T] = []
        for item in iterator:
            buffer.append(item)
            if self.guarded:
                monitor.guard_buffer(len(buffer), "sorted")

        buffer.sort(key=self.key, reverse=self.reverse)
        yield from buffer
