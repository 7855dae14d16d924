"""
Lazy, single-use streams.

A :class:`Stream` is a source plus an ordered chain of operators. Building
the chain does no work; a terminal operation pulls elements through every
operator one at a time and leaves the stream exhausted.

    >>> Stream.of(120, 410, 85, 32, 314, 12) \\
    ...     .filter(lambda x: x < 300) \\
    ...     .map(lambda x: x + 11) \\
    ...     .limit(3) \\
    ...     .to_list()
    [131, 96, 43]
"""

import logging
from collections.abc import Sized
from contextlib import contextmanager
from enum import Enum
from typing import (
    Any, Callable, Dict, Generic, Iterable, Iterator, List, Optional, Set,
    Tuple, TypeVar, Union
)

from seqstream import collectors
from seqstream.collectors import Collector
from seqstream.config import config
from seqstream.exceptions import (
    AlreadyConsumedError, EmptySequenceError, NonTerminatingConfigurationError
)
from seqstream.memory import monitor
from seqstream.streams.operators import (
    StreamOperator, MapOperator, FilterOperator, PeekOperator, FlatMapOperator,
    LimitOperator, SkipOperator, TakeWhileOperator, DropWhileOperator,
    DistinctOperator, SortedOperator
)
from seqstream.summary import SummaryStatistics

logger = logging.getLogger(__name__)

T = TypeVar('T')
U = TypeVar('U')
K = TypeVar('K')

_MISSING = object()


class StreamState(Enum):
    """Lifecycle of a stream."""
    UNCONSUMED = "unconsumed"
    CONSUMING = "consuming"
    EXHAUSTED = "exhausted"


class Stream(Iterable[T]):
    """
    A lazy stream of elements.

    Streams are single-use: chaining an operator hands the pipeline over to
    the returned stream, and running a terminal operation exhausts it. Any
    later use raises :class:`~seqstream.exceptions.AlreadyConsumedError`.
    """

    def __init__(self,
                 source: Union[Iterable[T], Iterator[T], Callable[[], Iterator[T]]],
                 finite: Optional[bool] = None):
        """
        Initialize stream.

        Args:
            source: Data source (iterable, iterator, or callable returning iterator)
            finite: Whether the source is known to end (None if unknown)
        """
        if callable(source):
            self._source = source
        elif hasattr(source, '__iter__'):
            self._source = lambda: iter(source)
            if finite is None and isinstance(source, Sized):
                finite = True
        else:
            raise TypeError("Source must be iterable or callable")

        self._operators: List[StreamOperator] = []
        self._finite = finite
        self._state = StreamState.UNCONSUMED
        self._linked = False

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def is_finite(self) -> Optional[bool]:
        """True if the stream is known to end, False if known infinite, None if unknown."""
        return self._finite

    def __repr__(self) -> str:
        return f"<Stream state={self._state.value} operators={self._operators!r}>"

    def _check_usable(self, operation: str) -> None:
        if self._linked:
            raise AlreadyConsumedError(
                f"Cannot call {operation}(): stream has already been linked to another stage"
            )
        if self._state is not StreamState.UNCONSUMED:
            raise AlreadyConsumedError(
                f"Cannot call {operation}(): stream has already been consumed ({self._state.value})"
            )

    def _chain(self, operation: str, operator: StreamOperator, finite: Optional[bool] = _MISSING) -> 'Stream':
        """Hand the pipeline over to a new stream with ``operator`` appended."""
        self._check_usable(operation)
        self._linked = True

        new_stream = Stream(self._source, finite=self._finite if finite is _MISSING else finite)
        new_stream._operators = self._operators.copy()
        new_stream._operators.append(operator)
        return new_stream

    def _open(self, operation: str) -> Iterator[T]:
        """Start a terminal operation and build the operator chain."""
        self._check_usable(operation)
        self._state = StreamState.CONSUMING
        if config.log_pipeline:
            logger.debug(f"{operation}() pulling through {len(self._operators)} operator(s)")

        try:
            return self._pipeline()
        except BaseException:
            self._state = StreamState.EXHAUSTED
            raise

    def _pipeline(self) -> Iterator[T]:
        """Build the operator chain without touching lifecycle state."""
        iterator = self._source()
        for op in self._operators:
            iterator = op.apply(iterator)
        return iterator

    def _close(self, iterator: Iterator[T], operation: str) -> None:
        self._state = StreamState.EXHAUSTED
        close = getattr(iterator, 'close', None)
        if close is not None:
            close()
        if config.log_pipeline:
            logger.debug(f"{operation}() finished; stream exhausted")

    @contextmanager
    def _terminal(self, operation: str):
        iterator = self._open(operation)
        try:
            yield iterator
        finally:
            self._close(iterator, operation)

    def __iter__(self) -> Iterator[T]:
        """
        Iterate the stream; counts as its terminal operation.

        The stream is claimed on the first ``next()``, not on ``iter()``.
        """
        with self._terminal("__iter__") as iterator:
            yield from iterator

    @property
    def _needs_guard(self) -> bool:
        """Buffering is only memory-checked when the stream may be unbounded."""
        return self._finite is not True

    # Intermediate operators

    def map(self, func: Callable[[T], U]) -> 'Stream[U]':
        """Apply function to each element."""
        return self._chain("map", MapOperator(func))

    def filter(self, predicate: Callable[[T], bool]) -> 'Stream[T]':
        """Keep only elements matching predicate."""
        return self._chain("filter", FilterOperator(predicate))

    def peek(self, action: Callable[[T], Any]) -> 'Stream[T]':
        """Run ``action`` on each element as it passes, without changing it."""
        return self._chain("peek", PeekOperator(action))

    def flat_map(self, func: Callable[[T], Iterable[U]]) -> 'Stream[U]':
        """Map each element to multiple elements."""
        return self._chain("flat_map", FlatMapOperator(func), finite=False if self._finite is False else None)

    def limit(self, n: int) -> 'Stream[T]':
        """Emit at most n elements; safe on infinite streams."""
        return self._chain("limit", LimitOperator(n), finite=True)

    def skip(self, n: int) -> 'Stream[T]':
        """Skip first n elements."""
        return self._chain("skip", SkipOperator(n))

    def take_while(self, predicate: Callable[[T], bool]) -> 'Stream[T]':
        """Emit elements until the first one failing ``predicate``."""
        return self._chain("take_while", TakeWhileOperator(predicate), finite=True if self._finite else None)

    def drop_while(self, predicate: Callable[[T], bool]) -> 'Stream[T]':
        """Drop elements until the first one failing ``predicate``."""
        return self._chain("drop_while", DropWhileOperator(predicate))

    def distinct(self, key: Optional[Callable[[T], Any]] = None) -> 'Stream[T]':
        """Remove duplicate elements."""
        return self._chain("distinct", DistinctOperator(key, guarded=self._needs_guard))

    def sorted(self,
               comparator: Optional[Callable[[T, T], int]] = None,
               *,
               key: Optional[Callable[[T], Any]] = None,
               reverse: bool = False) -> 'Stream[T]':
        """
        Sort elements.

        Args:
            comparator: Old-style ``cmp(a, b) -> int`` function
            key: Function to extract sort key (exclusive with ``comparator``)
            reverse: Sort in descending order

        Raises:
            NonTerminatingConfigurationError: the stream is known to be infinite
        """
        if self._finite is False:
            raise NonTerminatingConfigurationError(
                "sorted() needs every element before emitting one; "
                "bound the infinite stream with limit() or take_while() first"
            )
        return self._chain("sorted", SortedOperator(comparator, key=key, reverse=reverse,
                                                     guarded=self._needs_guard))

    # Terminal operators

    def for_each(self, action: Callable[[T], Any]) -> None:
        """Apply function to each element."""
        with self._terminal("for_each") as iterator:
            for item in iterator:
                action(item)

    def count(self) -> int:
        """Count elements."""
        with self._terminal("count") as iterator:
            return sum(1 for _ in iterator)

    def collect(self, collector: Optional[Collector[T, Any, U]] = None) -> U:
        """Reduce the stream with a collector (a list by default)."""
        collector = collector or collectors.to_list()
        guarded = collector.buffering and self._needs_guard
        with self._terminal("collect") as iterator:
            acc = collector.supplier()
            for seen, item in enumerate(iterator, 1):
                acc = collector.accumulator(acc, item)
                if guarded:
                    monitor.guard_buffer(seen, "collect")
            return collector.finisher(acc)

    def to_list(self) -> List[T]:
        """Collect all elements into a list."""
        return self.collect(collectors.to_list())

    def to_set(self) -> Set[T]:
        """Collect all elements into a set."""
        return self.collect(collectors.to_set())

    def to_array(self) -> Tuple[T, ...]:
        """Collect all elements into a fixed-size tuple."""
        return tuple(self.to_list())

    def to_collection(self, factory: Callable[[], Any]) -> Any:
        """Collect into a container built by ``factory``, e.g. ``collections.deque``."""
        return self.collect(collectors.to_collection(factory))

    def find_first(self, default: Optional[T] = None) -> Optional[T]:
        """Get first element, or ``default`` when the stream is empty."""
        with self._terminal("find_first") as iterator:
            return next(iterator, default)

    def get_first(self) -> T:
        """
        Get first element.

        Raises:
            EmptySequenceError: the stream is empty
        """
        with self._terminal("get_first") as iterator:
            item = next(iterator, _MISSING)
        if item is _MISSING:
            raise EmptySequenceError("get_first() on an empty stream")
        return item

    def any_match(self, predicate: Callable[[T], bool]) -> bool:
        with self._terminal("any_match") as iterator:
            return any(predicate(item) for item in iterator)

    def all_match(self, predicate: Callable[[T], bool]) -> bool:
        with self._terminal("all_match") as iterator:
            return all(predicate(item) for item in iterator)

    def none_match(self, predicate: Callable[[T], bool]) -> bool:
        with self._terminal("none_match") as iterator:
            return not any(predicate(item) for item in iterator)

    def reduce(self, func: Callable[[Any, T], Any], initial: Any = _MISSING) -> Any:
        """
        Reduce stream to single value.

        Raises:
            EmptySequenceError: the stream is empty and no ``initial`` was given
        """
        with self._terminal("reduce") as iterator:
            result = initial
            if result is _MISSING:
                result = next(iterator, _MISSING)
                if result is _MISSING:
                    raise EmptySequenceError("reduce() of an empty stream with no initial value")
            for item in iterator:
                result = func(result, item)
            return result

    def sum(self) -> Union[int, float]:
        """Sum numeric elements; 0 when empty."""
        with self._terminal("sum") as iterator:
            total = 0
            for item in iterator:
                total += item
            return total

    def average(self) -> Optional[float]:
        """Arithmetic mean of numeric elements, None when empty."""
        stats = self.statistics()
        return stats.average if stats.count else None

    def statistics(self) -> SummaryStatistics:
        """Count, sum, min, max and average in a single pass."""
        with self._terminal("statistics") as iterator:
            stats = SummaryStatistics()
            for item in iterator:
                stats.accept(item)
            return stats

    def min(self, key: Optional[Callable[[T], Any]] = None, default: Optional[T] = None) -> Optional[T]:
        with self._terminal("min") as iterator:
            return min(iterator, key=key, default=default)

    def max(self, key: Optional[Callable[[T], Any]] = None, default: Optional[T] = None) -> Optional[T]:
        with self._terminal("max") as iterator:
            return max(iterator, key=key, default=default)

    def join(self, separator: str = "", prefix: str = "", suffix: str = "") -> str:
        """Concatenate ``str()`` of elements, wrapped in ``prefix``/``suffix``."""
        return self.collect(collectors.joining(separator, prefix, suffix))

    def partition_by(self, predicate: Callable[[T], bool]) -> Dict[bool, List[T]]:
        """Split into ``{False: [...], True: [...]}`` preserving encounter order."""
        return self.collect(collectors.partitioning_by(predicate))

    def group_by(self, key_func: Callable[[T], K], downstream: Optional[Collector] = None) -> Dict[K, Any]:
        """Group elements by key."""
        return self.collect(collectors.grouping_by(key_func, downstream))

    def group_count_by(self, key_func: Callable[[T], K]) -> Dict[K, int]:
        """Number of elements per key."""
        return self.group_by(key_func, collectors.counting())

    def summing_by(self, key_func: Callable[[T], K], value_func: Callable[[T], Any]) -> Dict[K, Any]:
        """Sum of ``value_func(element)`` per key."""
        return self.group_by(key_func, collectors.summing(value_func))

    def averaging_by(self, key_func: Callable[[T], K], value_func: Callable[[T], Any]) -> Dict[K, float]:
        """Mean of ``value_func(element)`` per key."""
        return self.group_by(key_func, collectors.averaging(value_func))

    # Factory methods

    @classmethod
    def of(cls, *values: T) -> 'Stream[T]':
        """Create stream from the given values."""
        return cls(values, finite=True)

    @classmethod
    def empty(cls) -> 'Stream[Any]':
        return cls((), finite=True)

    @classmethod
    def from_iterable(cls, iterable: Iterable[T]) -> 'Stream[T]':
        """Create stream from iterable."""
        return cls(iterable)

    @classmethod
    def range(cls, *args) -> 'Stream[int]':
        """Create stream of integers over ``[start, end)``; empty when end <= start."""
        return cls(lambda: iter(range(*args)), finite=True)

    @classmethod
    def generate(cls, supplier: Callable[[], T]) -> 'Stream[T]':
        """Create infinite stream of ``supplier()`` results, called on demand."""
        def generator():
            while True:
                yield supplier()
        return cls(generator, finite=False)

    @classmethod
    def iterate(cls,
                seed: T,
                func: Callable[[T], T],
                has_next: Optional[Callable[[T], bool]] = None) -> 'Stream[T]':
        """
        Create stream ``seed, func(seed), func(func(seed)), ...``.

        Without ``has_next`` the stream is infinite; with it, the stream ends
        at the first value for which ``has_next`` is false.
        """
        def generator():
            value = seed
            while has_next is None or has_next(value):
                yield value
                value = func(value)
        return cls(generator, finite=False if has_next is None else None)

    @classmethod
    def concat(cls, first: 'Stream[T]', second: 'Stream[T]') -> 'Stream[T]':
        """Elements of ``first`` followed by elements of ``second``."""
        if first is second:
            raise AlreadyConsumedError("Cannot concat() a stream with itself")
        first._check_usable("concat")
        second._check_usable("concat")
        first._linked = second._linked = True

        if first._finite is False or second._finite is False:
            finite = False
        elif first._finite and second._finite:
            finite = True
        else:
            finite = None

        def generator():
            yield from first._pipeline()
            yield from second._pipeline()
        return cls(generator, finite=finite)

    @classmethod
    def builder(cls) -> 'StreamBuilder[T]':
        return StreamBuilder()


class StreamBuilder(Generic[T]):
    """Accumulate elements one by one, then build a stream from them."""

    def __init__(self):
        self._items: List[T] = []
        self._built = False

    def accept(self, item: T) -> None:
        if self._built:
            raise AlreadyConsumedError("Cannot add to a builder that has already been built")
        self._items.append(item)

    def add(self, item: T) -> 'StreamBuilder[T]':
        """Add an element and return the builder for chaining."""
        self.accept(item)
        return self

    def build(self) -> Stream[T]:
        if self._built:
            raise AlreadyConsumedError("build() has already been called on this builder")
        self._built = True
        return Stream(self._items, finite=True)
