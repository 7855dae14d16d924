"""
Reusable single-pass reducers for :meth:`Stream.collect`.

A collector is a recipe: ``supplier`` creates a fresh accumulation,
``accumulator`` folds one element into it and returns the accumulation, and
``finisher`` turns the accumulation into the final result. Every collector
here consumes its input in exactly one pass.

    >>> Stream.of("1", "2", "3", "4").collect(summing(int))
    10
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, Set, TypeVar

from seqstream.summary import SummaryStatistics

T = TypeVar('T')
A = TypeVar('A')
R = TypeVar('R')
K = TypeVar('K')


def _identity(value):
    return value


@dataclass(frozen=True)
class Collector(Generic[T, A, R]):
    """A supplier/accumulator/finisher triple."""
    supplier: Callable[[], A]
    accumulator: Callable[[A, T], A]
    finisher: Callable[[A], R] = _identity
    buffering: bool = False  # holds every element until the stream ends

    def collect(self, items: Iterable[T]) -> R:
        """Run this collector over any iterable."""
        acc = self.supplier()
        for item in items:
            acc = self.accumulator(acc, item)
        return self.finisher(acc)


def _append(container, item):
    container.append(item)
    return container


def _add(container, item):
    container.add(item)
    return container


def to_list() -> Collector[T, List[T], List[T]]:
    return Collector(list, _append, buffering=True)


def to_set() -> Collector[T, Set[T], Set[T]]:
    """Collect into a set; later duplicates are absorbed."""
    return Collector(set, _add, buffering=True)


def to_collection(factory: Callable[[], Any]) -> Collector:
    """
    Collect into a container created by ``factory``.

    The container must offer ``append`` (list, deque) or ``add`` (set-like).
    """
    def accumulate(container, item):
        if hasattr(container, 'append'):
            container.append(item)
        else:
            container.add(item)
        return container

    return Collector(factory, accumulate, buffering=True)


def joining(separator: str = "", prefix: str = "", suffix: str = "") -> Collector[Any, List[str], str]:
    """Concatenate ``str()`` of each element; empty input gives ``prefix + suffix``."""
    return Collector(
        list,
        lambda parts, item: _append(parts, str(item)),
        lambda parts: prefix + separator.join(parts) + suffix,
        buffering=True,
    )


def counting() -> Collector[Any, int, int]:
    return Collector(lambda: 0, lambda n, _: n + 1)


def _summarizer(func: Callable[[T], Any]) -> Callable[[SummaryStatistics, T], SummaryStatistics]:
    def accumulate(stats: SummaryStatistics, item: T) -> SummaryStatistics:
        stats.accept(func(item))
        return stats
    return accumulate


def summing(func: Callable[[T], Any] = _identity) -> Collector:
    """Sum of ``func(element)``, 0 when empty."""
    return Collector(SummaryStatistics, _summarizer(func), lambda stats: stats.sum)


def averaging(func: Callable[[T], Any] = _identity) -> Collector:
    """Mean of ``func(element)``, 0.0 when empty."""
    return Collector(SummaryStatistics, _summarizer(func), lambda stats: stats.average)


def summarizing(func: Callable[[T], Any] = _identity) -> Collector[T, SummaryStatistics, SummaryStatistics]:
    return Collector(SummaryStatistics, _summarizer(func))


def mapping(func: Callable[[T], R], downstream: Collector) -> Collector:
    """Adapt ``downstream`` to receive ``func(element)`` instead of the element."""
    return Collector(
        downstream.supplier,
        lambda acc, item: downstream.accumulator(acc, func(item)),
        downstream.finisher,
        buffering=downstream.buffering,
    )


def grouping_by(key_func: Callable[[T], K], downstream: Optional[Collector] = None) -> Collector[T, Dict[K, Any], Dict[K, Any]]:
    """
    Group elements by ``key_func``; each group is reduced by ``downstream``
    (a list of the group's elements by default).

    Keys appear in order of first occurrence.
    """
    downstream = downstream or to_list()

    def accumulate(groups, item):
        key = key_func(item)
        if key not in groups:
            groups[key] = downstream.supplier()
        groups[key] = downstream.accumulator(groups[key], item)
        return groups

    def finish(groups):
        return {key: downstream.finisher(acc) for key, acc in groups.items()}

    return Collector(dict, accumulate, finish, buffering=True)


def partitioning_by(predicate: Callable[[T], bool], downstream: Optional[Collector] = None) -> Collector[T, Dict[bool, Any], Dict[bool, Any]]:
    """
    Split elements into ``{False: ..., True: ...}`` by ``predicate``.

    Both keys are always present and each side keeps encounter order.
    """
    downstream = downstream or to_list()

    def supply():
        return {False: downstream.supplier(), True: downstream.supplier()}

    def accumulate(parts, item):
        key = bool(predicate(item))
        parts[key] = downstream.accumulator(parts[key], item)
        return parts

    def finish(parts):
        return {key: downstream.finisher(acc) for key, acc in parts.items()}

    return Collector(supply, accumulate, finish, buffering=True)
