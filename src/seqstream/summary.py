"""
Single-pass numeric summaries.
"""

from dataclasses import dataclass
from typing import Optional, Union

Number = Union[int, float]


@dataclass
class SummaryStatistics:
    """
    Running count, sum, min and max of a numeric sequence.

    Values are folded in one at a time with :meth:`accept`, so a summary over
    any number of elements needs constant memory.
    """
    count: int = 0
    sum: Number = 0
    min: Optional[Number] = None
    max: Optional[Number] = None

    @property
    def average(self) -> float:
        """Arithmetic mean, 0.0 for an empty summary."""
        if self.count == 0:
            return 0.0
        return self.sum / self.count

    def accept(self, value: Number) -> None:
        """Fold one value into the summary."""
        self.count += 1
        self.sum += value
        if self.min is None or value < self.min:
            self.min = value
        if self.max is None or value > self.max:
            self.max = value

    def combine(self, other: 'SummaryStatistics') -> 'SummaryStatistics':
        """Merge another summary into this one and return self."""
        if other.count == 0:
            return self
        self.count += other.count
        self.sum += other.sum
        self.min = other.min if self.min is None else min(self.min, other.min)
        self.max = other.max if self.max is None else max(self.max, other.max)
        return self

    def __str__(self) -> str:
        return (f"count={self.count}, sum={self.sum}, min={self.min}, "
                f"average={self.average:.6f}, max={self.max}")
