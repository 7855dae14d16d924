"""Memory monitoring and pressure detection for buffering stages."""

import time
import logging
import psutil
from enum import Enum
from typing import List, Optional
from dataclasses import dataclass
from abc import ABC, abstractmethod

from seqstream.config import config
from seqstream.exceptions import BufferOverflowError

logger = logging.getLogger(__name__)


class MemoryPressureLevel(Enum):
    """Memory pressure levels."""
    NONE = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4

    def __gt__(self, other):
        if not isinstance(other, MemoryPressureLevel):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other):
        if not isinstance(other, MemoryPressureLevel):
            return NotImplemented
        return self.value >= other.value


@dataclass
class MemoryInfo:
    """Memory usage information."""
    total: int
    available: int
    used: int
    percent: float
    pressure_level: MemoryPressureLevel
    timestamp: float

    def __str__(self) -> str:
        return (f"Memory: {self.percent:.1f}% of limit used by process "
                f"({config.format_bytes(self.used)} of {config.format_bytes(self.total)}), "
                f"Pressure: {self.pressure_level.name}")


class MemoryPressureHandler(ABC):
    """Abstract base class for memory pressure handlers."""

    @abstractmethod
    def can_handle(self, level: MemoryPressureLevel, info: MemoryInfo) -> bool:
        """Check if this handler should handle the given pressure level."""
        pass

    @abstractmethod
    def handle(self, level: MemoryPressureLevel, info: MemoryInfo) -> None:
        """Handle memory pressure."""
        pass


class MemoryMonitor:
    """Monitor memory used by this process while stages buffer elements."""

    def __init__(self, memory_limit: Optional[int] = None):
        """
        Initialize memory monitor.

        Args:
            memory_limit: Custom memory limit in bytes (None for configured limit)
        """
        self._memory_limit = memory_limit
        self.handlers: List[MemoryPressureHandler] = []

    @property
    def memory_limit(self) -> int:
        return self._memory_limit or config.memory_limit

    def add_handler(self, handler: MemoryPressureHandler) -> None:
        """Add a memory pressure handler."""
        self.handlers.append(handler)

    def remove_handler(self, handler: MemoryPressureHandler) -> None:
        """Remove a memory pressure handler."""
        if handler in self.handlers:
            self.handlers.remove(handler)

    def get_memory_info(self) -> MemoryInfo:
        """Get memory used by this process, measured against the limit."""
        total = max(1, self.memory_limit)
        used = psutil.Process().memory_info().rss
        available = max(0, total - used)
        percent = min(100.0, (used / total) * 100)

        if percent >= 95:
            level = MemoryPressureLevel.CRITICAL
        elif percent >= 85:
            level = MemoryPressureLevel.HIGH
        elif percent >= 70:
            level = MemoryPressureLevel.MEDIUM
        elif percent >= 50:
            level = MemoryPressureLevel.LOW
        else:
            level = MemoryPressureLevel.NONE

        return MemoryInfo(
            total=total,
            available=available,
            used=used,
            percent=percent,
            pressure_level=level,
            timestamp=time.time()
        )

    def check_memory_pressure(self) -> MemoryInfo:
        """Check current memory pressure and notify handlers."""
        info = self.get_memory_info()

        for handler in self.handlers:
            if handler.can_handle(info.pressure_level, info):
                try:
                    handler.handle(info.pressure_level, info)
                except Exception:
                    # A failing handler must not abort the pipeline
                    logger.exception(f"Memory pressure handler {handler!r} failed")

        return info

    def guard_buffer(self, size: int, operation: str) -> None:
        """
        Check memory pressure while a stage buffers elements.

        Checks run every ``config.memory_check_interval`` buffered elements.
        Callers skip this for streams known to be finite.

        Raises:
            BufferOverflowError: pressure reached ``config.max_buffer_pressure``
        """
        if size == 0 or size % config.memory_check_interval:
            return

        info = self.check_memory_pressure()
        limit = MemoryPressureLevel[config.max_buffer_pressure.upper()]
        if info.pressure_level >= limit:
            raise BufferOverflowError(
                f"{operation}() buffered {size:,} elements and reached "
                f"{info.pressure_level.name} memory pressure; "
                f"is the stream unbounded? ({info})"
            )


# Global monitor instance
monitor = MemoryMonitor()
