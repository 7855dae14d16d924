"""Memory monitoring for stages that buffer elements."""

from seqstream.memory.monitor import (
    MemoryMonitor,
    MemoryPressureLevel,
    MemoryInfo,
    MemoryPressureHandler,
    monitor,
)
from seqstream.memory.handlers import LoggingHandler

# Buffering stages report pressure through the log by default
monitor.add_handler(LoggingHandler())

__all__ = [
    "MemoryMonitor",
    "MemoryPressureLevel",
    "MemoryInfo",
    "MemoryPressureHandler",
    "LoggingHandler",
    "monitor",
]
