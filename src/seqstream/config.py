"""
Configuration management for stream pipelines.
"""

from typing import Optional
from dataclasses import dataclass, field
import psutil


@dataclass
class StreamConfig:
    """Global configuration for stream pipelines."""

    # Memory limits used by buffering stages
    memory_limit: int = field(default_factory=lambda: int(psutil.virtual_memory().total * 0.8))
    memory_check_interval: int = 10_000  # buffered elements between pressure checks
    max_buffer_pressure: str = "CRITICAL"  # name of a MemoryPressureLevel

    # Diagnostics
    log_pipeline: bool = True

    _instance: Optional['StreamConfig'] = None

    def __post_init__(self):
        if self.memory_check_interval < 1:
            raise ValueError("memory_check_interval must be positive")

    @classmethod
    def get_instance(cls) -> 'StreamConfig':
        """Get singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def set_defaults(cls, **kwargs) -> None:
        """Set default configuration values."""
        instance = cls.get_instance()
        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)

    def format_bytes(self, num_bytes: int) -> str:
        """Format bytes as human-readable string."""
        for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
            if num_bytes < 1024.0:
                return f"{num_bytes:.2f} {unit}"
            num_bytes /= 1024.0
        return f"{num_bytes:.2f} PB"


# Global configuration instance
config = StreamConfig.get_instance()
