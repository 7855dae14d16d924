#!/usr/bin/env python3
"""
Tests for memory pressure checks in buffering stages.
"""

import itertools
import time
import unittest
from unittest.mock import patch

from seqstream import (
    Stream, StreamConfig, BufferOverflowError, MemoryMonitor, MemoryPressureLevel
)
from seqstream.config import config
from seqstream.memory import LoggingHandler, MemoryInfo, MemoryPressureHandler


def _info(level: MemoryPressureLevel) -> MemoryInfo:
    return MemoryInfo(total=100, available=50, used=50, percent=50.0,
                      pressure_level=level, timestamp=time.time())


class _FailingHandler(MemoryPressureHandler):

    def can_handle(self, level, info):
        return True

    def handle(self, level, info):
        raise RuntimeError("handler failed")


class TestMemoryGuard(unittest.TestCase):
    """Test that buffering stages fail instead of exhausting memory."""

    def setUp(self):
        self._saved = (config.memory_limit, config.memory_check_interval, config.max_buffer_pressure)
        # A one-byte budget puts any real process at CRITICAL pressure
        StreamConfig.set_defaults(memory_limit=1, memory_check_interval=5)

    def tearDown(self):
        StreamConfig.set_defaults(
            memory_limit=self._saved[0],
            memory_check_interval=self._saved[1],
            max_buffer_pressure=self._saved[2],
        )

    def test_sorted_on_unbounded_stream_fails(self):
        stream = Stream.from_iterable(itertools.count()).sorted()
        self.assertIsNone(stream.is_finite)
        with self.assertRaises(BufferOverflowError):
            stream.to_list()

    def test_overflow_is_memory_error(self):
        with self.assertRaises(MemoryError):
            Stream.from_iterable(itertools.count()).distinct().count()

    def test_collecting_unbounded_stream_fails(self):
        with self.assertRaises(BufferOverflowError):
            Stream.from_iterable(itertools.count()).to_list()

    def test_small_buffers_are_not_checked(self):
        self.assertEqual(Stream.of(3, 1, 2).sorted().to_list(), [1, 2, 3])
        self.assertEqual(Stream.from_iterable(itertools.count()).distinct().limit(4).to_list(), [0, 1, 2, 3])

    def test_non_buffering_terminal_is_not_checked(self):
        self.assertEqual(Stream.range(0, 50).count(), 50)
        self.assertEqual(Stream.range(0, 50).sum(), 1225)

    def test_no_failure_below_limit(self):
        with patch.object(MemoryMonitor, "get_memory_info", return_value=_info(MemoryPressureLevel.HIGH)):
            self.assertEqual(Stream.range(0, 20).map(lambda x: -x).sorted().count(), 20)

    def test_configured_pressure_limit(self):
        StreamConfig.set_defaults(max_buffer_pressure="medium")
        with patch.object(MemoryMonitor, "get_memory_info", return_value=_info(MemoryPressureLevel.MEDIUM)):
            with self.assertRaises(BufferOverflowError):
                Stream.from_iterable(iter(range(20))).sorted().to_list()

    def test_finite_streams_are_not_checked(self):
        with patch.object(MemoryMonitor, "get_memory_info", return_value=_info(MemoryPressureLevel.CRITICAL)):
            self.assertEqual(Stream.range(0, 20).to_list(), list(range(20)))
            self.assertEqual(Stream.range(0, 20).map(lambda x: -x).sorted().find_first(), -19)
            self.assertEqual(Stream.of(*range(20)).map(lambda x: x % 3).distinct().to_list(), [0, 1, 2])
            self.assertEqual(len(Stream.range(0, 20).group_by(lambda x: x % 2)), 2)
            self.assertEqual(Stream.range(0, 10).join(","), "0,1,2,3,4,5,6,7,8,9")
            self.assertEqual(Stream.from_iterable(itertools.count()).limit(20).to_list(), list(range(20)))

            # The same elements from a source of unknown length are still checked
            with self.assertRaises(BufferOverflowError):
                Stream.from_iterable(iter(range(20))).to_list()

    def test_host_memory_does_not_affect_guard(self):
        StreamConfig.set_defaults(memory_limit=10 * 1024 ** 3)
        with patch("seqstream.memory.monitor.psutil.Process") as process:
            process.return_value.memory_info.return_value.rss = 1024
            self.assertEqual(Stream.from_iterable(iter(range(100))).sorted().count(), 100)

        with patch("seqstream.memory.monitor.psutil.virtual_memory") as virtual_memory:
            virtual_memory.return_value.total = 4 * 1024 ** 3
            virtual_memory.return_value.used = int(0.78 * 4 * 1024 ** 3)
            self.assertEqual(len(Stream.range(0, 10_000).to_list()), 10_000)


class TestMemoryMonitor(unittest.TestCase):
    """Test pressure detection and handlers."""

    def test_pressure_levels(self):
        self.assertGreater(MemoryPressureLevel.CRITICAL, MemoryPressureLevel.HIGH)
        self.assertGreaterEqual(MemoryPressureLevel.LOW, MemoryPressureLevel.LOW)

    def test_tiny_limit_is_critical(self):
        info = MemoryMonitor(memory_limit=1).get_memory_info()
        self.assertEqual(info.pressure_level, MemoryPressureLevel.CRITICAL)
        self.assertIn("CRITICAL", str(info))

    def test_pressure_measures_process_memory(self):
        with patch("seqstream.memory.monitor.psutil.Process") as process:
            process.return_value.memory_info.return_value.rss = 500
            info = MemoryMonitor(memory_limit=1000).get_memory_info()
        self.assertEqual(info.used, 500)
        self.assertEqual(info.available, 500)
        self.assertEqual(info.percent, 50.0)
        self.assertEqual(info.pressure_level, MemoryPressureLevel.LOW)

    def test_percent_is_clamped(self):
        with patch("seqstream.memory.monitor.psutil.Process") as process:
            process.return_value.memory_info.return_value.rss = 5000
            info = MemoryMonitor(memory_limit=1000).get_memory_info()
        self.assertEqual(info.percent, 100.0)
        self.assertEqual(info.available, 0)
        self.assertEqual(info.pressure_level, MemoryPressureLevel.CRITICAL)
        self.assertIn("100.0%", str(info))

    def test_logging_handler(self):
        mon = MemoryMonitor(memory_limit=1)
        mon.add_handler(LoggingHandler())
        with self.assertLogs("seqstream.memory.handlers", level="CRITICAL"):
            mon.check_memory_pressure()

    def test_logging_handler_quiet_period(self):
        handler = LoggingHandler()
        info = _info(MemoryPressureLevel.HIGH)
        with self.assertLogs("seqstream.memory.handlers", level="ERROR") as logs:
            handler.handle(MemoryPressureLevel.HIGH, info)
            handler.handle(MemoryPressureLevel.HIGH, info)
        self.assertEqual(len(logs.records), 1)

    def test_failing_handler_is_logged(self):
        mon = MemoryMonitor(memory_limit=1)
        handler = _FailingHandler()
        mon.add_handler(handler)
        with self.assertLogs("seqstream.memory.monitor", level="ERROR"):
            info = mon.check_memory_pressure()
        self.assertEqual(info.pressure_level, MemoryPressureLevel.CRITICAL)

        mon.remove_handler(handler)
        self.assertEqual(mon.handlers, [])


class TestStreamConfig(unittest.TestCase):
    """Test configuration defaults."""

    def test_singleton(self):
        self.assertIs(StreamConfig.get_instance(), config)

    def test_unknown_keys_are_ignored(self):
        StreamConfig.set_defaults(no_such_option=True)
        self.assertFalse(hasattr(config, "no_such_option"))

    def test_invalid_check_interval(self):
        with self.assertRaises(ValueError):
            StreamConfig(memory_check_interval=0)

    def test_format_bytes(self):
        self.assertEqual(config.format_bytes(2048), "2.00 KB")
        self.assertEqual(config.format_bytes(num_bytes=3 * 1024 ** 2), "3.00 MB")


if __name__ == "__main__":
    unittest.main()
