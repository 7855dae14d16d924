#!/usr/bin/env python3
"""
Tests for stream sources: values, ranges, generators and builders.
"""

import unittest
from seqstream import Stream, AlreadyConsumedError


class TestStreamSources(unittest.TestCase):
    """Test how streams are created."""

    def test_of_values(self):
        stream = Stream.of(3, 1, 2)
        self.assertTrue(stream.is_finite)
        self.assertEqual(stream.to_list(), [3, 1, 2])

    def test_from_iterable(self):
        self.assertEqual(Stream.from_iterable(["a", "b"]).to_list(), ["a", "b"])
        self.assertTrue(Stream.from_iterable([1]).is_finite)

        # An arbitrary iterator has unknown length
        gen = (x * x for x in range(4))
        stream = Stream.from_iterable(gen)
        self.assertIsNone(stream.is_finite)
        self.assertEqual(stream.to_list(), [0, 1, 4, 9])

    def test_rejects_non_iterable_source(self):
        with self.assertRaises(TypeError):
            Stream(42)

    def test_range_is_half_open(self):
        self.assertEqual(Stream.range(2, 5).to_list(), [2, 3, 4])
        self.assertEqual(Stream.range(0, 10).count(), 10)

    def test_empty_range(self):
        self.assertEqual(Stream.range(5, 5).to_list(), [])
        self.assertEqual(Stream.range(5, 2).to_list(), [])

    def test_empty(self):
        self.assertEqual(Stream.empty().count(), 0)

    def test_generate_is_lazy(self):
        calls = []

        def supplier():
            calls.append(1)
            return len(calls)

        stream = Stream.generate(supplier)
        self.assertFalse(stream.is_finite)
        self.assertEqual(calls, [])

        self.assertEqual(stream.limit(5).to_list(), [1, 2, 3, 4, 5])
        self.assertEqual(len(calls), 5)

    def test_generate_failure_surfaces_at_pull(self):
        stream = Stream.generate(lambda: 1 / 0).limit(1)
        with self.assertRaises(ZeroDivisionError):
            stream.to_list()

    def test_iterate(self):
        result = Stream.iterate(0, lambda x: x + 6).limit(10).to_list()
        self.assertEqual(result, [0, 6, 12, 18, 24, 30, 36, 42, 48, 54])

    def test_iterate_with_has_next(self):
        stream = Stream.iterate(1, lambda x: x * 2, lambda x: x < 100)
        self.assertIsNone(stream.is_finite)
        self.assertEqual(stream.to_list(), [1, 2, 4, 8, 16, 32, 64])

    def test_concat(self):
        stream = Stream.concat(Stream.of(1, 2, 3), Stream.of(4, 5, 6))
        self.assertTrue(stream.is_finite)
        self.assertEqual(stream.to_list(), [1, 2, 3, 4, 5, 6])

    def test_concat_keeps_stages_of_inputs(self):
        evens = Stream.range(0, 6).filter(lambda x: x % 2 == 0)
        odds = Stream.range(0, 6).filter(lambda x: x % 2 == 1)
        self.assertEqual(Stream.concat(evens, odds).to_list(), [0, 2, 4, 1, 3, 5])

    def test_concat_with_infinite(self):
        stream = Stream.concat(Stream.of(1), Stream.generate(lambda: 0))
        self.assertFalse(stream.is_finite)
        self.assertEqual(stream.limit(3).to_list(), [1, 0, 0])

    def test_concat_links_inputs(self):
        first, second = Stream.of(1), Stream.of(2)
        Stream.concat(first, second)
        with self.assertRaises(AlreadyConsumedError):
            first.count()
        with self.assertRaises(AlreadyConsumedError):
            second.count()

    def test_concat_with_itself_fails(self):
        stream = Stream.of(1, 2, 3)
        with self.assertRaises(AlreadyConsumedError):
            Stream.concat(stream, stream)
        # The rejected call leaves the stream usable
        self.assertEqual(stream.to_list(), [1, 2, 3])

    def test_builder(self):
        builder = Stream.builder().add(0)
        for i in range(2, 9, 2):
            builder.accept(i)
        stream = builder.add(10).build()
        self.assertEqual(stream.to_list(), [0, 2, 4, 6, 8, 10])

    def test_builder_is_closed_after_build(self):
        builder = Stream.builder().add(1)
        builder.build()
        with self.assertRaises(AlreadyConsumedError):
            builder.add(2)
        with self.assertRaises(AlreadyConsumedError):
            builder.build()


if __name__ == "__main__":
    unittest.main()
