#!/usr/bin/env python3
"""
A tour of seqstream: one small pipeline per operation.
"""

import logging
from collections import deque

from seqstream import Stream, collectors


def example_base():
    """Three intermediate stages and a terminal one."""
    print("\n=== Base Example ===")

    # filter keeps values under 300, map adds 11, limit stops after 3
    Stream.of(120, 410, 85, 32, 314, 12) \
        .filter(lambda x: x < 300) \
        .map(lambda x: x + 11) \
        .limit(3) \
        .for_each(lambda x: print(x, end=" "))
    print()


def example_generate():
    print("\n=== Generate Example ===")
    print(Stream.generate(lambda: "*").limit(20).join())


def example_iterate():
    print("\n=== Iterate Example ===")
    print(Stream.iterate(0, lambda x: x + 6).limit(10).to_list())


def example_concat():
    print("\n=== Concat Example ===")
    print(Stream.concat(Stream.of(1, 2, 3), Stream.of(4, 5, 6)).to_list())


def example_builder():
    """Add elements one by one without a backing container."""
    print("\n=== Builder Example ===")

    builder = Stream.builder().add(0)
    for i in range(2, 9, 2):
        builder.accept(i)
    builder.add(10).build().for_each(lambda x: print(x, end=" "))
    print()


def example_range():
    print("\n=== Range Example ===")
    print(Stream.range(0, 10).to_list())


def example_filter():
    print("\n=== Filter Example ===")
    print(Stream.of(120, 410, 85, 32, 314, 12).filter(lambda x: x > 100).to_list())
    print(Stream.range(0, 10).filter(lambda x: x % 3 == 0).to_list())


def example_map():
    """map can change the element type."""
    print("\n=== Map Example ===")
    print(Stream.of("3", "4", "5").map(int).map(lambda x: x + 10).to_list())


def example_limit_and_skip():
    print("\n=== Limit / Skip Example ===")
    print(Stream.of(120, 410, 85, 32, 314, 12).limit(5).to_list())
    print(Stream.range(0, 10).skip(2).limit(5).to_list())


def example_sorted_and_distinct():
    print("\n=== Sorted / Distinct Example ===")
    print(Stream.of(120, 410, 85, 32, 314, 12).sorted().to_list())
    print(Stream.of(2, 1, 8, 1, 3, 2).distinct().to_list())
    print(Stream.of(2, 1, 8, 1, 3, 2).distinct().sorted().to_list())


def example_peek():
    """Elements flow through every stage one at a time."""
    print("\n=== Peek Example ===")

    Stream.of(0, 1, 2, 5) \
        .peek(lambda x: print(f"num: {x}")) \
        .distinct() \
        .peek(lambda x: print(f"after distinct: {x}")) \
        .map(lambda x: x + 10) \
        .for_each(lambda x: print(f"after +10: {x}"))


def example_take_while():
    print("\n=== Take While Example ===")
    print(Stream.of(1, 2, 3, 4, 2, 5).take_while(lambda x: x < 3).to_list())


def example_count():
    print("\n=== Count Example ===")
    count = Stream.of(0, 2, 9, 13, 5, 11) \
        .filter(lambda x: x < 10) \
        .sorted() \
        .peek(lambda x: print(x, end="")) \
        .count()
    print(f"\ncount: {count}")


def example_to_array():
    print("\n=== To Array Example ===")
    print(Stream.of("a", "b", "c", "d").to_array())


def example_find_first():
    print("\n=== Find First Example ===")
    print(Stream.range(4, 65536).find_first())
    print(Stream.empty().find_first(default="nothing"))


def example_sum_and_statistics():
    print("\n=== Sum / Statistics Example ===")
    print(Stream.range(1, 10).sum())

    stats = Stream.range(2, 16).statistics()
    print(f"  count: {stats.count}")
    print(f"    sum: {stats.sum}")
    print(f"average: {stats.average:.1f}")
    print(f"    min: {stats.min}")
    print(f"    max: {stats.max}")


def example_to_collection():
    print("\n=== To Collection Example ===")
    print(Stream.of(1, 2, 3, 4, 5).to_collection(deque))
    print(Stream.of(1, 2, 3, 4, 5).to_set())


def example_joining():
    print("\n=== Joining Example ===")
    print(Stream.of("a", "b", "c", "d").join())
    print(Stream.of("a", "b", "c", "d").join("-"))
    print(Stream.of("a", "b", "c", "d").join(" -> ", "[ ", " ]"))


def example_summing_and_averaging():
    print("\n=== Summing / Averaging Example ===")
    print(Stream.of("1", "2", "3", "4").collect(collectors.summing(int)))
    print(Stream.of("1", "2", "3", "4").collect(collectors.averaging(int)))
    print(Stream.of("1", "2", "3", "4").collect(collectors.counting()))


def example_grouping():
    print("\n=== Partitioning / Grouping Example ===")
    words = ("ab", "c", "def", "gh", "ijk", "l", "mnop")
    print(Stream.of(*words).partition_by(lambda s: len(s) <= 2))
    print(Stream.of(*words).group_count_by(len))
    print(Stream.of(*words).summing_by(len, lambda s: ord(s[0])))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    example_base()
    example_generate()
    example_iterate()
    example_concat()
    example_builder()
    example_range()
    example_filter()
    example_map()
    example_limit_and_skip()
    example_sorted_and_distinct()
    example_peek()
    example_take_while()
    example_count()
    example_to_array()
    example_find_first()
    example_sum_and_statistics()
    example_to_collection()
    example_joining()
    example_summing_and_averaging()
    example_grouping()
