#!/usr/bin/env python3
"""
Basic usage examples for rq-pipeline.
"""

import os
import math
import logging
import tempfile

from rq_pipeline import Pipeline, PipelineConfig, Stage, stage


USERS = [
    {"user": "barney", "age": 36, "active": True},
    {"user": "fred", "age": 40, "active": False},
    {"user": "pebbles", "age": 1, "active": True},
]


@stage("double")
def double(ctx):
    """Custom stage: push each value doubled."""
    while ctx.pull():
        yield from ctx.push(ctx.value * 2)


def example_named_stages():
    """Example: Chain built-in stages by name."""
    print("\n=== Named Stages Example ===")

    result = Pipeline.from_iterable(USERS, ("filter", "active"), ("map", "user")).run()
    print(f"Active users: {result}")

    result = Pipeline.from_iterable(USERS, ("sort_by", "age"), ("map", "age"), "collect").run()
    print(f"Ages, sorted: {result}")

    result = Pipeline.from_iterable([6.1, 4.2, 6.3], ("group_by", math.floor)).run()
    print(f"Grouped by integer part: {result}")


def example_custom_stage():
    """Example: Register a stage with the decorator."""
    print("\n=== Custom Stage Example ===")

    result = Pipeline.from_iterable([1, 2, 3], "double", ("chunk", 2)).run()
    print(f"Doubled and chunked: {result}")


def example_infinite_source():
    """Example: Bound an unbounded generator with take."""
    print("\n=== Infinite Source Example ===")

    PipelineConfig.set_defaults(random_seed=7)
    pipeline = Pipeline.build([("random", 1, 6), ("take", 5)])
    print(f"Five dice rolls: {pipeline.run()}")

    for stats in pipeline.stats():
        print(f"  {stats}")
    print(f"Generator state after take: {pipeline.stages[0].state.name}")


def example_lazy_iteration():
    """Example: Consume a pipeline lazily."""
    print("\n=== Lazy Iteration Example ===")

    def counter(ctx):
        n = 0
        while True:
            n += 1
            yield from ctx.push(n)

    with Pipeline([Stage("counter", counter)]) as pipeline:
        for value in pipeline:
            if value > 3:
                break
            print(f"Got {value}")


def example_files():
    """Example: Write JSON Lines and read them back."""
    print("\n=== File Example ===")

    path = os.path.join(tempfile.mkdtemp(), "users.jsonl")
    count = Pipeline.from_iterable(USERS, "id").to_jsonl(path)
    print(f"Wrote {count} records to {path}")

    result = Pipeline.build([("jsonl", path), ("count_by", "active")]).run()
    print(f"Active counts: {result}")


def main():
    """Run all examples."""
    print("=== rq-pipeline Examples ===")

    logging.basicConfig(level=logging.INFO)

    example_named_stages()
    example_custom_stage()
    example_infinite_source()
    example_lazy_iteration()
    example_files()

    print("\n=== All examples completed! ===")


if __name__ == "__main__":
    main()
