"""
Streaming stages: one pull loop, pushing as values arrive.

These hold O(1) state, work on unbounded input, and the ones that stop
early (take, take_while, every, some, find) release their upstream as soon
as they return.
"""

import operator
from typing import Any, Callable

from rq_pipeline.algorithms import iteratee, select_path, update_path
from rq_pipeline.stages.registry import stage
from rq_pipeline.values import (
    dumps, is_equal as values_equal, is_number, same_value_zero,
    to_integer, to_number, truthy
)


@stage("id", aliases=("identity",))
def id_(ctx):
    """Pass every value through untouched."""
    while ctx.pull():
        yield from ctx.push(ctx.value)


@stage()
def select(ctx, path):
    """Push the field at ``path`` of each value, skipping values without it."""
    while ctx.pull():
        yield from ctx.spread(select_path(ctx.value, path))


@stage()
def modify(ctx, path, func):
    """Replace the field at ``path`` with ``func(field)``; other values pass as is."""
    func = iteratee(func)
    while ctx.pull():
        yield from ctx.push(update_path(ctx.value, path, lambda field: func(field)))


@stage()
def tee(ctx):
    """Log each value at info level and pass it on."""
    while ctx.pull():
        ctx.log.info(dumps(ctx.value))
        yield from ctx.push(ctx.value)


@stage()
def spread(ctx):
    """Push the elements of each list separately; other values pass through."""
    while ctx.pull():
        if isinstance(ctx.value, list):
            yield from ctx.spread(ctx.value)
        else:
            yield from ctx.push(ctx.value)


@stage("map")
def map_(ctx, func=None):
    func = iteratee(func)
    i = 0
    while ctx.pull():
        yield from ctx.push(func(ctx.value, i))
        i += 1


@stage("filter")
def filter_(ctx, predicate=None):
    predicate = iteratee(predicate)
    i = 0
    while ctx.pull():
        if truthy(predicate(ctx.value, i)):
            yield from ctx.push(ctx.value)
        i += 1


@stage()
def reject(ctx, predicate=None):
    """The opposite of filter: push values the predicate is falsey for."""
    predicate = iteratee(predicate)
    i = 0
    while ctx.pull():
        if not truthy(predicate(ctx.value, i)):
            yield from ctx.push(ctx.value)
        i += 1


@stage()
def compact(ctx):
    """Drop falsey values: null, false, 0, NaN and ""."""
    while ctx.pull():
        if truthy(ctx.value):
            yield from ctx.push(ctx.value)


@stage()
def take(ctx, n=1):
    """Push the first ``n`` values, then stop and release upstream."""
    n = to_integer(n)
    while n > 0 and ctx.pull():
        yield from ctx.push(ctx.value)
        n -= 1


@stage()
def drop(ctx, n=1):
    """Skip the first ``n`` values and push the rest."""
    n = to_integer(n)
    while n > 0 and ctx.pull():
        n -= 1
    yield from id_(ctx)


@stage("take_while", aliases=("takeWhile",))
def take_while(ctx, predicate=None):
    predicate = iteratee(predicate)
    i = 0
    while ctx.pull():
        if not truthy(predicate(ctx.value, i)):
            return
        yield from ctx.push(ctx.value)
        i += 1


@stage("drop_while", aliases=("dropWhile",))
def drop_while(ctx, predicate=None):
    predicate = iteratee(predicate)
    i = 0
    while ctx.pull():
        if not truthy(predicate(ctx.value, i)):
            yield from ctx.push(ctx.value)
            break
        i += 1
    yield from id_(ctx)


@stage()
def chunk(ctx, size=1):
    """
    Group values into lists of ``size``; the last list holds the remainder.
    A size below 1 pushes nothing.
    """
    size = max(0, to_integer(size))
    if size <= 0:
        return

    buffer = []
    while ctx.pull():
        buffer.append(ctx.value)
        if len(buffer) >= size:
            yield from ctx.push(buffer)
            buffer = []

    if buffer:
        yield from ctx.push(buffer)


@stage("every", aliases=("all",))
def every(ctx, predicate=None):
    """Push true if the predicate holds for every value; stops at the first miss."""
    predicate = iteratee(predicate)
    i = 0
    while ctx.pull():
        if not truthy(predicate(ctx.value, i)):
            yield from ctx.push(False)
            return
        i += 1
    yield from ctx.push(True)


@stage("some", aliases=("any",))
def some(ctx, predicate=None):
    """Push true as soon as the predicate holds for a value, else false."""
    predicate = iteratee(predicate)
    i = 0
    while ctx.pull():
        if truthy(predicate(ctx.value, i)):
            yield from ctx.push(True)
            return
        i += 1
    yield from ctx.push(False)


@stage()
def find(ctx, predicate=None):
    """Push the first value the predicate holds for, if any."""
    predicate = iteratee(predicate)
    i = 0
    while ctx.pull():
        if truthy(predicate(ctx.value, i)):
            yield from ctx.push(ctx.value)
            return
        i += 1


@stage()
def eq(ctx, other):
    """SameValueZero comparison of each value against ``other``."""
    while ctx.pull():
        yield from ctx.push(same_value_zero(ctx.value, other))


@stage("is_equal", aliases=("isEqual",))
def is_equal(ctx, other):
    """Deep structural comparison of each value against ``other``."""
    while ctx.pull():
        yield from ctx.push(values_equal(ctx.value, other))


def _relational(op: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def compare(a, b):
        if isinstance(a, str) and isinstance(b, str):
            return op(a, b)
        if not (is_number(a) and is_number(b)):
            a, b = to_number(a), to_number(b)
        return op(a, b)
    return compare


_gt = _relational(operator.gt)
_gte = _relational(operator.ge)
_lt = _relational(operator.lt)
_lte = _relational(operator.le)


@stage()
def gt(ctx, other):
    while ctx.pull():
        yield from ctx.push(_gt(ctx.value, other))


@stage()
def gte(ctx, other):
    while ctx.pull():
        yield from ctx.push(_gte(ctx.value, other))


@stage()
def lt(ctx, other):
    while ctx.pull():
        yield from ctx.push(_lt(ctx.value, other))


@stage()
def lte(ctx, other):
    while ctx.pull():
        yield from ctx.push(_lte(ctx.value, other))
