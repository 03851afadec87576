"""
Bulk stages: collect the whole input, compute, then push.

Each of these materializes its input with ``ctx.collect()`` and so needs a
finite upstream. Scalar results go out as a single push; sequence results
are re-linearized with ``ctx.spread``.
"""

from rq_pipeline import algorithms
from rq_pipeline.stages.registry import stage
from rq_pipeline.values import to_integer


@stage()
def collect(ctx):
    """Push the whole input as one list."""
    yield from ctx.push(ctx.collect())


@stage("count", aliases=("size",))
def count(ctx):
    yield from ctx.push(len(ctx.collect()))


@stage()
def sort(ctx):
    """Stable ascending sort of the input."""
    yield from ctx.spread(algorithms.order_by(ctx.collect()))


@stage("sort_by", aliases=("sortBy",))
def sort_by(ctx, *iteratees):
    # sort_by ["u", "g"] means two keys, not a matches-property pair
    if len(iteratees) == 1 and isinstance(iteratees[0], list):
        iteratees = iteratees[0]
    yield from ctx.spread(algorithms.order_by(ctx.collect(), list(iteratees)))


@stage("order_by", aliases=("orderBy",))
def order_by(ctx, iteratees=None, orders=None):
    if iteratees is not None and not isinstance(iteratees, list):
        iteratees = [iteratees]
    if isinstance(orders, str):
        orders = [orders]
    yield from ctx.spread(algorithms.order_by(ctx.collect(), iteratees, orders))


@stage()
def uniq(ctx):
    """Keep the first occurrence of each value (SameValueZero)."""
    yield from ctx.spread(algorithms.uniq_by(ctx.collect()))


@stage("uniq_by", aliases=("uniqBy",))
def uniq_by(ctx, key=None):
    yield from ctx.spread(algorithms.uniq_by(ctx.collect(), key))


@stage()
def flatten(ctx):
    """Flatten the input one level: list values are spliced into the stream."""
    yield from ctx.spread(algorithms.flatten_depth(ctx.collect(), 1))


@stage("flatten_deep", aliases=("flattenDeep",))
def flatten_deep(ctx):
    yield from ctx.spread(algorithms.flatten_deep(ctx.collect()))


@stage("flatten_depth", aliases=("flattenDepth",))
def flatten_depth(ctx, depth=1):
    yield from ctx.spread(algorithms.flatten_depth(ctx.collect(), depth))


@stage()
def reverse(ctx):
    yield from ctx.spread(reversed(ctx.collect()))


@stage("take_right", aliases=("takeRight",))
def take_right(ctx, n=1):
    yield from ctx.spread(algorithms.take_right(ctx.collect(), n))


@stage("drop_right", aliases=("dropRight",))
def drop_right(ctx, n=1):
    yield from ctx.spread(algorithms.drop_right(ctx.collect(), n))


@stage("head", aliases=("first",))
def head(ctx):
    """Push the first value, or null for an empty input."""
    values = ctx.collect()
    yield from ctx.push(values[0] if values else None)


@stage()
def last(ctx):
    values = ctx.collect()
    yield from ctx.push(values[-1] if values else None)


@stage()
def nth(ctx, n=0):
    """Push the value at index ``n``; negative ``n`` counts from the end."""
    values = ctx.collect()
    n = to_integer(n)
    yield from ctx.push(values[n] if -len(values) <= n < len(values) else None)


@stage()
def difference(ctx, values):
    yield from ctx.spread(algorithms.difference(ctx.collect(), values))


@stage()
def union(ctx, values):
    yield from ctx.spread(algorithms.union(ctx.collect(), values))


@stage("group_by", aliases=("groupBy",))
def group_by(ctx, key=None):
    yield from ctx.push(algorithms.group_by(ctx.collect(), key))


@stage("count_by", aliases=("countBy",))
def count_by(ctx, key=None):
    yield from ctx.push(algorithms.count_by(ctx.collect(), key))


@stage("sum")
def sum_(ctx):
    yield from ctx.push(algorithms.sum_of(ctx.collect()))


@stage()
def mean(ctx):
    """Push the arithmetic mean, or null for an empty input."""
    yield from ctx.push(algorithms.mean_of(ctx.collect()))


@stage("min")
def min_(ctx):
    yield from ctx.push(algorithms.min_of(ctx.collect()))


@stage("max")
def max_(ctx):
    yield from ctx.push(algorithms.max_of(ctx.collect()))


@stage()
def shuffle(ctx):
    yield from ctx.spread(algorithms.shuffle(ctx.collect()))


@stage()
def sample(ctx):
    yield from ctx.push(algorithms.sample(ctx.collect()))


@stage("sample_size", aliases=("sampleSize",))
def sample_size(ctx, n=1):
    yield from ctx.push(algorithms.sample_size(ctx.collect(), n))
