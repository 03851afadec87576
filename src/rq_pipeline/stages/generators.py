"""
Unbounded generator stages.

They ignore upstream and push forever; they stop only when a downstream
consumer (take, find, ...) finishes and cancels them. Never feed them into a
bulk stage without a bound in between.
"""

import time

from rq_pipeline.config import config
from rq_pipeline.stages.registry import stage
from rq_pipeline.values import is_number, to_number


@stage()
def now(ctx):
    """Push the current time in milliseconds since the Unix epoch."""
    while True:
        yield from ctx.push(int(time.time() * 1000))


def _random_between(rng, lower, upper, floating):
    if isinstance(lower, float) or isinstance(upper, float):
        floating = True
    if lower > upper:
        lower, upper = upper, lower
    if floating:
        return rng.uniform(lower, upper)
    return rng.randint(int(lower), int(upper))


@stage()
def random(ctx, lower=None, upper=None, floating=False):
    """
    Push random numbers between ``lower`` and ``upper`` inclusive.

    With one bound the range is 0..bound; with none it is 0..1. Floats are
    produced when ``floating`` is true or either bound is a float. A boolean
    in place of a bound is taken as ``floating``.
    """
    if isinstance(upper, bool):
        upper, floating = None, upper
    if isinstance(lower, bool):
        lower, floating = None, lower

    if lower is None and upper is None:
        lower, upper = 0, 1
    elif upper is None:
        lower, upper = 0, lower
    lower = lower if is_number(lower) else to_number(lower)
    upper = upper if is_number(upper) else to_number(upper)

    rng = config.get_random()
    while True:
        yield from ctx.push(_random_between(rng, lower, upper, floating))
