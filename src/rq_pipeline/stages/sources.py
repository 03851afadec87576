"""
Source stages that feed values into the head of a pipeline.

File sources keep their file open inside a ``with`` block for as long as the
stage is live, so the handle is closed on exhaustion, on cancellation and on
error unwind alike.
"""

import json
from pathlib import Path

from rq_pipeline.stages.registry import stage


@stage()
def iterate(ctx, values):
    """Push each item of a Python iterable."""
    for value in values:
        yield from ctx.push(value)


@stage()
def lines(ctx, path, encoding='utf-8'):
    """Push each line of a text file without its line terminator."""
    with open(Path(path), 'r', encoding=encoding) as f:
        for line in f:
            yield from ctx.push(line.rstrip('\n\r'))


@stage()
def jsonl(ctx, path):
    """Push one value per non-blank line of a JSON Lines file."""
    with open(Path(path), 'r') as f:
        for line in f:
            line = line.strip()
            if line:
                yield from ctx.push(json.loads(line))
