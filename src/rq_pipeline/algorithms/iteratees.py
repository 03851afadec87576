"""
Iteratee shorthands accepted wherever a stage takes a function.

    callable      used as is, called with (value) or (value, index)
    None          identity
    "a.b"         property getter
    ["a", 1]      matches-property predicate
    {"a": 1}      matches-object predicate (partial deep match)
"""

import inspect
from typing import Any, Callable

from rq_pipeline.algorithms.paths import get_in
from rq_pipeline.values import is_equal

Iteratee = Callable[..., Any]


def _accepts_index(func: Callable) -> bool:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return False
    positional = 0
    for param in signature.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return True
        if param.kind in (inspect.Parameter.POSITIONAL_ONLY,
                          inspect.Parameter.POSITIONAL_OR_KEYWORD):
            positional += 1
    return positional >= 2


def is_match(value: Any, source: Any) -> bool:
    """Check whether ``value`` contains everything in ``source``."""
    if isinstance(source, dict):
        if not isinstance(value, dict):
            return False
        return all(key in value and is_match(value[key], expected)
                   for key, expected in source.items())
    return is_equal(value, source)


def property_getter(path: Any) -> Callable[[Any], Any]:
    keys = path.split(".") if isinstance(path, str) else [path]
    return lambda value: get_in(value, keys)


def iteratee(spec: Any = None) -> Callable[[Any, int], Any]:
    """Normalize a shorthand into a function of (value, index)."""
    if spec is None:
        return lambda value, index=0: value

    if callable(spec):
        if _accepts_index(spec):
            return lambda value, index=0: spec(value, index)
        return lambda value, index=0: spec(value)

    if isinstance(spec, dict):
        return lambda value, index=0: is_match(value, spec)

    if isinstance(spec, list) and len(spec) == 2:
        getter = property_getter(spec[0])
        expected = spec[1]
        return lambda value, index=0: is_match(getter(value), expected)

    if isinstance(spec, (str, int)) and not isinstance(spec, bool):
        getter = property_getter(spec)
        return lambda value, index=0: getter(value)

    raise TypeError(f"unsupported iteratee: {spec!r}")
