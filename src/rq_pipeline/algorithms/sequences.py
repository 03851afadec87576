"""
Whole-sequence algorithms used by the bulk stages.

All functions are pure: they take a materialized list and return a new one.
Membership tests use SameValueZero, so lists and maps are only ever equal
to themselves.
"""

import math
from collections import defaultdict
from typing import Any, Dict, Hashable, Iterable, List, Optional

from rq_pipeline.algorithms.iteratees import iteratee
from rq_pipeline.algorithms.ordering import sort_key
from rq_pipeline.config import config
from rq_pipeline.exceptions import ValueTypeError
from rq_pipeline.values import ValueKind, is_nan, kind_of, to_integer, to_key_string


def identity_key(value: Any) -> Hashable:
    """Hashable key such that equal keys <=> same_value_zero."""
    try:
        kind = kind_of(value)
    except ValueTypeError:
        # Tuples and other hashable key-function results compare by value
        return ("object", value)
    if kind is ValueKind.NUMBER:
        # 1 == 1.0 and 0.0 == -0.0 hash alike already
        return (kind, "NaN") if is_nan(value) else (kind, value)
    if kind in (ValueKind.LIST, ValueKind.MAP):
        return (kind, id(value))
    return (kind, value)


def chunk(values: List[Any], size: Any = 1) -> List[List[Any]]:
    size = max(0, to_integer(size))
    if size == 0:
        return []
    return [values[i:i + size] for i in range(0, len(values), size)]


def flatten_depth(values: Iterable[Any], depth: Any = 1) -> List[Any]:
    depth = to_integer(depth)
    result = []
    for value in values:
        if isinstance(value, list) and depth > 0:
            result.extend(flatten_depth(value, depth - 1))
        else:
            result.append(value)
    return result


def flatten_deep(values: Iterable[Any]) -> List[Any]:
    return flatten_depth(values, math.inf)


def uniq_by(values: Iterable[Any], key: Any = None) -> List[Any]:
    """Keep the first occurrence of each key."""
    func = iteratee(key)
    seen = set()
    result = []
    for value in values:
        marker = identity_key(func(value))
        if marker not in seen:
            seen.add(marker)
            result.append(value)
    return result


def difference(values: Iterable[Any], others: Iterable[Any]) -> List[Any]:
    excluded = {identity_key(other) for other in others}
    return [value for value in values if identity_key(value) not in excluded]


def union(values: Iterable[Any], others: Iterable[Any]) -> List[Any]:
    return uniq_by(list(values) + list(others or []))


def take_right(values: List[Any], n: Any = 1) -> List[Any]:
    n = to_integer(n)
    if n <= 0:
        return []
    return values[-n:]


def drop_right(values: List[Any], n: Any = 1) -> List[Any]:
    n = to_integer(n)
    if n <= 0:
        return list(values)
    return values[:-n]


def group_by(values: Iterable[Any], key: Any = None) -> Dict[str, List[Any]]:
    func = iteratee(key)
    groups = defaultdict(list)
    for value in values:
        groups[to_key_string(func(value))].append(value)
    return dict(groups)


def count_by(values: Iterable[Any], key: Any = None) -> Dict[str, int]:
    func = iteratee(key)
    counts: Dict[str, int] = {}
    for value in values:
        group = to_key_string(func(value))
        counts[group] = counts.get(group, 0) + 1
    return counts


def sum_of(values: Iterable[Any]) -> Any:
    total = 0
    for value in values:
        if value is not None:
            total = total + value
    return total


def mean_of(values: List[Any]) -> Optional[float]:
    if not values:
        return None
    return sum_of(values) / len(values)


def _comparable(values: Iterable[Any]) -> List[Any]:
    return [value for value in values if value is not None and not is_nan(value)]


def min_of(values: Iterable[Any]) -> Optional[Any]:
    candidates = _comparable(values)
    return min(candidates, key=sort_key) if candidates else None


def max_of(values: Iterable[Any]) -> Optional[Any]:
    candidates = _comparable(values)
    return max(candidates, key=sort_key) if candidates else None


def shuffle(values: Iterable[Any]) -> List[Any]:
    result = list(values)
    config.get_random().shuffle(result)
    return result


def sample_size(values: List[Any], n: Any = 1) -> List[Any]:
    n = max(0, min(to_integer(n), len(values)))
    return config.get_random().sample(values, n)


def sample(values: List[Any]) -> Optional[Any]:
    if not values:
        return None
    return config.get_random().choice(values)
