"""
Total ordering over values and stable multi-key sorting.
"""

from typing import Any, Iterable, List, Optional, Sequence, Tuple

from rq_pipeline.algorithms.iteratees import iteratee
from rq_pipeline.exceptions import ValueTypeError
from rq_pipeline.values import ValueKind, is_nan, kind_of

# booleans < numbers < NaN < strings < lists < maps < other objects < null
_RANKS = {
    ValueKind.BOOL: 0,
    ValueKind.NUMBER: 1,
    ValueKind.STRING: 3,
    ValueKind.LIST: 4,
    ValueKind.MAP: 5,
    ValueKind.NULL: 7,
}
_NAN_RANK = 2
_OBJECT_RANK = 6


def sort_key(value: Any) -> Tuple[int, Any]:
    """
    Map a value to a key that orders every pair of values.

    Key functions may return tuples, which sort like lists. Other objects
    outside the value model sort after maps and compare with each other as is.
    """
    if isinstance(value, tuple):
        return (_RANKS[ValueKind.LIST], tuple(sort_key(item) for item in value))
    try:
        kind = kind_of(value)
    except ValueTypeError:
        return (_OBJECT_RANK, value)
    if kind is ValueKind.NUMBER:
        if is_nan(value):
            return (_NAN_RANK, 0)
        return (_RANKS[kind], value)
    if kind is ValueKind.BOOL:
        return (_RANKS[kind], int(value))
    if kind is ValueKind.STRING:
        return (_RANKS[kind], value)
    if kind is ValueKind.LIST:
        return (_RANKS[kind], tuple(sort_key(item) for item in value))
    if kind is ValueKind.MAP:
        return (_RANKS[kind], tuple((key, sort_key(item)) for key, item in value.items()))
    return (_RANKS[kind], 0)


def order_by(values: Iterable[Any],
             iteratees: Optional[Sequence[Any]] = None,
             orders: Optional[Sequence[str]] = None) -> List[Any]:
    """
    Stable sort by several keys.

    Args:
        values: Values to sort
        iteratees: Key shorthands, most significant first (identity if empty)
        orders: "asc" or "desc" per iteratee; missing entries sort ascending

    Returns:
        New sorted list
    """
    funcs = [iteratee(spec) for spec in (iteratees or [None])]
    orders = list(orders or [])
    result = list(values)

    # Least significant key first; each sort keeps the order of ties
    for position in reversed(range(len(funcs))):
        func = funcs[position]
        descending = position < len(orders) and str(orders[position]).lower() == "desc"
        result.sort(key=lambda value: sort_key(func(value)), reverse=descending)

    return result
