"""
The value model: the structured data that flows between stages.

A value is one of six kinds, each represented by a plain Python object:

    NULL    None
    BOOL    bool
    NUMBER  int or float (never bool)
    STRING  str
    LIST    list of values
    MAP     dict of str -> value, insertion ordered

Stages receive and push these objects directly. The helpers here dispatch on
``kind_of`` rather than scattering isinstance checks through the catalogue.
"""

import json
import re
import math
from enum import Enum
from typing import Any, Union

from rq_pipeline.exceptions import ValueTypeError

Value = Union[None, bool, int, float, str, list, dict]


class ValueKind(Enum):
    """The closed set of value kinds."""
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    LIST = "list"
    MAP = "map"


def kind_of(value: Any) -> ValueKind:
    """Classify a value, raising ValueTypeError for anything outside the model."""
    if value is None:
        return ValueKind.NULL
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, list):
        return ValueKind.LIST
    if isinstance(value, dict):
        return ValueKind.MAP
    raise ValueTypeError(f"{type(value).__name__} is not a pipeline value: {value!r}")


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def validate(value: Any) -> Value:
    """Check a value deeply and return it unchanged."""
    kind = kind_of(value)
    if kind is ValueKind.LIST:
        for item in value:
            validate(item)
    elif kind is ValueKind.MAP:
        for key, item in value.items():
            if not isinstance(key, str):
                raise ValueTypeError(f"map keys must be strings, got {key!r}")
            validate(item)
    return value


def same_value_zero(a: Any, b: Any) -> bool:
    """
    SameValueZero comparison.

    NaN equals NaN and +0 equals -0. Scalars compare by value; lists and maps
    compare by identity, so two separately built maps are never equal here.
    """
    kind_a, kind_b = kind_of(a), kind_of(b)
    if kind_a is not kind_b:
        return False
    if kind_a is ValueKind.NUMBER:
        if is_nan(a) and is_nan(b):
            return True
        return a == b
    if kind_a in (ValueKind.LIST, ValueKind.MAP):
        return a is b
    return a == b


def is_equal(a: Any, b: Any) -> bool:
    """Recursive structural equality using SameValueZero for scalars."""
    kind_a, kind_b = kind_of(a), kind_of(b)
    if kind_a is not kind_b:
        return False
    if kind_a is ValueKind.LIST:
        return len(a) == len(b) and all(is_equal(x, y) for x, y in zip(a, b))
    if kind_a is ValueKind.MAP:
        if a.keys() != b.keys():
            return False
        return all(is_equal(a[key], b[key]) for key in a)
    return same_value_zero(a, b)


def truthy(value: Any) -> bool:
    """
    Truthiness with null, false, 0, NaN and "" falsey; containers always truthy.

    Objects outside the value model (a regex match or set returned by a
    predicate) use Python truthiness.
    """
    try:
        kind = kind_of(value)
    except ValueTypeError:
        return bool(value)
    if kind is ValueKind.NULL:
        return False
    if kind is ValueKind.NUMBER:
        return value != 0 and not is_nan(value)
    if kind in (ValueKind.LIST, ValueKind.MAP):
        return True
    return bool(value)


# Numeric string grammar: decimal literals, Infinity, and 0x/0o/0b integers
_DECIMAL = re.compile(r'[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?')
_INFINITY = re.compile(r'([+-]?)Infinity')
_PREFIXED = re.compile(r'0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)')


def _parse_number(text: str) -> Union[int, float]:
    """Parse a trimmed numeric string; NaN if it is not one."""
    if _PREFIXED.fullmatch(text):
        return int(text, 0)
    match = _INFINITY.fullmatch(text)
    if match:
        return -math.inf if match.group(1) == '-' else math.inf
    if not _DECIMAL.fullmatch(text):
        return math.nan
    if any(c in text for c in '.eE'):
        return float(text)
    return int(text)


def to_number(value: Any) -> Union[int, float]:
    kind = kind_of(value)
    if kind is ValueKind.NUMBER:
        return value
    if kind is ValueKind.NULL:
        return 0
    if kind is ValueKind.BOOL:
        return int(value)
    if kind is ValueKind.STRING:
        text = value.strip()
        return _parse_number(text) if text else 0
    return math.nan


def to_integer(value: Any) -> int:
    """Convert to an integer, truncating toward zero; NaN becomes 0."""
    number = to_number(value)
    if is_nan(number):
        return 0
    if math.isinf(number):
        number = math.copysign(1.7976931348623157e308, number)
    return int(number)


def _format_number(number: Union[int, float]) -> str:
    if isinstance(number, int):
        return str(number)
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if number.is_integer() and abs(number) < 1e21:
        return str(int(number))
    return repr(number)


def to_key_string(value: Any) -> str:
    """Stringify a value for use as a map key (group/count keys)."""
    try:
        kind = kind_of(value)
    except ValueTypeError:
        # Key functions may return plain Python objects such as tuples
        return str(value)
    if kind is ValueKind.STRING:
        return value
    if kind is ValueKind.NUMBER:
        return _format_number(value)
    if kind is ValueKind.BOOL:
        return "true" if value else "false"
    if kind is ValueKind.NULL:
        return "null"
    return dumps(value)


def dumps(value: Any) -> str:
    """Serialize a value as compact JSON."""
    return json.dumps(value, separators=(',', ':'), ensure_ascii=False)
