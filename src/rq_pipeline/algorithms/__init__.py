"""Pure functions over values that the stage catalogue is written against."""

from rq_pipeline.algorithms.iteratees import iteratee, is_match, property_getter
from rq_pipeline.algorithms.ordering import sort_key, order_by
from rq_pipeline.algorithms.paths import get_path, select_path, update_path
from rq_pipeline.algorithms.sequences import (
    chunk,
    count_by,
    difference,
    drop_right,
    flatten_deep,
    flatten_depth,
    group_by,
    max_of,
    mean_of,
    min_of,
    sample,
    sample_size,
    shuffle,
    sum_of,
    take_right,
    union,
    uniq_by,
)

__all__ = [
    "iteratee",
    "is_match",
    "property_getter",
    "sort_key",
    "order_by",
    "get_path",
    "select_path",
    "update_path",
    "chunk",
    "count_by",
    "difference",
    "drop_right",
    "flatten_deep",
    "flatten_depth",
    "group_by",
    "max_of",
    "mean_of",
    "min_of",
    "sample",
    "sample_size",
    "shuffle",
    "sum_of",
    "take_right",
    "union",
    "uniq_by",
]
