"""
rq-pipeline: a cooperative pull/push streaming runtime for structured values.

Stages are generator functions that pull values from upstream and push
values downstream through their Context. A Pipeline chains stages and is
driven lazily from its terminal end, one stage running at a time.
"""

from rq_pipeline.config import PipelineConfig, config
from rq_pipeline.core import Context, Pipeline, Stage, StageState, StageStats
from rq_pipeline.exceptions import (
    CollectLimitError,
    PipelineError,
    PipelineStateError,
    StageDefinitionError,
    StageError,
    StageNotFoundError,
    ValueTypeError,
)
from rq_pipeline.stages import StageRegistry, registry, stage
from rq_pipeline.values import ValueKind, is_equal, kind_of, same_value_zero

__version__ = "0.1.0"
__license__ = "MIT"

__all__ = [
    "PipelineConfig",
    "config",
    "Context",
    "Pipeline",
    "Stage",
    "StageState",
    "StageStats",
    "CollectLimitError",
    "PipelineError",
    "PipelineStateError",
    "StageDefinitionError",
    "StageError",
    "StageNotFoundError",
    "ValueTypeError",
    "StageRegistry",
    "registry",
    "stage",
    "ValueKind",
    "is_equal",
    "kind_of",
    "same_value_zero",
]
