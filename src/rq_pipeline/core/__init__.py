"""The pull/push streaming protocol: stages, contexts and the pipeline driver."""

from rq_pipeline.core.stage import (
    Stage,
    StageState,
    StageStats,
)
from rq_pipeline.core.context import Context
from rq_pipeline.core.pipeline import Pipeline

__all__ = [
    "Stage",
    "StageState",
    "StageStats",
    "Context",
    "Pipeline",
]
