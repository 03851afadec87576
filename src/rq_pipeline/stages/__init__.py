"""The built-in stage catalogue and the registry that names it."""

from rq_pipeline.stages.registry import StageRegistry, registry, stage

# Importing the catalogue modules registers their stages
from rq_pipeline.stages import bulk, generators, sources, streaming  # noqa: F401

__all__ = [
    "StageRegistry",
    "registry",
    "stage",
]
