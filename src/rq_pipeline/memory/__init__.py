"""Memory accounting for bulk stages."""

from rq_pipeline.memory.monitor import (
    MemoryInfo,
    CollectGuard,
    current_memory,
)

__all__ = [
    "MemoryInfo",
    "CollectGuard",
    "current_memory",
]
