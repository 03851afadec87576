"""Process memory snapshots and the bounded-collect guard."""

import time
import logging
from dataclasses import dataclass
from typing import Optional

import psutil

from rq_pipeline.config import config
from rq_pipeline.exceptions import CollectLimitError

logger = logging.getLogger(__name__)


@dataclass
class MemoryInfo:
    """Memory usage information."""
    rss: int
    total: int
    available: int
    percent: float
    timestamp: float

    @property
    def rss_mb(self) -> float:
        return self.rss / (1024 ** 2)

    @property
    def available_gb(self) -> float:
        return self.available / (1024 ** 3)

    def __str__(self) -> str:
        return (f"Memory: {self.rss_mb:.1f} MB resident, "
                f"system {self.percent:.1f}% used "
                f"({self.available_gb:.2f} GB available)")


def current_memory() -> MemoryInfo:
    """Get current process and system memory information."""
    mem = psutil.virtual_memory()
    rss = psutil.Process().memory_info().rss
    return MemoryInfo(
        rss=rss,
        total=mem.total,
        available=mem.available,
        percent=mem.percent,
        timestamp=time.time()
    )


class CollectGuard:
    """
    Enforce the optional bounds on a single collect() call.

    With no limits configured the guard never trips, so collecting an
    unbounded stream keeps growing until the process runs out of memory.
    """

    def __init__(self,
                 stage_name: str,
                 max_items: Optional[int] = None,
                 max_memory: Optional[int] = None,
                 check_interval: Optional[int] = None):
        """
        Initialize collect guard.

        Args:
            stage_name: Name of the collecting stage, used in error messages
            max_items: Maximum number of collected values (None for no limit)
            max_memory: Process RSS ceiling in bytes (None for no limit)
            check_interval: Collected items between RSS checks
        """
        self.stage_name = stage_name
        self.max_items = max_items
        self.max_memory = max_memory
        self.check_interval = max(1, check_interval or config.memory_check_interval)

    @classmethod
    def from_config(cls, stage_name: str) -> 'CollectGuard':
        return cls(
            stage_name,
            max_items=config.collect_limit,
            max_memory=config.collect_memory_limit,
            check_interval=config.memory_check_interval,
        )

    @property
    def enabled(self) -> bool:
        return self.max_items is not None or self.max_memory is not None

    def check(self, count: int) -> None:
        """Raise CollectLimitError if ``count`` collected items break a bound."""
        if self.max_items is not None and count > self.max_items:
            raise CollectLimitError(
                f"collect() in stage '{self.stage_name}' exceeded "
                f"{self.max_items} items",
                collected=count,
            )

        if self.max_memory is not None and count % self.check_interval == 0:
            info = current_memory()
            if info.rss > self.max_memory:
                logger.warning(f"collect() in '{self.stage_name}' over memory limit: {info}")
                raise CollectLimitError(
                    f"collect() in stage '{self.stage_name}' exceeded memory "
                    f"limit of {self.max_memory} bytes after {count} items",
                    collected=count,
                )
