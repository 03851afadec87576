"""
Configuration management for pipeline execution.
"""

import random
from typing import Optional
from dataclasses import dataclass, field, fields


@dataclass
class PipelineConfig:
    """Global configuration for pipeline execution."""

    # Collect bounds (None = unbounded, collect() on an infinite stream hangs)
    collect_limit: Optional[int] = None
    collect_memory_limit: Optional[int] = None  # bytes of process RSS
    memory_check_interval: int = 1000  # items between RSS checks

    # Diagnostics
    validate_values: bool = False
    trace: bool = False

    # Randomness shared by generator stages
    random_seed: Optional[int] = None

    _random: Optional[random.Random] = field(default=None, repr=False, compare=False)
    _random_seed_used: Optional[int] = field(default=None, repr=False, compare=False)

    _instance: Optional['PipelineConfig'] = None

    @classmethod
    def get_instance(cls) -> 'PipelineConfig':
        """Get singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def set_defaults(cls, **kwargs) -> None:
        """Set default configuration values."""
        instance = cls.get_instance()
        for key, value in kwargs.items():
            if key.startswith('_'):
                continue
            if hasattr(instance, key):
                setattr(instance, key, value)
        if 'random_seed' in kwargs:
            # Restart the random stream even when the seed is unchanged
            instance._random = None

    @classmethod
    def reset_defaults(cls) -> None:
        """Restore every public setting to its declared default."""
        instance = cls.get_instance()
        for f in fields(cls):
            if f.name.startswith('_'):
                continue
            setattr(instance, f.name, f.default)
        instance._random = None
        instance._random_seed_used = None

    def get_random(self) -> random.Random:
        """Return the shared pseudo-random source, reseeding if the seed changed."""
        if self._random is None or self._random_seed_used != self.random_seed:
            self._random = random.Random(self.random_seed)
            self._random_seed_used = self.random_seed
        return self._random


# Global configuration instance
config = PipelineConfig.get_instance()
