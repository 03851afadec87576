"""
Name -> implementation lookup used to build pipelines from stage names.
"""

import difflib
import inspect
from typing import Any, Callable, Dict, Iterable, List, Optional

from rq_pipeline.core.stage import Stage, StageFunc
from rq_pipeline.exceptions import StageDefinitionError, StageNotFoundError


class StageRegistry:
    """Registry of stage implementations keyed by name and alias."""

    def __init__(self):
        self._stages: Dict[str, StageFunc] = {}
        self._canonical: Dict[str, str] = {}

    def register(self, name: str, func: StageFunc, aliases: Iterable[str] = ()) -> StageFunc:
        """
        Register a generator function under ``name`` and any aliases.

        Raises:
            StageDefinitionError: if func is not a generator function or a
                name is already taken
        """
        if not inspect.isgeneratorfunction(func):
            raise StageDefinitionError(
                f"stage '{name}' must be a generator function taking a context"
            )

        for key in (name, *aliases):
            if key in self._stages:
                raise StageDefinitionError(f"stage name '{key}' is already registered")
            self._stages[key] = func
            self._canonical[key] = name
        return func

    def resolve(self, name: str) -> StageFunc:
        try:
            return self._stages[name]
        except KeyError:
            suggestions = difflib.get_close_matches(name, list(self._stages), n=3)
            raise StageNotFoundError(name, suggestions) from None

    def create(self, name: str, *args: Any, **kwargs: Any) -> Stage:
        """Instantiate a fresh stage for ``name`` with its arguments."""
        return Stage(self._canonical.get(name, name), self.resolve(name), args, kwargs)

    def names(self) -> List[str]:
        """Canonical names of all registered stages, sorted."""
        return sorted(set(self._canonical.values()))

    def __contains__(self, name: str) -> bool:
        return name in self._stages

    def __len__(self) -> int:
        return len(self.names())


# Default registry the built-in catalogue registers into
registry = StageRegistry()


def stage(name: Optional[str] = None,
          aliases: Iterable[str] = (),
          target: Optional[StageRegistry] = None) -> Callable[[StageFunc], StageFunc]:
    """
    Decorator registering a generator function as a stage.

    Example:
        @stage("double")
        def double(ctx):
            while ctx.pull():
                yield from ctx.push(ctx.value * 2)
    """
    def decorator(func: StageFunc) -> StageFunc:
        (target or registry).register(name or func.__name__.rstrip('_'), func, aliases)
        return func
    return decorator
