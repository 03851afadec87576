"""
The per-stage execution handle.

Every stage body receives its Context as first argument and uses it as the
only channel to the rest of the pipeline:

    def double(ctx):
        while ctx.pull():
            yield from ctx.push(ctx.value * 2)

``pull`` and ``push`` are the only suspension points. ``collect`` is pull
in a loop and ``spread`` is push in a loop.
"""

import logging
from typing import Any, Iterable, Iterator, List, Optional

from rq_pipeline.config import config
from rq_pipeline.core.stage import Stage, StageState
from rq_pipeline.memory import CollectGuard

STAGE_LOGGER = "rq_pipeline.stages"


class StageLogAdapter(logging.LoggerAdapter):
    """Prefix stage log records with the stage name."""

    def process(self, msg, kwargs):
        kwargs.setdefault("extra", {}).update(self.extra)
        return f"[{self.extra['stage']}] {msg}", kwargs


class Context:
    """Execution handle owned by exactly one stage."""

    def __init__(self,
                 stage: Stage,
                 upstream: Optional[Stage] = None,
                 downstream: Optional[Stage] = None,
                 logger: Optional[logging.Logger] = None):
        self.stage = stage
        self.upstream = upstream
        self.downstream = downstream
        self.log = StageLogAdapter(logger or logging.getLogger(STAGE_LOGGER),
                                   {"stage": stage.name})
        # Most recently pulled value; only meaningful after a successful pull
        self.value: Any = None

    def __repr__(self) -> str:
        return f"Context(stage={self.stage.name!r})"

    def pull(self) -> bool:
        """
        Ask the upstream stage for its next value.

        Returns True and sets ``self.value`` when a value arrived. Returns
        False once upstream is exhausted (and on every call after that); the
        caller should stop pulling.
        """
        stats = self.stage.stats
        if self.upstream is None:
            self.value = None
            stats.exhausted_pulls += 1
            return False

        self.stage.state = StageState.PULLING
        try:
            ok, value = self.upstream.resume()
        finally:
            if self.stage.state is StageState.PULLING:
                self.stage.state = StageState.RUNNING

        if not ok:
            self.value = None
            stats.exhausted_pulls += 1
            if config.trace:
                self.log.debug("pull: upstream exhausted")
            return False

        self.value = value
        stats.pulled += 1
        if config.trace:
            self.log.debug(f"pull #{stats.pulled}")
        return True

    def push(self, value: Any) -> Iterator[Any]:
        """
        Emit ``value`` downstream; use as ``yield from ctx.push(value)``.

        The stage stays suspended until downstream pulls again or the
        pipeline is torn down.
        """
        yield value

    def collect(self) -> List[Any]:
        """
        Pull until upstream is exhausted and return everything pulled, in order.

        Upstream must be finite: on an unbounded generator this never returns
        unless ``collect_limit`` or ``collect_memory_limit`` is configured, in
        which case CollectLimitError is raised.
        """
        guard = CollectGuard.from_config(self.stage.name)
        values = []
        while self.pull():
            values.append(self.value)
            if guard.enabled:
                guard.check(len(values))
        return values

    def spread(self, values: Iterable[Any]) -> Iterator[Any]:
        """Push each element of ``values`` in order; use with ``yield from``."""
        for value in values:
            yield from self.push(value)

    def release_upstream(self, final_state: Optional[StageState] = None) -> None:
        """
        Send the cancellation signal upstream.

        Every stage above this one is closed immediately, running its
        cleanup, and no further pull will succeed.
        """
        if self.upstream is None:
            return
        if final_state is StageState.ERRORED:
            self.upstream.abort()
        else:
            self.upstream.cancel()
