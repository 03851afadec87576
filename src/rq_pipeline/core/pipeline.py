"""
Pipeline wiring and the driver that pulls values out of the terminal stage.
"""

import json
import inspect
import logging
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Tuple, Union, TYPE_CHECKING

from rq_pipeline.core.context import Context, STAGE_LOGGER
from rq_pipeline.core.stage import Stage, StageStats
from rq_pipeline.exceptions import PipelineStateError, StageDefinitionError, StageError

if TYPE_CHECKING:
    from rq_pipeline.stages.registry import StageRegistry

logger = logging.getLogger(__name__)

Step = Union[str, Tuple[Any, ...], List[Any], Stage]


class Pipeline:
    """
    An ordered chain of stages.

    The output of stage ``i`` is the input of stage ``i + 1``. Iterating the
    pipeline acts as the sink: every ``next()`` resumes the terminal stage,
    which pulls from its upstream neighbour on demand, and so on up the chain.
    A pipeline runs once.
    """

    def __init__(self, stages: Sequence[Stage], logger: Optional[logging.Logger] = None):
        if not stages:
            raise ValueError("Pipeline requires at least one stage.")

        self.stages: List[Stage] = list(stages)
        self.logger = logger or logging.getLogger(__name__)
        stage_logger = logging.getLogger(STAGE_LOGGER)

        for i, stage in enumerate(self.stages):
            upstream = self.stages[i - 1] if i > 0 else None
            downstream = self.stages[i + 1] if i + 1 < len(self.stages) else None
            stage.bind(Context(stage, upstream, downstream, stage_logger), index=i)

        self._started = False
        self.error: Optional[StageError] = None

    def __repr__(self) -> str:
        return f"Pipeline({' | '.join(stage.name for stage in self.stages)})"

    # Construction

    @classmethod
    def build(cls,
              steps: Iterable[Step],
              source: Optional[Iterable[Any]] = None,
              registry: Optional['StageRegistry'] = None) -> 'Pipeline':
        """
        Resolve named steps into stages and wire them.

        Args:
            steps: Stage names, ``(name, *args)`` tuples or Stage instances
            source: Optional iterable of values fed in ahead of the first step
            registry: Registry to resolve names against (default registry if None)
        """
        if registry is None:
            from rq_pipeline.stages import registry as default_registry
            registry = default_registry

        stages = []
        if source is not None:
            stages.append(registry.create("iterate", source))
        for step in steps:
            stages.append(_make_stage(step, registry))
        return cls(stages)

    @classmethod
    def from_iterable(cls, values: Iterable[Any], *steps: Step,
                      registry: Optional['StageRegistry'] = None) -> 'Pipeline':
        """Build a pipeline that streams ``values`` through ``steps``."""
        return cls.build(steps, source=values, registry=registry)

    # Driving

    def __iter__(self) -> Iterator[Any]:
        if self._started:
            raise PipelineStateError("Pipeline has already been run.")
        self._started = True
        return self._drive()

    def _drive(self) -> Iterator[Any]:
        terminal = self.stages[-1]
        self.logger.debug(f"Running {self!r}")
        failed = False
        try:
            while True:
                ok, value = terminal.resume()
                if not ok:
                    break
                yield value
        except StageError as e:
            failed = True
            self._fail(e)
            raise
        finally:
            if not failed:
                self.close()
            self._log_summary()

    def _fail(self, error: StageError) -> None:
        self.error = error
        self.logger.error(f"Pipeline failed at stage '{error.stage_name}' "
                          f"(#{error.index}): {type(error.cause).__name__}: {error.cause}")
        try:
            self.stages[-1].abort()
        except StageError as teardown_error:
            # The original failure is the one reported to the caller
            self.logger.error(f"Error while tearing down after failure: {teardown_error}")

    def close(self) -> None:
        """Cancel every stage that is still live, releasing its resources."""
        self.stages[-1].cancel()

    def __enter__(self) -> 'Pipeline':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # Sinks

    def run(self) -> List[Any]:
        """Drive the pipeline to completion and return every output value."""
        return list(self)

    def first(self) -> Optional[Any]:
        """Return the first output value, cancelling the rest of the pipeline."""
        values = iter(self)
        try:
            return next(values, None)
        finally:
            values.close()

    def to_jsonl(self, path: Union[str, Path]) -> int:
        """Write each output value as one JSON document per line."""
        path = Path(path)
        count = 0

        with open(path, 'w') as f:
            for item in self:
                f.write(json.dumps(item) + '\n')
                count += 1

        return count

    # Introspection

    def stats(self) -> List[StageStats]:
        return [stage.stats for stage in self.stages]

    def _log_summary(self) -> None:
        if not self.logger.isEnabledFor(logging.DEBUG):
            return
        for stage in self.stages:
            self.logger.debug(f"{stage.stats} state={stage.state.name}")


def _make_stage(step: Step, registry: 'StageRegistry') -> Stage:
    if isinstance(step, Stage):
        return step
    if isinstance(step, str):
        return registry.create(step)
    if isinstance(step, (tuple, list)) and step and isinstance(step[0], str):
        return registry.create(step[0], *step[1:])
    if inspect.isgeneratorfunction(step):
        return Stage(step.__name__, step)
    raise StageDefinitionError(f"Cannot build a stage from {step!r}")
