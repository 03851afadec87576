"""
Stages: suspendable pipeline steps built from generator functions.
"""

import time
import inspect
from enum import Enum
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Optional, Sequence, Tuple, TYPE_CHECKING

from rq_pipeline.config import config
from rq_pipeline.exceptions import PipelineStateError, StageDefinitionError, StageError
from rq_pipeline.values import validate

if TYPE_CHECKING:
    from rq_pipeline.core.context import Context

StageFunc = Callable[..., Iterator[Any]]


class StageState(Enum):
    """Lifecycle states of a stage."""
    READY = "ready"
    PULLING = "pulling"
    RUNNING = "running"
    PUSHING = "pushing"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"
    ERRORED = "errored"

    @property
    def terminal(self) -> bool:
        return self in (StageState.EXHAUSTED, StageState.CANCELLED, StageState.ERRORED)


@dataclass
class StageStats:
    """Counters collected while a stage runs."""
    name: str
    resumes: int = 0
    pulled: int = 0
    exhausted_pulls: int = 0
    pushed: int = 0
    elapsed: float = 0.0

    def __str__(self) -> str:
        return (f"{self.name}: pulled={self.pulled} pushed={self.pushed} "
                f"resumes={self.resumes} elapsed={self.elapsed * 1000:.2f}ms")


class Stage:
    """
    One step of a pipeline.

    A stage wraps a generator function ``func(ctx, *args, **kwargs)``. The
    generator is created on the first resume; each value it yields is one
    push downstream. Downstream drives the stage by calling ``resume``.
    """

    def __init__(self,
                 name: str,
                 func: StageFunc,
                 args: Sequence[Any] = (),
                 kwargs: Optional[Dict[str, Any]] = None):
        if not callable(func):
            raise StageDefinitionError(f"stage '{name}' implementation is not callable")
        self.name = name
        self.func = func
        self.args = tuple(args)
        self.kwargs = dict(kwargs or {})
        self.state = StageState.READY
        self.stats = StageStats(name)
        self.context: Optional['Context'] = None
        self.index: Optional[int] = None
        self._generator: Optional[Iterator[Any]] = None

    def __repr__(self) -> str:
        return f"Stage({self.name!r}, state={self.state.name})"

    def bind(self, context: 'Context', index: Optional[int] = None) -> None:
        """Attach the stage to its context. Allowed exactly once."""
        if self.context is not None:
            raise PipelineStateError(f"stage '{self.name}' is already bound to a context")
        self.context = context
        self.index = index

    def resume(self) -> Tuple[bool, Any]:
        """
        Run the stage until its next push or until it finishes.

        Returns:
            (True, value) for a pushed value, (False, None) once exhausted.
            A finished stage keeps returning (False, None).
        """
        if self.state.terminal:
            return False, None
        if self.context is None:
            raise PipelineStateError(f"stage '{self.name}' resumed before being bound")

        self.stats.resumes += 1
        self.state = StageState.RUNNING
        start = time.perf_counter()
        try:
            if self._generator is None:
                self._generator = self._start()
            value = next(self._generator)
        except StopIteration:
            self._finish()
            return False, None
        except StageError:
            # Raised further upstream; keep the original stage in the report
            self._fail()
            raise
        except Exception as e:
            self._fail()
            raise StageError(self.name, self.index, e) from e
        finally:
            self.stats.elapsed += time.perf_counter() - start

        if config.validate_values:
            try:
                validate(value)
            except Exception as e:
                self.abort()
                raise StageError(self.name, self.index, e) from e

        self.stats.pushed += 1
        self.state = StageState.PUSHING
        if config.trace:
            self.context.log.debug(f"push #{self.stats.pushed}")
        return True, value

    def _start(self) -> Iterator[Any]:
        generator = self.func(self.context, *self.args, **self.kwargs)
        if not inspect.isgenerator(generator):
            raise StageDefinitionError(
                f"stage '{self.name}' must be a generator function, "
                f"got {type(generator).__name__}"
            )
        return generator

    def _finish(self) -> None:
        self.state = StageState.EXHAUSTED
        self._generator = None
        # Nothing upstream will be pulled again
        self.context.release_upstream()

    def _fail(self) -> None:
        self.state = StageState.ERRORED
        self._generator = None

    def cancel(self) -> None:
        """
        Release this stage and everything upstream of it without running
        them to completion. The suspended generator receives GeneratorExit
        at its push point, so its ``with`` and ``finally`` blocks run.
        """
        self._close(StageState.CANCELLED)

    def abort(self) -> None:
        """Tear the stage down as part of a pipeline failure."""
        self._close(StageState.ERRORED)

    def _close(self, final_state: StageState) -> None:
        generator, self._generator = self._generator, None
        if not self.state.terminal:
            self.state = final_state
        try:
            if generator is not None:
                generator.close()
        except Exception as e:
            self.state = StageState.ERRORED
            raise StageError(self.name, self.index, e) from e
        finally:
            if self.context is not None:
                self.context.release_upstream(final_state)
