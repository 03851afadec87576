"""
Errors raised by the pipeline runtime.
"""

from typing import List, Optional


class PipelineError(Exception):
    """Base class for all pipeline errors."""


class StageError(PipelineError):
    """A stage body raised while the pipeline was running.

    Carries the name and position of the stage that originated the failure,
    plus the underlying exception as ``cause``.
    """

    def __init__(self, stage_name: str, index: Optional[int], cause: BaseException):
        self.stage_name = stage_name
        self.index = index
        self.cause = cause
        position = f" (#{index})" if index is not None else ""
        super().__init__(
            f"stage '{stage_name}'{position} failed: "
            f"{type(cause).__name__}: {cause}"
        )


class StageNotFoundError(PipelineError, LookupError):
    """No stage is registered under the requested name."""

    def __init__(self, name: str, suggestions: Optional[List[str]] = None):
        self.name = name
        self.suggestions = suggestions or []
        message = f"unknown stage '{name}'"
        if self.suggestions:
            message += f" (did you mean: {', '.join(self.suggestions)}?)"
        super().__init__(message)


class StageDefinitionError(PipelineError, TypeError):
    """A stage implementation does not follow the stage contract."""


class PipelineStateError(PipelineError, RuntimeError):
    """A pipeline or stage was used outside its lifecycle."""


class ValueTypeError(PipelineError, TypeError):
    """An object that is not a pipeline value entered the stream."""


class CollectLimitError(PipelineError):
    """A bounded collect() exceeded its configured limit."""

    def __init__(self, message: str, collected: int):
        self.collected = collected
        super().__init__(message)
