"""Exceptions raised when an onboarding run stops on a failing step."""

from __future__ import annotations

from .models import describe_error


class OrchestrationFailure(RuntimeError):
    """A step's check or action failed and the run was stopped."""

    phase = "unknown"

    def __init__(self, step_description: str, cause: BaseException, message: str) -> None:
        self.step_description = step_description
        self.cause = cause
        super().__init__(message)


class CheckFailure(OrchestrationFailure):
    """Raised when ``should_execute`` itself could not complete."""

    phase = "check"

    def __init__(self, step_description: str, cause: BaseException) -> None:
        super().__init__(
            step_description,
            cause,
            f"Failed while checking '{step_description}': {describe_error(cause)}",
        )


class ExecutionFailure(OrchestrationFailure):
    """Raised when ``execute`` failed."""

    phase = "execute"

    def __init__(self, step_description: str, cause: BaseException) -> None:
        super().__init__(
            step_description,
            cause,
            f"Step '{step_description}' failed: {describe_error(cause)}",
        )
