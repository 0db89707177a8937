"""Data models for the orchestrator module."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

SKIP_REASON_ALREADY_CONFIGURED = "Already configured"
SKIP_REASON_DRY_RUN = "Dry run"


class StepStatus(Enum):
    """步骤执行状态"""
    EXECUTED = "executed"
    SKIPPED = "skipped"
    FAILED = "failed"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class ExecutionOptions:
    """Run-wide flags shared by the orchestrator and the interaction layer."""

    is_dry_run: bool = False
    is_verbose: bool = False


@dataclass(frozen=True)
class StepResult:
    """Outcome of one attempted step.

    ``skip_reason`` is only present for skipped steps and ``failure_cause``
    only for failed ones; anything else is rejected at construction.
    """

    step_name: str
    status: StepStatus
    skip_reason: Optional[str] = None
    failure_cause: Optional[BaseException] = None

    def __post_init__(self) -> None:
        if self.skip_reason is not None and self.status is not StepStatus.SKIPPED:
            raise ValueError(
                f"skip_reason is only valid for skipped steps (got {self.status.value})"
            )
        if self.failure_cause is not None and self.status is not StepStatus.FAILED:
            raise ValueError(
                f"failure_cause is only valid for failed steps (got {self.status.value})"
            )

    @classmethod
    def executed(cls, step_name: str) -> "StepResult":
        """创建成功结果"""
        return cls(step_name=step_name, status=StepStatus.EXECUTED)

    @classmethod
    def skipped(cls, step_name: str, reason: str) -> "StepResult":
        """创建跳过结果"""
        return cls(step_name=step_name, status=StepStatus.SKIPPED, skip_reason=reason)

    @classmethod
    def failed(cls, step_name: str, cause: BaseException) -> "StepResult":
        """创建失败结果"""
        return cls(step_name=step_name, status=StepStatus.FAILED, failure_cause=cause)

    @property
    def details(self) -> str:
        """Text shown in the summary's details column."""
        if self.status is StepStatus.SKIPPED:
            return self.skip_reason or ""
        if self.status is StepStatus.FAILED and self.failure_cause is not None:
            return describe_error(self.failure_cause)
        return ""


def describe_error(error: BaseException) -> str:
    """Human readable message for an exception, falling back to its type name."""
    message = str(error).strip()
    return message or type(error).__name__
