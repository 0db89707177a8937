"""Orchestrator module for step-based onboarding execution.

- OnboardingStep: the check/execute contract every step implements
- SequentialOrchestrator: runs a list of steps in order
- StepResult/StepStatus/ExecutionOptions: run data
- OrchestrationFailure: raised after the summary when a step fails
"""

from .errors import CheckFailure, ExecutionFailure, OrchestrationFailure
from .models import (
    SKIP_REASON_ALREADY_CONFIGURED,
    SKIP_REASON_DRY_RUN,
    ExecutionOptions,
    StepResult,
    StepStatus,
)
from .orchestrator import SequentialOrchestrator
from .step import OnboardingStep

__all__ = [
    "SKIP_REASON_ALREADY_CONFIGURED",
    "SKIP_REASON_DRY_RUN",
    "CheckFailure",
    "ExecutionFailure",
    "ExecutionOptions",
    "OnboardingStep",
    "OrchestrationFailure",
    "SequentialOrchestrator",
    "StepResult",
    "StepStatus",
]
