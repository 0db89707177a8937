"""Sequential orchestrator: runs onboarding steps in order and reports on them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, TYPE_CHECKING

from .errors import CheckFailure, ExecutionFailure, OrchestrationFailure
from .models import (
    SKIP_REASON_ALREADY_CONFIGURED,
    SKIP_REASON_DRY_RUN,
    ExecutionOptions,
    StepResult,
    describe_error,
)
from .step import OnboardingStep

if TYPE_CHECKING:
    from ..interaction import UserInteraction

logger = logging.getLogger(__name__)


class OutcomeKind(Enum):
    EXECUTED = "executed"
    ALREADY_CONFIGURED = "already_configured"
    DRY_RUN = "dry_run"
    CHECK_FAILED = "check_failed"
    EXECUTION_FAILED = "execution_failed"


@dataclass(frozen=True)
class StepOutcome:
    """What happened to one step, before it is turned into a StepResult."""

    kind: OutcomeKind
    cause: Optional[BaseException] = None

    @property
    def is_failure(self) -> bool:
        return self.kind in (OutcomeKind.CHECK_FAILED, OutcomeKind.EXECUTION_FAILED)

    def to_result(self, step_name: str) -> StepResult:
        if self.kind is OutcomeKind.EXECUTED:
            return StepResult.executed(step_name)
        if self.kind is OutcomeKind.ALREADY_CONFIGURED:
            return StepResult.skipped(step_name, SKIP_REASON_ALREADY_CONFIGURED)
        if self.kind is OutcomeKind.DRY_RUN:
            return StepResult.skipped(step_name, SKIP_REASON_DRY_RUN)
        return StepResult.failed(step_name, self.cause)

    def to_failure(self, step_name: str) -> OrchestrationFailure:
        if self.kind is OutcomeKind.CHECK_FAILED:
            return CheckFailure(step_name, self.cause)
        if self.kind is OutcomeKind.EXECUTION_FAILED:
            return ExecutionFailure(step_name, self.cause)
        raise ValueError(f"{self.kind.value} is not a failure outcome")


class SequentialOrchestrator:
    """
    顺序编排器

    Runs each step's check and, when needed, its action, strictly in list
    order. Stops at the first failure, always renders the summary once and
    only then raises the failure.
    """

    def __init__(
        self,
        interaction: "UserInteraction",
        execution_options: ExecutionOptions,
        title: str,
        steps: Sequence[OnboardingStep],
    ) -> None:
        self.interaction = interaction
        self.execution_options = execution_options
        self.title = title
        self.steps: List[OnboardingStep] = list(steps)

    async def execute(self) -> List[StepResult]:
        """
        执行所有步骤

        Returns:
            The results of the attempted steps, in order.

        Raises:
            OrchestrationFailure: after the summary, when a step failed.
        """
        logger.info("Starting %s with %d step(s) (dry_run=%s)",
                    self.title, len(self.steps), self.execution_options.is_dry_run)
        self.interaction.announce_start(self.title)

        results: List[StepResult] = []
        failure: Optional[OrchestrationFailure] = None

        for index, step in enumerate(self.steps, 1):
            description = step.description
            logger.debug("Step %d/%d: %s", index, len(self.steps), description)

            outcome = await self._run_step(step)
            results.append(outcome.to_result(description))

            if outcome.is_failure:
                failure = outcome.to_failure(description)
                logger.error("%s", failure)
                break

        # 无论成功失败都只渲染一次摘要
        self.interaction.render_summary(list(results))

        if failure is not None:
            raise failure from failure.cause

        if self.execution_options.is_dry_run:
            message = f"{self.title} dry run complete."
        else:
            message = f"{self.title} complete."
        self.interaction.announce_overall_success(message)
        logger.info("%s", message)
        return results

    async def _run_step(self, step: OnboardingStep) -> StepOutcome:
        description = step.description
        self.interaction.announce_check(description)

        try:
            needs_work = await step.should_execute()
        except Exception as exc:
            logger.debug("Check for %s raised", description, exc_info=True)
            self.interaction.announce_step_failed(description, describe_error(exc))
            return StepOutcome(OutcomeKind.CHECK_FAILED, exc)

        if not needs_work:
            self.interaction.announce_already_configured(description)
            return StepOutcome(OutcomeKind.ALREADY_CONFIGURED)

        if self.execution_options.is_dry_run:
            self.interaction.announce_dry_run_skip(description)
            return StepOutcome(OutcomeKind.DRY_RUN)

        self.interaction.announce_running(description)
        try:
            await step.execute()
        except Exception as exc:
            logger.debug("Step %s raised", description, exc_info=True)
            self.interaction.announce_step_failed(description, describe_error(exc))
            return StepOutcome(OutcomeKind.EXECUTION_FAILED, exc)

        self.interaction.announce_step_succeeded(description)
        return StepOutcome(OutcomeKind.EXECUTED)
