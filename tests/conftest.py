"""Shared test doubles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import pytest

from onboarder.interaction import InteractionUnavailableError, UserInteraction
from onboarder.local.probe import Architecture, OperatingSystem, PlatformFacts
from onboarder.local.session import ProcessResult
from onboarder.orchestrator import OnboardingStep


@dataclass
class RecordedCall:
    file_name: str
    args: Tuple[str, ...]
    kwargs: Dict[str, Any]

    @property
    def command(self) -> Tuple[str, ...]:
        return (self.file_name, *self.args)


class FakeProcessRunner:
    """Scripted stand-in for ProcessRunner.

    Responses are keyed by the full command. A list of responses is consumed
    in order, the last one repeating. Unscripted commands succeed silently.
    """

    def __init__(self) -> None:
        self.responses: Dict[Tuple[str, ...], List[Any]] = {}
        self.calls: List[RecordedCall] = []

    def when(
        self,
        *command: str,
        exit_code: int = 0,
        stdout: str = "",
        stderr: str = "",
        raises: Optional[BaseException] = None,
    ) -> "FakeProcessRunner":
        response = raises if raises is not None else ProcessResult(exit_code, stdout, stderr)
        self.responses.setdefault(tuple(command), []).append(response)
        return self

    async def run(self, file_name: str, *args: str, **kwargs: Any) -> ProcessResult:
        call = RecordedCall(file_name, tuple(args), kwargs)
        self.calls.append(call)
        queue = self.responses.get(call.command)
        if not queue:
            return ProcessResult(0, "", "")
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, BaseException):
            raise response
        return response

    def commands(self) -> List[Tuple[str, ...]]:
        return [call.command for call in self.calls]

    def called(self, *command: str) -> bool:
        return tuple(command) in self.commands()


class RecordingInteraction(UserInteraction):
    """Records every hook and primitive call; answers prompts from a queue."""

    def __init__(self, answers: Optional[List[str]] = None) -> None:
        self.events: List[Tuple[str, Any]] = []
        self.answers = list(answers or [])
        self.summaries: List[list] = []
        self.prompts: List[str] = []

    # primitives
    def write_normal(self, message: str) -> None:
        self.events.append(("normal", message))

    def write_success(self, message: str) -> None:
        self.events.append(("success", message))

    def write_warning(self, message: str) -> None:
        self.events.append(("warning", message))

    def write_error(self, message: str) -> None:
        self.events.append(("error", message))

    def write_debug(self, message: str) -> None:
        self.events.append(("debug", message))

    def write_markdown(self, markdown: str) -> None:
        self.events.append(("markdown", markdown))

    def ask(self, prompt: str, default: Optional[str] = None) -> str:
        self.prompts.append(prompt)
        if self.answers:
            answer = self.answers.pop(0)
            # None 表示直接回车接受默认值
            if answer is not None:
                return answer
        if default is not None:
            return default
        raise InteractionUnavailableError(prompt)

    def render_summary(self, results) -> None:
        results = list(results)
        self.summaries.append(results)
        self.events.append(("summary", results))

    # orchestrator hooks
    def announce_start(self, title: str) -> None:
        self.events.append(("start", title))

    def announce_check(self, description: str) -> None:
        self.events.append(("check", description))

    def announce_already_configured(self, description: str) -> None:
        self.events.append(("already_configured", description))

    def announce_dry_run_skip(self, description: str) -> None:
        self.events.append(("dry_run_skip", description))

    def announce_running(self, description: str) -> None:
        self.events.append(("running", description))

    def announce_step_succeeded(self, description: str) -> None:
        self.events.append(("succeeded", description))

    def announce_step_failed(self, description: str, message: str) -> None:
        self.events.append(("failed", (description, message)))

    def announce_overall_success(self, message: str) -> None:
        self.events.append(("overall_success", message))

    def kinds(self) -> List[str]:
        return [kind for kind, _ in self.events]

    def messages(self, kind: str) -> List[Any]:
        return [payload for event_kind, payload in self.events if event_kind == kind]


class FakeStep(OnboardingStep):
    """Step whose check result and failures are configured per test."""

    def __init__(
        self,
        name: str,
        needs_work: bool = True,
        check_error: Optional[BaseException] = None,
        execute_error: Optional[BaseException] = None,
    ) -> None:
        self.name = name
        self.needs_work = needs_work
        self.check_error = check_error
        self.execute_error = execute_error
        self.check_calls = 0
        self.execute_calls = 0

    @property
    def description(self) -> str:
        return self.name

    async def should_execute(self) -> bool:
        self.check_calls += 1
        if self.check_error is not None:
            raise self.check_error
        return self.needs_work

    async def execute(self) -> None:
        self.execute_calls += 1
        if self.execute_error is not None:
            raise self.execute_error
        # 执行后系统即处于已配置状态
        self.needs_work = False


def make_facts(
    os_kind: OperatingSystem = OperatingSystem.LINUX,
    arch: Architecture = Architecture.X64,
    is_wsl: bool = False,
    home: str = "/home/dev",
) -> PlatformFacts:
    return PlatformFacts(os=os_kind, arch=arch, is_wsl=is_wsl, home_directory=home)


@pytest.fixture
def runner() -> FakeProcessRunner:
    return FakeProcessRunner()


@pytest.fixture
def interaction() -> RecordingInteraction:
    return RecordingInteraction()
