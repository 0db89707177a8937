"""User interaction layer used by the orchestrator, the steps and the CLI."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional, Tuple, TYPE_CHECKING

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from ..orchestrator.models import StepResult, StepStatus

if TYPE_CHECKING:
    from ..local.probe import PlatformFacts

logger = logging.getLogger(__name__)

TRANSCRIPT_LOGGER_NAME = "onboarder.transcript"

_STATUS_STYLES = {
    StepStatus.EXECUTED: "green",
    StepStatus.SKIPPED: "yellow",
    StepStatus.FAILED: "red",
}


class InteractionUnavailableError(RuntimeError):
    """Raised when input is requested but nobody can answer it."""


class UserInteraction(ABC):
    """Abstract base class for talking to the person running the tool.

    Implementations provide the output primitives; the orchestrator hooks
    (``announce_*``) are built on top of them here so every front end uses the
    same wording.
    """

    @abstractmethod
    def write_normal(self, message: str) -> None:
        pass

    @abstractmethod
    def write_success(self, message: str) -> None:
        pass

    @abstractmethod
    def write_warning(self, message: str) -> None:
        pass

    @abstractmethod
    def write_error(self, message: str) -> None:
        pass

    @abstractmethod
    def write_debug(self, message: str) -> None:
        """Only shown in verbose mode."""

    @abstractmethod
    def write_markdown(self, markdown: str) -> None:
        pass

    @abstractmethod
    def ask(self, prompt: str, default: Optional[str] = None) -> str:
        """
        Ask the user for a line of text.

        Args:
            prompt: The question to display
            default: Value returned when the user just presses enter

        Raises:
            InteractionUnavailableError: when no answer can be obtained
        """

    @abstractmethod
    def render_summary(self, results: Iterable[StepResult]) -> None:
        pass

    def show_welcome_banner(self, facts: "PlatformFacts") -> None:
        self.write_normal(
            f"Detected {facts.os.value} ({facts.arch.value}), WSL: {facts.is_wsl}"
        )

    # 编排器回调
    def announce_start(self, title: str) -> None:
        self.write_normal(f"Starting {title}...")

    def announce_check(self, description: str) -> None:
        self.write_normal(f"Checking {description}...")

    def announce_already_configured(self, description: str) -> None:
        self.write_success(f"{description} already configured.")

    def announce_dry_run_skip(self, description: str) -> None:
        self.write_normal(f"Dry run: would execute {description}.")

    def announce_running(self, description: str) -> None:
        self.write_normal(f"Running {description}...")

    def announce_step_succeeded(self, description: str) -> None:
        self.write_success(f"{description} completed.")

    def announce_step_failed(self, description: str, message: str) -> None:
        self.write_error(f"{description} failed: {message}")

    def announce_overall_success(self, message: str) -> None:
        self.write_normal("")
        self.write_success(message)


class ConsoleUserInteraction(UserInteraction):
    """Terminal front end rendered with rich.

    Every message is also written to the transcript logger so a run can be
    reviewed after the terminal is gone.
    """

    def __init__(self, console: Optional[Console] = None, verbose: bool = False) -> None:
        self.console = console or Console()
        self.verbose = verbose
        self.transcript = logging.getLogger(TRANSCRIPT_LOGGER_NAME)

    def _record(self, category: str, message: str) -> None:
        self.transcript.info("%s: %s", category, message)

    def write_normal(self, message: str) -> None:
        self._record("INFO", message)
        self.console.print(escape(message))

    def write_success(self, message: str) -> None:
        self._record("SUCCESS", message)
        self.console.print(f"[green]✓ {escape(message)}[/]")

    def write_warning(self, message: str) -> None:
        self._record("WARNING", message)
        self.console.print(f"[yellow]⚠ {escape(message)}[/]")

    def write_error(self, message: str) -> None:
        self._record("ERROR", message)
        self.console.print(f"[red]✗ {escape(message)}[/]")

    def write_debug(self, message: str) -> None:
        self._record("DEBUG", message)
        if self.verbose:
            self.console.print(f"[grey50]{escape(message)}[/]")

    def write_markdown(self, markdown: str) -> None:
        self._record("MARKDOWN", markdown)
        self.console.print(Markdown(markdown))

    def ask(self, prompt: str, default: Optional[str] = None) -> str:
        self._record("PROMPT", prompt)
        try:
            if default is None:
                answer = Prompt.ask(escape(prompt), console=self.console)
            else:
                answer = Prompt.ask(escape(prompt), console=self.console, default=default)
        except EOFError as exc:
            raise InteractionUnavailableError(
                f"No input available for prompt: {prompt}"
            ) from exc
        answer = answer or ""
        self._record("PROMPT_RESPONSE", answer)
        return answer

    def show_welcome_banner(self, facts: "PlatformFacts") -> None:
        lines = [
            f"Operating system: {facts.os.value}",
            f"Architecture:     {facts.arch.value}",
            f"WSL:              {'yes' if facts.is_wsl else 'no'}",
            f"Home directory:   {facts.home_directory}",
        ]
        self._record("BANNER", "; ".join(lines))
        self.console.print(
            Panel(escape("\n".join(lines)), title="onboarder", border_style="cyan")
        )

    def render_summary(self, results: Iterable[StepResult]) -> None:
        results = list(results)
        self._record("SUMMARY", f"{len(results)} step(s)")

        table = Table(title="Onboarding summary", show_lines=False)
        table.add_column("Step")
        table.add_column("Status")
        table.add_column("Details")

        for result in results:
            style = _STATUS_STYLES[result.status]
            details = result.details
            self._record("SUMMARY_ITEM", f"{result.step_name} | {result.status.label} | {details}")
            table.add_row(
                escape(result.step_name),
                f"[{style}]{result.status.label}[/]",
                escape(details),
            )

        self.console.print()
        self.console.print(table)


class AutoResponseInteraction(ConsoleUserInteraction):
    """
    Non-interactive front end.

    Prompts are answered from predefined responses (matched by keyword) or
    the prompt's default; anything else raises InteractionUnavailableError
    instead of blocking.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        verbose: bool = False,
        default_responses: Optional[Dict[str, str]] = None,
        use_defaults: bool = True,
    ) -> None:
        super().__init__(console=console, verbose=verbose)
        self.default_responses = default_responses or {}
        self.use_defaults = use_defaults
        self._last_exchange: Optional[Tuple[str, str]] = None

    def ask(self, prompt: str, default: Optional[str] = None) -> str:
        self._record("PROMPT", prompt)
        logger.info("Auto-responding to: %s", prompt[:50])

        answer: Optional[str] = None
        for keyword, response in self.default_responses.items():
            if keyword.lower() in prompt.lower():
                answer = response
                break

        if answer is None and self.use_defaults and default is not None:
            answer = default

        if answer is None:
            raise InteractionUnavailableError(
                f"Input required in non-interactive mode: {prompt}"
            )

        # 同一提示连续得到同一自动回答，说明回答被拒绝
        if self._last_exchange == (prompt, answer):
            raise InteractionUnavailableError(
                f"Automatic answer '{answer}' was not accepted in non-interactive mode: {prompt}"
            )
        self._last_exchange = (prompt, answer)

        self.console.print(f"{escape(prompt)} [cyan]{escape(answer)}[/] (auto)")
        self._record("PROMPT_RESPONSE", answer)
        return answer
