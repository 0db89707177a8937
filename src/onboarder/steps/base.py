"""Helpers shared by the concrete onboarding steps."""

from __future__ import annotations

from typing import Iterator, Optional

from ..local.session import ProcessResult


class StepCommandError(RuntimeError):
    """An external command a step depends on returned a non-zero exit code."""

    def __init__(self, message: str, result: Optional[ProcessResult] = None) -> None:
        self.result = result
        super().__init__(message)


def require_success(result: ProcessResult, fallback_message: str) -> ProcessResult:
    """Raise StepCommandError unless ``result`` succeeded.

    The command's own stderr is the most useful message; the fallback is used
    when it printed nothing.
    """
    if result.is_success:
        return result
    message = result.stderr.strip() or fallback_message
    raise StepCommandError(message, result)


def command_succeeded(result: ProcessResult) -> bool:
    """Exit code 0 and something on stdout (``which``/``where`` style probes)."""
    return result.is_success and bool(result.stdout.strip())


def iter_lines(text: Optional[str]) -> Iterator[str]:
    """Non-empty lines of ``text``, handling CRLF, CR and LF endings."""
    if not text:
        return
    for line in text.splitlines():
        if line.strip():
            yield line
