"""Git CLI wrapper used by the identity, credential and clone steps."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..local.session import ProcessResult, ProcessRunner

logger = logging.getLogger(__name__)


class GitCommandError(RuntimeError):
    """Raised when a git command fails."""

    def __init__(self, command: list[str], exit_code: int, stderr: str) -> None:
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        detail = stderr or "no error output"
        super().__init__(f"Git command {' '.join(command)} failed with code {exit_code}: {detail}")


class GitClient:
    """Wraps `git` CLI commands for configuration, cloning and updating."""

    def __init__(self, runner: ProcessRunner, git_binary: str = "git") -> None:
        self.runner = runner
        self.git_binary = git_binary

    async def get_global_config(self, key: str) -> Optional[str]:
        """Return the global value for ``key``, or None when it is not set."""
        result = await self.runner.run(self.git_binary, "config", "--global", "--get", key)
        if not result.is_success:
            return None
        value = result.stdout.strip()
        return value or None

    async def set_global_config(self, key: str, value: str) -> None:
        await self._run(["config", "--global", key, value])

    async def clone(self, repo_url: str, target_dir: Path) -> None:
        target_dir.parent.mkdir(parents=True, exist_ok=True)
        await self._run(["clone", repo_url, str(target_dir)])

    async def pull_ff_only(self, repo_dir: Path) -> None:
        await self._run(["-C", str(repo_dir), "pull", "--ff-only"])

    async def _run(self, args: list[str]) -> ProcessResult:
        command = [self.git_binary] + args
        result = await self.runner.run(self.git_binary, *args)
        if not result.is_success:
            raise GitCommandError(command, result.exit_code, result.stderr.strip())
        logger.debug("git %s succeeded", args[0])
        return result


def is_git_repository(path: Path) -> bool:
    return (path / ".git").exists()
