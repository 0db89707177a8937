"""Local command execution for onboarding steps."""

from __future__ import annotations

import asyncio
import logging
import os
import platform
import shutil
from dataclasses import dataclass
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class ProcessLaunchError(OSError):
    """The executable could not be found or started."""

    def __init__(self, file_name: str, reason: str) -> None:
        self.file_name = file_name
        super().__init__(f"Unable to start '{file_name}': {reason}")


@dataclass
class ProcessResult:
    """Result of executing a local command."""
    exit_code: int
    stdout: str
    stderr: str

    @property
    def is_success(self) -> bool:
        return self.exit_code == 0


def decode_output(data: Optional[bytes]) -> str:
    """Decode captured output.

    ``wsl.exe`` writes UTF-16 when its output is redirected; that shows up as
    NUL bytes in the stream.
    """
    if not data:
        return ""
    if b"\x00" in data:
        text = data.decode("utf-16-le", errors="replace")
    else:
        text = data.decode("utf-8", errors="replace")
    return text.lstrip("\ufeff")


class ProcessRunner:
    """
    Runs external programs without a shell.

    Arguments are passed as a list so no quoting is needed on either
    platform.
    """

    def __init__(self, default_timeout: Optional[float] = None) -> None:
        self.default_timeout = default_timeout
        self.is_windows = platform.system() == "Windows"

    async def run(
        self,
        file_name: str,
        *args: str,
        request_elevation: bool = False,
        interactive: bool = False,
        input_text: Optional[str] = None,
        env: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> ProcessResult:
        """
        Execute a program and wait for it.

        Args:
            file_name: Program name (resolved on PATH) or path
            args: Program arguments
            request_elevation: Run through sudo on POSIX hosts
            interactive: Inherit the terminal instead of capturing output
            input_text: Text written to the program's stdin
            env: Variables layered on top of the current environment
            timeout: Seconds before the program is killed

        Returns:
            ProcessResult with decoded stdout/stderr (empty when interactive)

        Raises:
            ProcessLaunchError: if the program cannot be found or started
        """
        command = self._build_command(file_name, list(args), request_elevation)
        timeout = timeout if timeout is not None else self.default_timeout

        process_env = None
        if env:
            process_env = os.environ.copy()
            process_env.update(env)

        pipe = None if interactive else asyncio.subprocess.PIPE
        stdin = asyncio.subprocess.PIPE if input_text is not None else None

        logger.debug("Running: %s", " ".join(command))
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=stdin,
                stdout=pipe,
                stderr=pipe,
                env=process_env,
            )
        except OSError as exc:
            raise ProcessLaunchError(file_name, exc.strerror or str(exc)) from exc

        payload = input_text.encode("utf-8") if input_text is not None else None
        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(payload), timeout)
        except asyncio.TimeoutError:
            _kill(process)
            await process.wait()
            logger.warning("Command timed out after %s seconds: %s", timeout, command[0])
            return ProcessResult(
                exit_code=-1,
                stdout="",
                stderr=f"Command timed out after {timeout} seconds",
            )
        except (asyncio.CancelledError, KeyboardInterrupt):
            # 取消或中断时不留下子进程
            _kill(process)
            raise

        result = ProcessResult(
            exit_code=process.returncode if process.returncode is not None else -1,
            stdout=decode_output(stdout),
            stderr=decode_output(stderr),
        )
        logger.debug("Exit code %d: %s", result.exit_code, command[0])
        return result

    def _build_command(self, file_name: str, args: list[str], request_elevation: bool) -> list[str]:
        resolved = shutil.which(file_name)
        if resolved is None:
            raise ProcessLaunchError(file_name, "not found on PATH")

        command = [resolved, *args]
        # Windows 上需要从管理员终端运行
        if request_elevation and not self.is_windows and _effective_uid() != 0:
            sudo = shutil.which("sudo")
            if sudo is None:
                raise ProcessLaunchError("sudo", "elevation requested but sudo is not available")
            command = [sudo, *command]
        return command


def _effective_uid() -> int:
    geteuid = getattr(os, "geteuid", None)
    return geteuid() if geteuid is not None else -1


def _kill(process: asyncio.subprocess.Process) -> None:
    try:
        process.kill()
    except ProcessLookupError:
        # 进程已自行退出
        pass
