"""Local system probe for detecting which onboarding flow applies."""

from __future__ import annotations

import os
import platform
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Mapping, Optional


class OperatingSystem(str, Enum):
    WINDOWS = "Windows"
    MACOS = "macOS"
    LINUX = "Linux"
    UNKNOWN = "Unknown"


class Architecture(str, Enum):
    X64 = "x64"
    ARM64 = "arm64"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class PlatformFacts:
    """Facts about the local host system."""

    os: OperatingSystem
    arch: Architecture
    is_wsl: bool
    home_directory: str


_OS_BY_SYSTEM = {
    "windows": OperatingSystem.WINDOWS,
    "darwin": OperatingSystem.MACOS,
    "linux": OperatingSystem.LINUX,
}

_ARCH_BY_MACHINE = {
    "x86_64": Architecture.X64,
    "amd64": Architecture.X64,
    "x64": Architecture.X64,
    "arm64": Architecture.ARM64,
    "aarch64": Architecture.ARM64,
}


class PlatformDetector:
    """Collects platform facts from the running interpreter and environment."""

    def __init__(
        self,
        environ: Optional[Mapping[str, str]] = None,
        system: Optional[Callable[[], str]] = None,
        machine: Optional[Callable[[], str]] = None,
        proc_version_path: str = "/proc/version",
    ) -> None:
        self.environ = environ if environ is not None else os.environ
        self._system = system or platform.system
        self._machine = machine or platform.machine
        self.proc_version_path = proc_version_path

    def detect(self) -> PlatformFacts:
        os_kind = _OS_BY_SYSTEM.get(self._system().lower(), OperatingSystem.UNKNOWN)
        return PlatformFacts(
            os=os_kind,
            arch=_ARCH_BY_MACHINE.get(self._machine().lower(), Architecture.UNKNOWN),
            is_wsl=os_kind is OperatingSystem.LINUX and self._detect_wsl(),
            home_directory=self._home_directory(),
        )

    def _detect_wsl(self) -> bool:
        if self.environ.get("WSL_DISTRO_NAME") or self.environ.get("WSL_INTEROP"):
            return True
        # 旧版 WSL 不设置环境变量，检查内核版本字符串
        try:
            with open(self.proc_version_path, encoding="utf-8") as handle:
                return "microsoft" in handle.read().lower()
        except OSError:
            return False

    def _home_directory(self) -> str:
        for key in ("HOME", "USERPROFILE"):
            value = self.environ.get(key)
            if value:
                return value
        return str(Path.home())
