"""Ubuntu (apt based) onboarding steps, also used inside WSL."""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from typing import Optional

import requests

from ..interaction import UserInteraction
from ..local.probe import Architecture
from ..local.session import ProcessRunner
from ..orchestrator.step import OnboardingStep
from .base import StepCommandError, command_succeeded, require_success

logger = logging.getLogger(__name__)

APT_PACKAGES = ("git", "gh", "curl", "chezmoi", "python3", "build-essential")
DPKG_INSTALLED_MARKER = "Status: install ok installed"

VS_CODE_DEB_URLS = {
    Architecture.X64: "https://update.code.visualstudio.com/latest/linux-deb-x64/stable",
    Architecture.ARM64: "https://update.code.visualstudio.com/latest/linux-deb-arm64/stable",
}


class AptUpdateStep(OnboardingStep):
    """Refresh package lists; always runs so later installs see current indexes."""

    def __init__(self, runner: ProcessRunner, interaction: UserInteraction) -> None:
        self.runner = runner
        self.interaction = interaction

    @property
    def description(self) -> str:
        return "Update apt package lists"

    async def should_execute(self) -> bool:
        return True

    async def execute(self) -> None:
        result = await self.runner.run("apt-get", "update", request_elevation=True)
        require_success(result, "apt-get update failed.")
        self.interaction.write_success("apt package lists updated.")


class InstallAptPackagesStep(OnboardingStep):
    """Install the base toolchain with apt."""

    marker_package = "build-essential"

    def __init__(self, runner: ProcessRunner, interaction: UserInteraction) -> None:
        self.runner = runner
        self.interaction = interaction

    @property
    def description(self) -> str:
        return "Install apt packages"

    async def should_execute(self) -> bool:
        result = await self.runner.run("dpkg", "-s", self.marker_package)
        if not result.is_success:
            return True
        return DPKG_INSTALLED_MARKER not in result.stdout

    async def execute(self) -> None:
        result = await self.runner.run(
            "apt-get", "install", "-y", *APT_PACKAGES, request_elevation=True
        )
        require_success(result, "apt-get install failed.")
        self.interaction.write_success(f"Installed {', '.join(APT_PACKAGES)}.")


class InstallLinuxVsCodeStep(OnboardingStep):
    """Download the VS Code .deb and install it with apt."""

    def __init__(
        self,
        runner: ProcessRunner,
        interaction: UserInteraction,
        arch: Architecture = Architecture.X64,
        session: Optional[requests.Session] = None,
        download_timeout: float = 120,
    ) -> None:
        self.runner = runner
        self.interaction = interaction
        self.arch = arch
        self.session = session or requests.Session()
        self.download_timeout = download_timeout

    @property
    def description(self) -> str:
        return "Install Visual Studio Code"

    async def should_execute(self) -> bool:
        result = await self.runner.run("which", "code")
        return not command_succeeded(result)

    async def execute(self) -> None:
        url = VS_CODE_DEB_URLS.get(self.arch)
        if url is None:
            raise StepCommandError(
                f"No Visual Studio Code package is available for architecture {self.arch.value}."
            )

        fd, package_path = tempfile.mkstemp(prefix="vscode-", suffix=".deb")
        os.close(fd)
        try:
            self.interaction.write_normal("Downloading Visual Studio Code...")
            await asyncio.to_thread(self._download, url, package_path)
            result = await self.runner.run(
                "apt-get", "install", "-y", package_path, request_elevation=True
            )
            require_success(result, "apt-get failed to install Visual Studio Code.")
        finally:
            try:
                os.remove(package_path)
            except OSError:
                logger.debug("Could not remove %s", package_path)

        self.interaction.write_success("Visual Studio Code installed.")

    def _download(self, url: str, destination: str) -> None:
        try:
            with self.session.get(url, stream=True, timeout=self.download_timeout) as response:
                response.raise_for_status()
                with open(destination, "wb") as handle:
                    for chunk in response.iter_content(chunk_size=1024 * 256):
                        if chunk:
                            handle.write(chunk)
        except requests.RequestException as exc:
            raise StepCommandError(f"Failed to download Visual Studio Code: {exc}") from exc
