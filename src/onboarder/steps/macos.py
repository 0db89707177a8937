"""macOS onboarding steps (Homebrew based)."""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Callable, Optional

import requests

from ..interaction import UserInteraction
from ..local.environment import EnvironmentRefresher
from ..local.session import ProcessRunner
from ..orchestrator.step import OnboardingStep
from .base import StepCommandError, command_succeeded, require_success

logger = logging.getLogger(__name__)

HOMEBREW_INSTALL_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"
HOMEBREW_BIN_DIRECTORIES = ("/opt/homebrew/bin", "/usr/local/bin")
BREW_PACKAGES = ("git", "gh", "chezmoi")
VS_CODE_APP_PATH = "/Applications/Visual Studio Code.app"


class InstallHomebrewStep(OnboardingStep):
    def __init__(
        self,
        runner: ProcessRunner,
        interaction: UserInteraction,
        refresher: Optional[EnvironmentRefresher] = None,
        session: Optional[requests.Session] = None,
        download_timeout: float = 60,
    ) -> None:
        self.runner = runner
        self.interaction = interaction
        self.refresher = refresher or EnvironmentRefresher()
        self.session = session or requests.Session()
        self.download_timeout = download_timeout

    @property
    def description(self) -> str:
        return "Install Homebrew"

    async def should_execute(self) -> bool:
        result = await self.runner.run("which", "brew")
        return not command_succeeded(result)

    async def execute(self) -> None:
        self.interaction.write_normal("Downloading the Homebrew installer...")
        script = await asyncio.to_thread(self._download_installer)

        # 安装脚本会请求 sudo 密码，需要交互终端
        result = await self.runner.run("/bin/bash", "-c", script, interactive=True)
        require_success(result, "Homebrew installation failed.")

        for directory in HOMEBREW_BIN_DIRECTORIES:
            if os.path.isdir(directory):
                self.refresher.ensure_path_contains(directory)
        self.interaction.write_success("Homebrew installed.")

    def _download_installer(self) -> str:
        try:
            response = self.session.get(HOMEBREW_INSTALL_URL, timeout=self.download_timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise StepCommandError(f"Failed to download the Homebrew installer: {exc}") from exc
        return response.text


class InstallBrewPackagesStep(OnboardingStep):
    def __init__(self, runner: ProcessRunner, interaction: UserInteraction) -> None:
        self.runner = runner
        self.interaction = interaction

    @property
    def description(self) -> str:
        return "Install Homebrew packages"

    async def should_execute(self) -> bool:
        result = await self.runner.run("brew", "list", "gh")
        return not result.is_success

    async def execute(self) -> None:
        result = await self.runner.run("brew", "install", *BREW_PACKAGES)
        require_success(result, "brew failed to install the required packages.")
        self.interaction.write_success(f"Installed {', '.join(BREW_PACKAGES)} via Homebrew.")


class InstallMacVsCodeStep(OnboardingStep):
    def __init__(
        self,
        runner: ProcessRunner,
        interaction: UserInteraction,
        path_exists: Callable[[str], bool] = os.path.exists,
    ) -> None:
        self.runner = runner
        self.interaction = interaction
        self.path_exists = path_exists

    @property
    def description(self) -> str:
        return "Install Visual Studio Code"

    async def should_execute(self) -> bool:
        result = await self.runner.run("which", "code")
        if command_succeeded(result):
            return False
        # 已安装应用但未把 code 加入 PATH
        return not self.path_exists(VS_CODE_APP_PATH)

    async def execute(self) -> None:
        result = await self.runner.run("brew", "install", "--cask", "visual-studio-code")
        require_success(result, "brew failed to install Visual Studio Code.")
        self.interaction.write_success("Visual Studio Code installed via Homebrew.")
