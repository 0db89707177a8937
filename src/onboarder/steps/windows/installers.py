"""winget based installers for Git, GitHub CLI and VS Code on Windows."""

from __future__ import annotations

import os
from typing import Callable, Optional

from ...config import OnboardingConfig
from ...interaction import UserInteraction
from ...local.environment import EnvironmentRefresher
from ...local.session import ProcessRunner
from ...orchestrator.step import OnboardingStep
from ..base import command_succeeded, iter_lines, require_success

REMOTE_EXTENSION_PACK_ID = "ms-vscode-remote.vscode-remote-extensionpack"

_WINGET_FLAGS = ("-e", "--source", "winget", "--accept-package-agreements", "--accept-source-agreements")


async def winget_install(runner: ProcessRunner, package_id: str, fallback_message: str) -> None:
    result = await runner.run("winget", "install", "--id", package_id, *_WINGET_FLAGS)
    require_success(result, fallback_message)


async def locate_executable(
    runner: ProcessRunner,
    name: str,
    path_exists: Callable[[str], bool] = os.path.isfile,
) -> Optional[str]:
    """First path ``where`` reports for ``name`` that exists on disk."""
    result = await runner.run("where", name)
    if not command_succeeded(result):
        return None
    for line in iter_lines(result.stdout):
        candidate = line.strip()
        if path_exists(candidate):
            return candidate
    return None


class InstallGitForWindowsStep(OnboardingStep):
    def __init__(
        self,
        runner: ProcessRunner,
        interaction: UserInteraction,
        refresher: EnvironmentRefresher,
    ) -> None:
        self.runner = runner
        self.interaction = interaction
        self.refresher = refresher

    @property
    def description(self) -> str:
        return "Install Git for Windows"

    async def should_execute(self) -> bool:
        result = await self.runner.run("where", "git.exe")
        return not result.is_success

    async def execute(self) -> None:
        await winget_install(self.runner, "Git.Git", "winget failed to install Git for Windows.")
        self.refresher.refresh()
        self.interaction.write_success("Git for Windows installed via winget.")


class InstallGitHubCliStep(OnboardingStep):
    def __init__(
        self,
        runner: ProcessRunner,
        interaction: UserInteraction,
        refresher: EnvironmentRefresher,
        configuration: OnboardingConfig,
        path_exists: Callable[[str], bool] = os.path.isfile,
    ) -> None:
        self.runner = runner
        self.interaction = interaction
        self.refresher = refresher
        self.configuration = configuration
        self.path_exists = path_exists

    @property
    def description(self) -> str:
        return "Install GitHub CLI"

    async def should_execute(self) -> bool:
        result = await self.runner.run("where", "gh.exe")
        return not result.is_success

    async def execute(self) -> None:
        await winget_install(self.runner, "GitHub.cli", "winget failed to install the GitHub CLI.")
        self.refresher.refresh()

        cli_path = await locate_executable(self.runner, "gh.exe", self.path_exists)
        if cli_path:
            self.configuration.github_cli_path = cli_path
            self.refresher.ensure_path_contains(os.path.dirname(cli_path))
        self.interaction.write_success("GitHub CLI installed via winget.")


class InstallWindowsVsCodeStep(OnboardingStep):
    def __init__(
        self,
        runner: ProcessRunner,
        interaction: UserInteraction,
        refresher: EnvironmentRefresher,
        configuration: OnboardingConfig,
        path_exists: Callable[[str], bool] = os.path.isfile,
    ) -> None:
        self.runner = runner
        self.interaction = interaction
        self.refresher = refresher
        self.configuration = configuration
        self.path_exists = path_exists

    @property
    def description(self) -> str:
        return "Install Visual Studio Code"

    async def should_execute(self) -> bool:
        result = await self.runner.run("where", "code.cmd")
        return not command_succeeded(result)

    async def execute(self) -> None:
        await winget_install(
            self.runner,
            "Microsoft.VisualStudioCode",
            "Failed to install Visual Studio Code via winget.",
        )
        self.refresher.refresh()

        cli_path = await locate_executable(self.runner, "code.cmd", self.path_exists)
        if cli_path:
            self.configuration.vs_code_cli_path = cli_path
        self.interaction.write_success("Visual Studio Code installed via winget.")


class EnsureVsCodeRemoteExtensionPackStep(OnboardingStep):
    def __init__(
        self,
        runner: ProcessRunner,
        interaction: UserInteraction,
        configuration: OnboardingConfig,
    ) -> None:
        self.runner = runner
        self.interaction = interaction
        self.configuration = configuration

    @property
    def description(self) -> str:
        return "Install VS Code Remote Development extension pack"

    @property
    def code_cli(self) -> str:
        return self.configuration.vs_code_cli_path or "code"

    async def should_execute(self) -> bool:
        result = await self.runner.run(self.code_cli, "--list-extensions")
        if not result.is_success:
            return True
        installed = {line.strip().casefold() for line in iter_lines(result.stdout)}
        return REMOTE_EXTENSION_PACK_ID.casefold() not in installed

    async def execute(self) -> None:
        result = await self.runner.run(
            self.code_cli, "--install-extension", REMOTE_EXTENSION_PACK_ID
        )
        require_success(
            result,
            "Failed to install VS Code Remote Development extension pack via the code CLI.",
        )
        self.interaction.write_success("VS Code Remote Development extension pack installed.")
