"""Build the orchestrator for the detected platform."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import requests

from .config import OnboardingConfig
from .gitops import GitClient
from .interaction import UserInteraction
from .local.environment import EnvironmentRefresher
from .local.probe import OperatingSystem, PlatformFacts
from .local.session import ProcessRunner
from .orchestrator import ExecutionOptions, OnboardingStep, SequentialOrchestrator
from .steps import (
    AptUpdateStep,
    CloneProjectRepoStep,
    ConfigureGitUserStep,
    ConfigureWslGitCredentialHelperStep,
    InstallAptPackagesStep,
    InstallBrewPackagesStep,
    InstallHomebrewStep,
    InstallLinuxVsCodeStep,
    InstallMacVsCodeStep,
    InstallWslPrerequisitesStep,
)
from .steps.windows import (
    ConfigureDockerDesktopWslIntegrationStep,
    ConfigureVsCodeDotfilesStep,
    EnableWslFeaturesStep,
    EnsureVsCodeRemoteExtensionPackStep,
    InstallDockerDesktopStep,
    InstallGitForWindowsStep,
    InstallGitHubCliStep,
    InstallWindowsVsCodeStep,
    PreAuthenticateGitCredentialManagerStep,
)

logger = logging.getLogger(__name__)


class UnsupportedPlatformError(RuntimeError):
    """No onboarding flow exists for this platform/mode combination."""

    def __init__(self, facts: PlatformFacts) -> None:
        self.facts = facts
        super().__init__(f"Unsupported platform: {facts.os.value}, WSL: {facts.is_wsl}")


class OnboardingPlatform(str, Enum):
    WINDOWS_HOST = "windows-host"
    WSL_GUEST = "wsl-guest"
    UBUNTU = "ubuntu"
    MACOS = "macos"


PLATFORM_TITLES = {
    OnboardingPlatform.WINDOWS_HOST: "Windows host onboarding",
    OnboardingPlatform.WSL_GUEST: "WSL guest onboarding",
    OnboardingPlatform.UBUNTU: "Ubuntu onboarding",
    OnboardingPlatform.MACOS: "macOS onboarding",
}


def select_platform(facts: PlatformFacts, wsl_guest_mode: bool = False) -> OnboardingPlatform:
    if facts.os is OperatingSystem.WINDOWS:
        return OnboardingPlatform.WINDOWS_HOST
    if facts.os is OperatingSystem.LINUX:
        if facts.is_wsl and wsl_guest_mode:
            return OnboardingPlatform.WSL_GUEST
        if not facts.is_wsl:
            return OnboardingPlatform.UBUNTU
    if facts.os is OperatingSystem.MACOS:
        return OnboardingPlatform.MACOS
    raise UnsupportedPlatformError(facts)


@dataclass
class StepDependencies:
    """Collaborators handed to the steps of one run."""

    runner: ProcessRunner
    interaction: UserInteraction
    configuration: OnboardingConfig
    facts: PlatformFacts
    refresher: EnvironmentRefresher
    http: requests.Session

    @property
    def git(self) -> GitClient:
        return GitClient(self.runner)


def build_steps(platform: OnboardingPlatform, deps: StepDependencies) -> List[OnboardingStep]:
    runner, interaction, config = deps.runner, deps.interaction, deps.configuration
    git = deps.git

    if platform is OnboardingPlatform.WINDOWS_HOST:
        return [
            EnableWslFeaturesStep(runner, interaction, config),
            InstallGitForWindowsStep(runner, interaction, deps.refresher),
            InstallGitHubCliStep(runner, interaction, deps.refresher, config),
            InstallWindowsVsCodeStep(runner, interaction, deps.refresher, config),
            EnsureVsCodeRemoteExtensionPackStep(runner, interaction, config),
            InstallDockerDesktopStep(runner, interaction, config),
            ConfigureDockerDesktopWslIntegrationStep(runner, interaction, config),
            PreAuthenticateGitCredentialManagerStep(runner, interaction, config),
            ConfigureVsCodeDotfilesStep(interaction, config),
            ConfigureGitUserStep(git, interaction),
        ]

    if platform is OnboardingPlatform.WSL_GUEST:
        return [
            AptUpdateStep(runner, interaction),
            InstallWslPrerequisitesStep(runner, interaction),
            ConfigureWslGitCredentialHelperStep(git, interaction, config),
            ConfigureGitUserStep(git, interaction),
            CloneProjectRepoStep(git, interaction, config, deps.facts),
        ]

    if platform is OnboardingPlatform.UBUNTU:
        return [
            AptUpdateStep(runner, interaction),
            InstallAptPackagesStep(runner, interaction),
            InstallLinuxVsCodeStep(runner, interaction, deps.facts.arch, session=deps.http),
            ConfigureGitUserStep(git, interaction),
            CloneProjectRepoStep(git, interaction, config, deps.facts),
        ]

    return [
        InstallHomebrewStep(runner, interaction, deps.refresher, session=deps.http),
        InstallBrewPackagesStep(runner, interaction),
        InstallMacVsCodeStep(runner, interaction),
        ConfigureGitUserStep(git, interaction),
        CloneProjectRepoStep(git, interaction, config, deps.facts),
    ]


def build_orchestrator(
    facts: PlatformFacts,
    execution_options: ExecutionOptions,
    interaction: UserInteraction,
    configuration: OnboardingConfig,
    wsl_guest_mode: bool = False,
    runner: Optional[ProcessRunner] = None,
    refresher: Optional[EnvironmentRefresher] = None,
    http: Optional[requests.Session] = None,
) -> SequentialOrchestrator:
    """
    Pick the flow for ``facts`` and wire its steps into one orchestrator.

    Raises:
        UnsupportedPlatformError: when no flow matches
    """
    platform = select_platform(facts, wsl_guest_mode)
    deps = StepDependencies(
        runner=runner or ProcessRunner(),
        interaction=interaction,
        configuration=configuration,
        facts=facts,
        refresher=refresher or EnvironmentRefresher(),
        http=http or requests.Session(),
    )
    steps = build_steps(platform, deps)
    logger.info("Selected %s flow with %d step(s)", platform.value, len(steps))
    return SequentialOrchestrator(
        interaction=interaction,
        execution_options=execution_options,
        title=PLATFORM_TITLES[platform],
        steps=steps,
    )
