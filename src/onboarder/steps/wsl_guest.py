"""Steps that run inside the WSL guest distribution."""

from __future__ import annotations

from ..config import OnboardingConfig
from ..gitops import GitClient
from ..interaction import UserInteraction
from ..orchestrator.step import OnboardingStep
from .ubuntu import InstallAptPackagesStep


class InstallWslPrerequisitesStep(InstallAptPackagesStep):
    @property
    def description(self) -> str:
        return "Install WSL prerequisites"


class ConfigureWslGitCredentialHelperStep(OnboardingStep):
    """Point git inside WSL at the Windows Git Credential Manager."""

    def __init__(
        self,
        git: GitClient,
        interaction: UserInteraction,
        configuration: OnboardingConfig,
    ) -> None:
        self.git = git
        self.interaction = interaction
        self.configuration = configuration

    @property
    def description(self) -> str:
        return "Configure Git credential helper"

    async def should_execute(self) -> bool:
        current = await self.git.get_global_config("credential.helper")
        return current != self.configuration.wsl_credential_helper_path

    async def execute(self) -> None:
        helper = self.configuration.wsl_credential_helper_path
        await self.git.set_global_config("credential.helper", helper)
        self.interaction.write_success(f"Git credential helper set to {helper}.")
