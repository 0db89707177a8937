"""GitHub sign-in through Git Credential Manager."""

from __future__ import annotations

import logging
import os
from typing import Callable, Optional

from ...config import OnboardingConfig
from ...interaction import UserInteraction
from ...local.session import ProcessRunner
from ...orchestrator.step import OnboardingStep
from ..base import require_success
from .installers import locate_executable

logger = logging.getLogger(__name__)

CREDENTIAL_QUERY = "protocol=https\nhost=github.com\n\n"
GITHUB_LOGIN_ARGS = ("auth", "login", "--hostname", "github.com", "--git-protocol", "https", "--web")


def contains_credential(output: Optional[str]) -> bool:
    if not output:
        return False
    lowered = output.lower()
    return "password=" in lowered or "secret=" in lowered


class PreAuthenticateGitCredentialManagerStep(OnboardingStep):
    """Sign in to GitHub once so later clones inside WSL reuse the stored credential."""

    def __init__(
        self,
        runner: ProcessRunner,
        interaction: UserInteraction,
        configuration: OnboardingConfig,
        path_exists: Callable[[str], bool] = os.path.isfile,
    ) -> None:
        self.runner = runner
        self.interaction = interaction
        self.configuration = configuration
        self.path_exists = path_exists

    @property
    def description(self) -> str:
        return "Authenticate Git Credential Manager with GitHub"

    async def should_execute(self) -> bool:
        manager = self.configuration.git_credential_manager_path
        if not manager or not self.path_exists(manager):
            logger.debug("Git Credential Manager not found at %s", manager)
            return True

        # GCM_INTERACTIVE=never 防止查询时弹出登录窗口
        result = await self.runner.run(
            manager,
            "get",
            input_text=CREDENTIAL_QUERY,
            env={"GCM_INTERACTIVE": "never"},
        )
        if not result.is_success:
            return True
        return not contains_credential(result.stdout)

    async def execute(self) -> None:
        self.interaction.write_normal(
            "Launching GitHub authentication flow via Git Credential Manager..."
        )
        cli = await self._resolve_github_cli()
        result = await self.runner.run(cli, *GITHUB_LOGIN_ARGS, interactive=True)
        require_success(result, "GitHub authentication failed via Git Credential Manager.")
        self.interaction.write_success("Git Credential Manager authenticated with GitHub.")

    async def _resolve_github_cli(self) -> str:
        configured = self.configuration.github_cli_path
        if configured and self.path_exists(configured):
            return configured
        located = await locate_executable(self.runner, "gh.exe", self.path_exists)
        if located:
            self.configuration.github_cli_path = located
            return located
        return "gh"
