"""Steps used by every platform flow."""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from ..config import OnboardingConfig
from ..gitops import GitClient, is_git_repository
from ..interaction import UserInteraction
from ..local.probe import PlatformFacts
from ..orchestrator.step import OnboardingStep
from ..workspace import WorkspacePaths, resolve_workspace

logger = logging.getLogger(__name__)


class ConfigureGitUserStep(OnboardingStep):
    """Make sure ``user.name`` and ``user.email`` are set globally."""

    def __init__(self, git: GitClient, interaction: UserInteraction) -> None:
        self.git = git
        self.interaction = interaction

    @property
    def description(self) -> str:
        return "Configure Git user identity"

    async def should_execute(self) -> bool:
        name = await self.git.get_global_config("user.name")
        email = await self.git.get_global_config("user.email")
        return not name or not email

    async def execute(self) -> None:
        current_name = await self.git.get_global_config("user.name")
        current_email = await self.git.get_global_config("user.email")

        name = self._prompt_until_non_empty("Enter your Git user name", current_name)
        email = self._prompt_until_non_empty("Enter your Git email address", current_email)

        await self.git.set_global_config("user.name", name)
        await self.git.set_global_config("user.email", email)
        self.interaction.write_success(f"Git identity set to {name} <{email}>.")

    def _prompt_until_non_empty(self, prompt: str, default: Optional[str]) -> str:
        while True:
            answer = self.interaction.ask(prompt, default).strip()
            if answer:
                return answer
            self.interaction.write_warning("A value is required.")


class CloneProjectRepoStep(OnboardingStep):
    """Clone the project repository into the workspace, or fast-forward it."""

    def __init__(
        self,
        git: GitClient,
        interaction: UserInteraction,
        configuration: OnboardingConfig,
        facts: PlatformFacts,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.git = git
        self.interaction = interaction
        self.configuration = configuration
        self.facts = facts
        self.environ = environ

    @property
    def description(self) -> str:
        return "Clone project repository"

    def resolve_paths(self) -> WorkspacePaths:
        return resolve_workspace(
            self.facts,
            self.configuration.repository_name,
            workspace_override=self.configuration.workspace_dir,
            environ=self.environ,
        )

    async def should_execute(self) -> bool:
        repository_path = self.resolve_paths().repository_path
        if not repository_path.exists():
            return True
        if is_git_repository(repository_path):
            # 已存在的仓库每次都拉取更新
            return True
        self._warn_not_a_repository(repository_path)
        return False

    async def execute(self) -> None:
        paths = self.resolve_paths()
        repository_path = paths.repository_path

        if repository_path.exists():
            if not is_git_repository(repository_path):
                self._warn_not_a_repository(repository_path)
                return
            self.interaction.write_normal(f"Updating {repository_path}...")
            await self.git.pull_ff_only(repository_path)
            self.interaction.write_success(f"Repository updated at {repository_path}.")
            return

        paths.workspace_path.mkdir(parents=True, exist_ok=True)
        self.interaction.write_normal(
            f"Cloning {self.configuration.project_repository_url} into {repository_path}..."
        )
        await self.git.clone(self.configuration.project_repository_url, repository_path)
        self.interaction.write_success(f"Repository cloned to {repository_path}.")

    def _warn_not_a_repository(self, path) -> None:
        logger.info("%s exists but is not a git repository", path)
        self.interaction.write_warning(
            f"{path} exists but is not a git repository. Move it aside to clone the project."
        )
