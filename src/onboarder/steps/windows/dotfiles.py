"""VS Code Dev Container dotfiles settings."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from ...config import OnboardingConfig
from ...interaction import UserInteraction
from ...orchestrator.step import OnboardingStep
from ...settings import SettingsParseError, load_json_object, write_json_atomic

REPOSITORY_KEY = "dotfiles.repository"
TARGET_PATH_KEY = "dotfiles.targetPath"

OPTION_CUSTOM = "CUSTOM"
OPTION_DEFAULT = "DEFAULT"
OPTION_SKIP = "SKIP"
_OPTIONS = (OPTION_CUSTOM, OPTION_DEFAULT, OPTION_SKIP)

_EXPLANATION = """\
**VS Code dotfiles configuration needs your input.**

### What this does
- VS Code Dev Containers can clone a dotfiles repository whenever a container starts.
- The setting only applies inside Dev Container environments.
- Learn more: https://code.visualstudio.com/docs/devcontainers/containers#_personalizing-with-dotfile-repositories

### Default repository
- `{default}`

### Choose an option
- **CUSTOM**: Provide a repository and optional target path.
- **DEFAULT**: Use the default repository above.
- **SKIP**: Leave dotfiles unconfigured for now.
"""


def default_settings_path() -> Path:
    appdata = os.environ.get("APPDATA") or str(Path.home() / "AppData" / "Roaming")
    return Path(appdata) / "Code" / "User" / "settings.json"


@dataclass
class SettingsSnapshot:
    path: Path
    settings: Dict[str, Any] = field(default_factory=dict)
    has_repository: bool = False
    parse_error: Optional[str] = None


class ConfigureVsCodeDotfilesStep(OnboardingStep):
    def __init__(
        self,
        interaction: UserInteraction,
        configuration: OnboardingConfig,
        settings_path_provider: Callable[[], Path] = default_settings_path,
    ) -> None:
        self.interaction = interaction
        self.configuration = configuration
        self.settings_path_provider = settings_path_provider
        self._snapshot: Optional[SettingsSnapshot] = None

    @property
    def description(self) -> str:
        return "Configure VS Code dotfiles repository"

    async def should_execute(self) -> bool:
        self._snapshot = None
        self._snapshot = self._load()
        return not self._snapshot.has_repository

    async def execute(self) -> None:
        snapshot = self._snapshot or self._load()
        if snapshot.parse_error is not None:
            # settings.json 可能含注释，不覆盖用户文件
            self.interaction.write_warning(
                f"Could not read VS Code settings ({snapshot.parse_error}). "
                f"Set '{REPOSITORY_KEY}' manually in {snapshot.path}."
            )
            return

        default_repository = self.configuration.dotfiles_repository
        self.interaction.write_normal("")
        self.interaction.write_markdown(_EXPLANATION.format(default=default_repository))

        option = self._prompt_for_option(default_repository)
        if option == OPTION_SKIP:
            self.interaction.write_warning("Skipping VS Code dotfiles configuration at user request.")
            return

        target_path = None
        if option == OPTION_CUSTOM:
            repository = self._prompt_for_repository()
            target_path = self._prompt_for_target_path()
        else:
            repository = default_repository

        snapshot.settings[REPOSITORY_KEY] = repository
        if target_path:
            snapshot.settings[TARGET_PATH_KEY] = target_path
        else:
            snapshot.settings.pop(TARGET_PATH_KEY, None)

        write_json_atomic(snapshot.path, snapshot.settings)
        snapshot.has_repository = True
        self.interaction.write_success("VS Code dotfiles configuration updated.")

    def _load(self) -> SettingsSnapshot:
        path = self.settings_path_provider()
        try:
            settings = load_json_object(path)
        except SettingsParseError as exc:
            return SettingsSnapshot(path=path, parse_error=str(exc.__cause__ or exc))

        repository = settings.get(REPOSITORY_KEY)
        has_repository = isinstance(repository, str) and bool(repository.strip())
        return SettingsSnapshot(path=path, settings=settings, has_repository=has_repository)

    def _prompt_for_option(self, default_repository: str) -> str:
        while True:
            answer = self.interaction.ask(
                "Configure VS Code Dev Container dotfiles (CUSTOM/DEFAULT/SKIP):",
                OPTION_DEFAULT,
            ).strip().upper()
            if not answer:
                return OPTION_DEFAULT
            if answer in _OPTIONS:
                return answer
            self.interaction.write_warning(
                f"Please enter CUSTOM to supply a repository, DEFAULT to use {default_repository}, "
                "or SKIP to leave dotfiles unconfigured."
            )

    def _prompt_for_repository(self) -> str:
        while True:
            answer = self.interaction.ask(
                "Enter the GitHub repository to clone (owner/repo):"
            ).strip()
            if answer:
                return answer
            self.interaction.write_warning("Repository cannot be empty.")

    def _prompt_for_target_path(self) -> Optional[str]:
        answer = self.interaction.ask(
            "Optional: enter a target path for dotfiles (leave blank for default):", ""
        ).strip()
        return answer or None
