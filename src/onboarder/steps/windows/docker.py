"""Docker Desktop installation and WSL integration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

from ...config import OnboardingConfig
from ...interaction import UserInteraction
from ...local.session import ProcessRunner
from ...orchestrator.step import OnboardingStep
from ...settings import (
    SettingsParseError,
    ensure_list_entry,
    list_contains_casefold,
    load_json_object,
    write_json_atomic,
)
from .installers import winget_install

logger = logging.getLogger(__name__)

INTEGRATED_DISTROS_KEY = "IntegratedWslDistros"
DOCKER_DESKTOP_PROGRAM_FILES = r"C:\Program Files\Docker\Docker\Docker Desktop.exe"


def docker_settings_path(appdata: str) -> Path:
    return Path(appdata) / "Docker" / "settings-store.json"


def docker_desktop_candidates(environ: Mapping[str, str]) -> list:
    candidates = [DOCKER_DESKTOP_PROGRAM_FILES]
    local_appdata = environ.get("LOCALAPPDATA")
    if local_appdata:
        candidates.append(os.path.join(local_appdata, "Programs", "Docker", "Docker Desktop.exe"))
    return candidates


def _appdata_from_environment() -> Optional[str]:
    return os.environ.get("APPDATA") or None


class InstallDockerDesktopStep(OnboardingStep):
    def __init__(
        self,
        runner: ProcessRunner,
        interaction: UserInteraction,
        configuration: OnboardingConfig,
        environ: Optional[Mapping[str, str]] = None,
        path_exists: Callable[[str], bool] = os.path.isfile,
    ) -> None:
        self.runner = runner
        self.interaction = interaction
        self.configuration = configuration
        self.environ = environ if environ is not None else os.environ
        self.path_exists = path_exists

    @property
    def description(self) -> str:
        return "Install Docker Desktop"

    async def should_execute(self) -> bool:
        return not any(self.path_exists(path) for path in docker_desktop_candidates(self.environ))

    async def execute(self) -> None:
        await winget_install(self.runner, "Docker.DockerDesktop", "winget failed to install Docker Desktop.")
        self.interaction.write_success("Docker Desktop installed via winget.")

        distro = self.configuration.target_wsl_distro
        integrated = self._preconfigure_integration(distro)
        self.interaction.write_normal(
            "Launch Docker Desktop and accept the terms of service if prompted."
        )
        if integrated:
            self.interaction.write_normal(
                f"WSL integration for {distro} has been pre-configured. "
                "Restart Docker Desktop if it was already running."
            )
        else:
            self.interaction.write_normal(
                f"Verify WSL integration for {distro} inside Docker Desktop before continuing."
            )

    def _preconfigure_integration(self, distro: str) -> bool:
        appdata = self.environ.get("APPDATA")
        if not appdata:
            self.interaction.write_warning(
                "Unable to locate the AppData folder. Enable WSL integration manually in Docker Desktop."
            )
            return False

        path = docker_settings_path(appdata)
        try:
            settings = load_json_object(path)
        except (SettingsParseError, OSError) as exc:
            self.interaction.write_warning(
                f"Unable to read Docker Desktop settings. Enable WSL integration manually. Details: {exc}"
            )
            return False

        if not ensure_list_entry(settings, INTEGRATED_DISTROS_KEY, distro):
            return True
        try:
            write_json_atomic(path, settings)
        except OSError as exc:
            self.interaction.write_warning(
                f"Failed to update Docker Desktop settings: {exc}. Enable WSL integration manually if needed."
            )
            return False
        return True


class SettingsStatus(Enum):
    READY = "ready"
    MISSING_APPDATA = "missing_appdata"
    PARSE_FAILURE = "parse_failure"


@dataclass
class DockerSettingsState:
    status: SettingsStatus
    target_distro: str
    settings_path: Optional[Path] = None
    settings: Dict[str, Any] = field(default_factory=dict)
    is_configured: bool = False
    failure_message: Optional[str] = None


class ConfigureDockerDesktopWslIntegrationStep(OnboardingStep):
    """
    Adds the WSL distribution to Docker Desktop's integrated distros.

    Problems with the settings file are reported as warnings; Docker Desktop
    can still be configured by hand.
    """

    def __init__(
        self,
        runner: ProcessRunner,
        interaction: UserInteraction,
        configuration: OnboardingConfig,
        appdata_provider: Optional[Callable[[], Optional[str]]] = None,
        environ: Optional[Mapping[str, str]] = None,
        path_exists: Callable[[str], bool] = os.path.isfile,
    ) -> None:
        self.runner = runner
        self.interaction = interaction
        self.configuration = configuration
        self.appdata_provider = appdata_provider or _appdata_from_environment
        self.environ = environ if environ is not None else os.environ
        self.path_exists = path_exists
        self._state: Optional[DockerSettingsState] = None

    @property
    def description(self) -> str:
        return "Configure Docker Desktop WSL integration"

    async def should_execute(self) -> bool:
        self._state = None
        self._state = self._load_state()
        return self._state.status is not SettingsStatus.READY or not self._state.is_configured

    async def execute(self) -> None:
        state = self._state or self._load_state()

        if state.status is SettingsStatus.MISSING_APPDATA:
            self.interaction.write_warning(
                "Unable to locate the AppData folder. Configure Docker Desktop's WSL integration manually."
            )
            return
        if state.status is SettingsStatus.PARSE_FAILURE:
            self.interaction.write_warning(
                f"Failed to parse Docker Desktop settings: {state.failure_message}. "
                "Review the file manually before rerunning onboarding."
            )
            return

        if not ensure_list_entry(state.settings, INTEGRATED_DISTROS_KEY, state.target_distro):
            self.interaction.write_success(
                "Docker Desktop already integrates with the selected WSL distribution."
            )
            return

        write_json_atomic(state.settings_path, state.settings)
        state.is_configured = True

        self.interaction.write_normal("Restarting Docker Desktop to apply updated WSL integration...")
        if not await self._restart_docker_desktop():
            self.interaction.write_warning(
                "Docker Desktop restart was requested but may not have completed. "
                "Restart Docker Desktop manually if required."
            )
            return
        self.interaction.write_success("Docker Desktop WSL integration updated.")

    def _load_state(self) -> DockerSettingsState:
        target = self.configuration.target_wsl_distro
        appdata = self.appdata_provider()
        if not appdata:
            return DockerSettingsState(SettingsStatus.MISSING_APPDATA, target)

        path = docker_settings_path(appdata)
        try:
            settings = load_json_object(path)
        except SettingsParseError as exc:
            return DockerSettingsState(
                SettingsStatus.PARSE_FAILURE, target, failure_message=str(exc.__cause__ or exc)
            )

        integrated = settings.get(INTEGRATED_DISTROS_KEY)
        configured = isinstance(integrated, list) and list_contains_casefold(integrated, target)
        return DockerSettingsState(
            SettingsStatus.READY,
            target,
            settings_path=path,
            settings=settings,
            is_configured=configured,
        )

    async def _restart_docker_desktop(self) -> bool:
        executable = next(
            (path for path in docker_desktop_candidates(self.environ) if self.path_exists(path)),
            None,
        )
        script = "Stop-Process -Name 'Docker Desktop' -Force -ErrorAction SilentlyContinue"
        if executable:
            script += f"; Start-Process -FilePath '{executable}'"
        result = await self.runner.run("powershell", "-NoProfile", "-Command", script)
        if not result.is_success:
            logger.debug("Docker Desktop restart failed: %s", result.stderr.strip())
        return result.is_success and executable is not None
