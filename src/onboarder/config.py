"""Configuration loading utilities for onboarder."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar

from dotenv import load_dotenv

from .paths import USER_CONFIG_PATH

# Load .env file if it exists
load_dotenv()

_DEFAULT_CONFIG_PATH = Path("config/default_config.json")

DEFAULT_PROJECT_REPOSITORY_URL = (
    "https://github.com/psps-mental-health-app/mental-health-app-frontend.git"
)
DEFAULT_GIT_CREDENTIAL_MANAGER_PATH = (
    r"C:\Program Files\Git\mingw64\bin\git-credential-manager.exe"
)
DEFAULT_WSL_CREDENTIAL_HELPER_PATH = (
    "/mnt/c/Program Files/Git/mingw64/bin/git-credential-manager.exe"
)

_T = TypeVar("_T")


def repository_name_from_url(url: str) -> str:
    name = url.rstrip("/").split("/")[-1]
    if name.endswith(".git"):
        name = name[:-4]
    return name or "repository"


@dataclass
class OnboardingConfig:
    """What the onboarding steps install and configure."""

    wsl_distro_name: str = "Ubuntu-22.04"
    wsl_distro_image: str = "Ubuntu-22.04"
    git_credential_manager_path: str = DEFAULT_GIT_CREDENTIAL_MANAGER_PATH
    wsl_credential_helper_path: str = DEFAULT_WSL_CREDENTIAL_HELPER_PATH
    dotfiles_repository: str = "kevinaud/dotfiles"
    project_repository_url: str = DEFAULT_PROJECT_REPOSITORY_URL
    project_repository_name: Optional[str] = None
    workspace_dir: Optional[str] = None

    # 运行时由步骤填充
    active_wsl_distro_name: Optional[str] = None
    github_cli_path: Optional[str] = None
    vs_code_cli_path: Optional[str] = None

    @property
    def repository_name(self) -> str:
        return self.project_repository_name or repository_name_from_url(
            self.project_repository_url
        )

    @property
    def target_wsl_distro(self) -> str:
        return self.active_wsl_distro_name or self.wsl_distro_name


@dataclass
class ExecutionConfig:
    """Defaults for run-wide flags; CLI switches can only turn them on."""

    dry_run: bool = False
    verbose: bool = False
    command_timeout: Optional[float] = None


@dataclass
class LoggingConfig:
    """Where run transcripts go."""

    transcript_enabled: bool = True
    log_dir: Optional[str] = None


@dataclass
class AppConfig:
    """Top-level configuration."""

    onboarding: OnboardingConfig = field(default_factory=OnboardingConfig)
    execution: ExecutionConfig = field(default_factory=ExecutionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "AppConfig":
        unknown = {k for k in payload if not k.startswith("_")} - {
            "onboarding", "execution", "logging",
        }
        if unknown:
            raise ValueError(f"Unknown configuration section(s): {', '.join(sorted(unknown))}")

        return cls(
            onboarding=_build_section(OnboardingConfig, payload.get("onboarding")),
            execution=_build_section(ExecutionConfig, payload.get("execution")),
            logging=_build_section(LoggingConfig, payload.get("logging")),
        )


def _build_section(section_type: Type[_T], payload: Optional[Dict[str, Any]]) -> _T:
    payload = payload or {}
    if not isinstance(payload, dict):
        raise ValueError(f"Configuration section for {section_type.__name__} must be an object")

    # 过滤掉以下划线开头的注释字段
    payload = {k: v for k, v in payload.items() if not k.startswith("_")}

    known = {f.name for f in fields(section_type)}
    unknown = set(payload) - known
    if unknown:
        raise ValueError(
            f"Unknown {section_type.__name__} key(s): {', '.join(sorted(unknown))}"
        )
    return section_type(**{**section_type().__dict__, **payload})


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _getenv(name: str) -> Optional[str]:
    """Return a stripped environment value; blank values count as unset."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _apply_env_overrides(config: AppConfig) -> None:
    env_workspace = _getenv("ONBOARD_WORKSPACE_DIR")
    if env_workspace:
        config.onboarding.workspace_dir = env_workspace

    env_distro = _getenv("ONBOARDER_WSL_DISTRO")
    if env_distro:
        config.onboarding.wsl_distro_name = env_distro
        config.onboarding.wsl_distro_image = env_distro

    env_repo = _getenv("ONBOARDER_PROJECT_REPO_URL")
    if env_repo:
        config.onboarding.project_repository_url = env_repo

    env_dotfiles = _getenv("ONBOARDER_DOTFILES_REPO")
    if env_dotfiles:
        config.onboarding.dotfiles_repository = env_dotfiles

    env_verbose = _getenv("ONBOARDER_VERBOSE")
    if env_verbose:
        config.execution.verbose = _env_flag(env_verbose)


def load_config(path: Optional[str] = None) -> AppConfig:
    """Load configuration from `path` or the default locations.

    Lookup order: explicit ``path`` (must exist), ``ONBOARDER_CONFIG``,
    ``~/.onboarder/config.json``, ``config/default_config.json``. With no file
    at all the built-in defaults are used.

    Environment variables (higher priority than config file):
    - ONBOARD_WORKSPACE_DIR: Directory the project repository is cloned into
    - ONBOARDER_WSL_DISTRO: WSL distribution name and image
    - ONBOARDER_PROJECT_REPO_URL: Project repository to clone
    - ONBOARDER_DOTFILES_REPO: Default dotfiles repository offered for VS Code
    - ONBOARDER_VERBOSE: Enable verbose output
    """

    if path:
        explicit = Path(path).expanduser()
        if not explicit.is_file():
            raise FileNotFoundError(f"Could not find configuration file: {explicit}")
        candidate_paths = [explicit]
    else:
        candidate_paths = []
        env_path = os.getenv("ONBOARDER_CONFIG")
        if env_path:
            candidate_paths.append(Path(env_path).expanduser())
        candidate_paths.extend([USER_CONFIG_PATH, _DEFAULT_CONFIG_PATH])

    config = AppConfig()
    for candidate in candidate_paths:
        if candidate.is_file():
            with candidate.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
            if not isinstance(data, dict):
                raise ValueError(f"Configuration file {candidate} must contain a JSON object")
            config = AppConfig.from_dict(data)
            break

    _apply_env_overrides(config)
    return config
