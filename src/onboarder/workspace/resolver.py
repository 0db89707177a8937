"""Resolve where the project repository lives on this machine."""

from __future__ import annotations

import os
import posixpath
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from ..local.probe import PlatformFacts

WORKSPACE_ENV_VAR = "ONBOARD_WORKSPACE_DIR"
DEFAULT_WORKSPACE_NAME = "projects"

_WINDOWS_DRIVE = re.compile(r"^([A-Za-z]):[\\/]?(.*)$")
_ENV_REFERENCE = re.compile(r"\$\{(\w+)\}|\$(\w+)|%(\w+)%")


@dataclass(frozen=True)
class WorkspacePaths:
    """Workspace directory and the repository checkout inside it."""

    workspace_path: Path
    repository_path: Path


def windows_to_wsl_path(value: str) -> str:
    """``C:\\Users\\me`` -> ``/mnt/c/Users/me``; other values are returned as-is."""
    match = _WINDOWS_DRIVE.match(value)
    if not match:
        return value
    drive, remainder = match.groups()
    remainder = remainder.replace("\\", "/").strip("/")
    mounted = f"/mnt/{drive.lower()}"
    return f"{mounted}/{remainder}" if remainder else mounted


def expand_variables(value: str, environ: Mapping[str, str]) -> str:
    """Expand ``$VAR``, ``${VAR}`` and ``%VAR%``; unknown references are left alone."""

    def replace(match: re.Match) -> str:
        name = next(group for group in match.groups() if group)
        return environ.get(name, match.group(0))

    return _ENV_REFERENCE.sub(replace, value)


def resolve_workspace(
    facts: PlatformFacts,
    repository_name: str,
    workspace_override: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> WorkspacePaths:
    environ = environ if environ is not None else os.environ
    home = facts.home_directory

    # 空白值视为未设置
    candidates = (environ.get(WORKSPACE_ENV_VAR), workspace_override)
    raw = next((value.strip() for value in candidates if value and value.strip()), "")
    if not raw:
        raw = os.path.join(home, DEFAULT_WORKSPACE_NAME)

    value = expand_variables(raw, environ)
    if value == "~" or value.startswith(("~/", "~\\")):
        value = home + value[1:]

    if facts.is_wsl:
        value = windows_to_wsl_path(value)
        # WSL 内一律使用 POSIX 路径
        if not posixpath.isabs(value):
            value = posixpath.join(home, value)
        workspace = Path(posixpath.normpath(value))
    else:
        if not os.path.isabs(value):
            value = os.path.join(home, value)
        workspace = Path(os.path.normpath(value))

    return WorkspacePaths(
        workspace_path=workspace,
        repository_path=workspace / repository_name,
    )
