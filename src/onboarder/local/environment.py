"""Reload environment variables after installers change them (Windows)."""

from __future__ import annotations

import logging
import os
import platform
from typing import Dict, MutableMapping, Optional

logger = logging.getLogger(__name__)

_MACHINE_ENVIRONMENT_KEY = r"SYSTEM\CurrentControlSet\Control\Session Manager\Environment"
_USER_ENVIRONMENT_KEY = "Environment"


def combine_path(machine_path: Optional[str], user_path: Optional[str]) -> str:
    """Machine PATH followed by user PATH, as Windows builds it for new processes."""
    parts = [part.strip(";") for part in (machine_path, user_path) if part and part.strip(";")]
    return ";".join(parts)


def path_contains(path_value: str, directory: str, case_insensitive: bool) -> bool:
    def normalise(value: str) -> str:
        value = value.rstrip("\\/")
        return value.lower() if case_insensitive else value

    target = normalise(directory)
    return any(normalise(entry) == target for entry in path_value.split(os.pathsep) if entry)


class EnvironmentRefresher:
    """
    Pulls the machine and user environment from the registry into this process.

    winget installers update PATH in the registry only, so tools they install
    are invisible to us until the environment is reloaded. Elsewhere this is a
    no-op.
    """

    def __init__(self, environ: Optional[MutableMapping[str, str]] = None) -> None:
        self.environ = environ if environ is not None else os.environ
        self.is_windows = platform.system() == "Windows"

    def refresh(self) -> None:
        if not self.is_windows:
            return

        import winreg

        machine = _read_registry_environment(winreg.HKEY_LOCAL_MACHINE, _MACHINE_ENVIRONMENT_KEY)
        user = _read_registry_environment(winreg.HKEY_CURRENT_USER, _USER_ENVIRONMENT_KEY)

        for scope in (machine, user):
            for name, value in scope.items():
                if name.upper() != "PATH":
                    self.environ[name] = value

        self.environ["PATH"] = combine_path(_lookup(machine, "PATH"), _lookup(user, "PATH"))
        logger.debug("Environment refreshed from registry")

    def ensure_path_contains(self, directory: str) -> None:
        current = self.environ.get("PATH", "")
        if path_contains(current, directory, case_insensitive=self.is_windows):
            return
        self.environ["PATH"] = directory + os.pathsep + current if current else directory


def _lookup(values: Dict[str, str], name: str) -> Optional[str]:
    for key, value in values.items():
        if key.upper() == name:
            return value
    return None


def _read_registry_environment(hive, sub_key: str) -> Dict[str, str]:
    import winreg

    values: Dict[str, str] = {}
    try:
        with winreg.OpenKey(hive, sub_key) as key:
            index = 0
            while True:
                try:
                    name, value, value_type = winreg.EnumValue(key, index)
                except OSError:
                    break
                index += 1
                if not isinstance(value, str):
                    continue
                if value_type == winreg.REG_EXPAND_SZ:
                    value = winreg.ExpandEnvironmentStrings(value)
                values[name] = value
    except OSError as exc:
        logger.warning("Could not read environment from registry key %s: %s", sub_key, exc)
    return values
