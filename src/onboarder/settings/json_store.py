"""Small helpers for editing JSON settings files in place."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable


class SettingsParseError(ValueError):
    """The settings file exists but is not a JSON object."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Unable to parse settings file {path}: {reason}")


def load_json_object(path: Path) -> Dict[str, Any]:
    """Read a JSON object; a missing or blank file yields an empty dict."""
    if not path.is_file():
        return {}
    text = path.read_text(encoding="utf-8-sig")
    if not text.strip():
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SettingsParseError(path, str(exc)) from exc
    if not isinstance(data, dict):
        raise SettingsParseError(path, "root element is not an object")
    return data


def write_json_atomic(path: Path, data: Dict[str, Any]) -> None:
    """Write ``data`` next to ``path`` and swap it in with one rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2)
            handle.write("\n")
        os.replace(temp_name, path)
    except BaseException:
        if os.path.exists(temp_name):
            os.remove(temp_name)
        raise


def list_contains_casefold(values: Iterable[Any], item: str) -> bool:
    target = item.casefold()
    return any(isinstance(value, str) and value.casefold() == target for value in values)


def ensure_list_entry(settings: Dict[str, Any], key: str, item: str) -> bool:
    """Make sure ``settings[key]`` is a list containing ``item``.

    Returns True when the settings were changed.
    """
    current = settings.get(key)
    if not isinstance(current, list):
        settings[key] = [item]
        return True
    if list_contains_casefold(current, item):
        return False
    current.append(item)
    return True
