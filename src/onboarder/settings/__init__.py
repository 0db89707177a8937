"""JSON settings file helpers."""

from .json_store import (
    SettingsParseError,
    ensure_list_entry,
    list_contains_casefold,
    load_json_object,
    write_json_atomic,
)

__all__ = [
    "SettingsParseError",
    "ensure_list_entry",
    "list_contains_casefold",
    "load_json_object",
    "write_json_atomic",
]
