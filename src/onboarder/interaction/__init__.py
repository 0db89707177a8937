"""User interaction module."""

from .handler import (
    TRANSCRIPT_LOGGER_NAME,
    AutoResponseInteraction,
    ConsoleUserInteraction,
    InteractionUnavailableError,
    UserInteraction,
)

__all__ = [
    "TRANSCRIPT_LOGGER_NAME",
    "AutoResponseInteraction",
    "ConsoleUserInteraction",
    "InteractionUnavailableError",
    "UserInteraction",
]
