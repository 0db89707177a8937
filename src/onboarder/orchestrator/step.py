"""The contract every onboarding step implements."""

from __future__ import annotations

from abc import ABC, abstractmethod


class OnboardingStep(ABC):
    """A single idempotent unit of machine setup.

    ``should_execute`` decides whether work is needed and must not change the
    system. It returns ``False`` when the machine is already configured and
    raises when the probe itself cannot finish (missing tooling, unreadable
    state). ``execute`` performs the change and raises on failure.
    """

    @property
    @abstractmethod
    def description(self) -> str:
        """Stable, human readable name used in every message about the step."""

    @abstractmethod
    async def should_execute(self) -> bool:
        ...

    @abstractmethod
    async def execute(self) -> None:
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.description!r}>"
