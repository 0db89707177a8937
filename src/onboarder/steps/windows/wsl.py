"""Windows Subsystem for Linux readiness check."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from ...config import OnboardingConfig
from ...interaction import UserInteraction
from ...local.session import ProcessRunner
from ...orchestrator.step import OnboardingStep
from ..base import iter_lines

logger = logging.getLogger(__name__)

WSL_FEATURE_NAME = "Microsoft-Windows-Subsystem-Linux"
VIRTUAL_MACHINE_PLATFORM_FEATURE_NAME = "VirtualMachinePlatform"

_COLUMN_BREAK = re.compile(r"\s{2,}")
_DEFAULT_SUFFIX = re.compile(r"\s*\(default\)\s*$", re.IGNORECASE)


def extract_distribution_name(line: str) -> Optional[str]:
    """Distribution name from one ``wsl -l -v`` row, or None for the header/blank rows.

    Names may contain single spaces; the STATE column starts after the first
    run of two or more spaces.
    """
    text = line.replace("\ufeff", "").strip()
    if text.startswith("*"):
        text = text[1:].strip()
    if not text:
        return None

    name = _COLUMN_BREAK.split(text, maxsplit=1)[0].strip()
    name = _DEFAULT_SUFFIX.sub("", name).strip()
    if not name or name.upper() == "NAME":
        return None
    return name


def parse_distribution_names(output: str) -> List[str]:
    names = []
    for line in iter_lines(output):
        name = extract_distribution_name(line)
        if name is not None:
            names.append(name)
    return names


@dataclass(frozen=True)
class WslReadiness:
    wsl_feature_enabled: bool
    virtual_machine_platform_enabled: bool
    distribution_name: Optional[str]

    @property
    def features_enabled(self) -> bool:
        return self.wsl_feature_enabled and self.virtual_machine_platform_enabled

    @property
    def is_ready(self) -> bool:
        return self.features_enabled and self.distribution_name is not None


class EnableWslFeaturesStep(OnboardingStep):
    """
    Verifies the WSL optional features and the target distribution.

    Enabling features needs a reboot, so this step only explains what to do
    and fails until the machine is ready.
    """

    def __init__(
        self,
        runner: ProcessRunner,
        interaction: UserInteraction,
        configuration: OnboardingConfig,
    ) -> None:
        self.runner = runner
        self.interaction = interaction
        self.configuration = configuration
        self._readiness: Optional[WslReadiness] = None

    @property
    def description(self) -> str:
        return "Verify Windows Subsystem for Linux prerequisites"

    async def should_execute(self) -> bool:
        self._readiness = None
        readiness = await self._evaluate()
        self._readiness = readiness
        if readiness.is_ready:
            self.configuration.active_wsl_distro_name = readiness.distribution_name
        return not readiness.is_ready

    async def execute(self) -> None:
        readiness = self._readiness or await self._evaluate()
        if readiness.is_ready:
            self.configuration.active_wsl_distro_name = readiness.distribution_name
            return

        distro = self.configuration.wsl_distro_name
        issues = []
        self.interaction.write_warning("Manual WSL setup required")
        if not readiness.wsl_feature_enabled:
            self.interaction.write_warning(f"The '{WSL_FEATURE_NAME}' optional feature is not enabled.")
            issues.append(f"{WSL_FEATURE_NAME} feature is disabled")
        if not readiness.virtual_machine_platform_enabled:
            self.interaction.write_warning(
                f"The '{VIRTUAL_MACHINE_PLATFORM_FEATURE_NAME}' optional feature is not enabled."
            )
            issues.append(f"{VIRTUAL_MACHINE_PLATFORM_FEATURE_NAME} feature is disabled")
        if readiness.distribution_name is None:
            self.interaction.write_warning(f"{distro} is not installed in WSL.")
            issues.append(f"{distro} distribution is missing")

        self.interaction.write_normal("Follow these steps in an administrator PowerShell window:")
        self.interaction.write_normal(
            f"  1. Run: wsl --install -d {self.configuration.wsl_distro_image}"
        )
        self.interaction.write_normal("  2. Restart Windows if prompted to complete the installation.")
        self.interaction.write_normal(
            f"  3. Launch {distro} once so the user account is created, then rerun onboarder."
        )

        summary = "WSL prerequisites are missing"
        if issues:
            summary = f"{summary}: {', '.join(issues)}"
        raise RuntimeError(f"{summary}. Complete the manual steps above and rerun onboarder.")

    async def _evaluate(self) -> WslReadiness:
        wsl_enabled = await self._is_feature_enabled(WSL_FEATURE_NAME)
        vmp_enabled = await self._is_feature_enabled(VIRTUAL_MACHINE_PLATFORM_FEATURE_NAME)
        if not (wsl_enabled and vmp_enabled):
            return WslReadiness(wsl_enabled, vmp_enabled, None)
        return WslReadiness(wsl_enabled, vmp_enabled, await self._find_distribution())

    async def _is_feature_enabled(self, feature_name: str) -> bool:
        result = await self.runner.run(
            "dism.exe",
            "/online",
            "/Get-FeatureInfo",
            f"/FeatureName:{feature_name}",
            request_elevation=True,
        )
        if not result.is_success:
            logger.debug("dism query for %s failed: %s", feature_name, result.stderr.strip())
            return False
        for line in iter_lines(result.stdout):
            lowered = line.lower()
            if "state" in lowered and "enabled" in lowered and "disabled" not in lowered:
                return True
        return False

    async def _find_distribution(self) -> Optional[str]:
        result = await self.runner.run("wsl.exe", "-l", "-v")
        if not result.is_success:
            return None
        wanted = self.configuration.wsl_distro_name.casefold()
        for name in parse_distribution_names(result.stdout):
            if name.casefold() == wanted:
                return name
        return None
