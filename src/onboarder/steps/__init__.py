"""Concrete onboarding steps, grouped by the platform flow that uses them."""

from .base import StepCommandError, command_succeeded, iter_lines, require_success
from .macos import InstallBrewPackagesStep, InstallHomebrewStep, InstallMacVsCodeStep
from .shared import CloneProjectRepoStep, ConfigureGitUserStep
from .ubuntu import AptUpdateStep, InstallAptPackagesStep, InstallLinuxVsCodeStep
from .wsl_guest import ConfigureWslGitCredentialHelperStep, InstallWslPrerequisitesStep

__all__ = [
    "AptUpdateStep",
    "CloneProjectRepoStep",
    "ConfigureGitUserStep",
    "ConfigureWslGitCredentialHelperStep",
    "InstallAptPackagesStep",
    "InstallBrewPackagesStep",
    "InstallHomebrewStep",
    "InstallLinuxVsCodeStep",
    "InstallMacVsCodeStep",
    "InstallWslPrerequisitesStep",
    "StepCommandError",
    "command_succeeded",
    "iter_lines",
    "require_success",
]
