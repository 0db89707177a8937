"""Windows host onboarding steps."""

from .credentials import PreAuthenticateGitCredentialManagerStep
from .docker import ConfigureDockerDesktopWslIntegrationStep, InstallDockerDesktopStep
from .dotfiles import ConfigureVsCodeDotfilesStep
from .installers import (
    EnsureVsCodeRemoteExtensionPackStep,
    InstallGitForWindowsStep,
    InstallGitHubCliStep,
    InstallWindowsVsCodeStep,
)
from .wsl import EnableWslFeaturesStep, extract_distribution_name, parse_distribution_names

__all__ = [
    "ConfigureDockerDesktopWslIntegrationStep",
    "ConfigureVsCodeDotfilesStep",
    "EnableWslFeaturesStep",
    "EnsureVsCodeRemoteExtensionPackStep",
    "InstallDockerDesktopStep",
    "InstallGitForWindowsStep",
    "InstallGitHubCliStep",
    "InstallWindowsVsCodeStep",
    "PreAuthenticateGitCredentialManagerStep",
    "extract_distribution_name",
    "parse_distribution_names",
]
