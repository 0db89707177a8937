"""Tests for platform selection and step assembly."""

import pytest
import requests

from onboarder.assembly import (
    OnboardingPlatform,
    UnsupportedPlatformError,
    build_orchestrator,
    select_platform,
)
from onboarder.config import OnboardingConfig
from onboarder.local.environment import EnvironmentRefresher
from onboarder.local.probe import OperatingSystem
from onboarder.orchestrator import ExecutionOptions

from conftest import FakeProcessRunner, RecordingInteraction, make_facts


class TestSelectPlatform:
    def test_windows(self):
        assert select_platform(make_facts(OperatingSystem.WINDOWS)) is OnboardingPlatform.WINDOWS_HOST

    def test_linux(self):
        assert select_platform(make_facts(OperatingSystem.LINUX)) is OnboardingPlatform.UBUNTU

    def test_macos(self):
        assert select_platform(make_facts(OperatingSystem.MACOS)) is OnboardingPlatform.MACOS

    def test_wsl_requires_guest_mode(self):
        facts = make_facts(OperatingSystem.LINUX, is_wsl=True)
        assert select_platform(facts, wsl_guest_mode=True) is OnboardingPlatform.WSL_GUEST
        with pytest.raises(UnsupportedPlatformError, match="Unsupported platform: Linux, WSL: True"):
            select_platform(facts)

    def test_unknown_os(self):
        with pytest.raises(UnsupportedPlatformError, match="Unsupported platform: Unknown, WSL: False"):
            select_platform(make_facts(OperatingSystem.UNKNOWN))


def _build(facts, wsl_guest_mode=False):
    return build_orchestrator(
        facts,
        ExecutionOptions(),
        RecordingInteraction(),
        OnboardingConfig(),
        wsl_guest_mode=wsl_guest_mode,
        runner=FakeProcessRunner(),
        refresher=EnvironmentRefresher({}),
        http=requests.Session(),
    )


class TestBuildOrchestrator:
    def test_windows_host_flow(self):
        orchestrator = _build(make_facts(OperatingSystem.WINDOWS, home=r"C:\Users\dev"))
        assert orchestrator.title == "Windows host onboarding"
        assert [step.description for step in orchestrator.steps] == [
            "Verify Windows Subsystem for Linux prerequisites",
            "Install Git for Windows",
            "Install GitHub CLI",
            "Install Visual Studio Code",
            "Install VS Code Remote Development extension pack",
            "Install Docker Desktop",
            "Configure Docker Desktop WSL integration",
            "Authenticate Git Credential Manager with GitHub",
            "Configure VS Code dotfiles repository",
            "Configure Git user identity",
        ]

    def test_wsl_guest_flow(self):
        orchestrator = _build(make_facts(is_wsl=True), wsl_guest_mode=True)
        assert orchestrator.title == "WSL guest onboarding"
        assert [step.description for step in orchestrator.steps] == [
            "Update apt package lists",
            "Install WSL prerequisites",
            "Configure Git credential helper",
            "Configure Git user identity",
            "Clone project repository",
        ]

    def test_ubuntu_flow(self):
        orchestrator = _build(make_facts())
        assert orchestrator.title == "Ubuntu onboarding"
        assert [step.description for step in orchestrator.steps] == [
            "Update apt package lists",
            "Install apt packages",
            "Install Visual Studio Code",
            "Configure Git user identity",
            "Clone project repository",
        ]

    def test_macos_flow(self):
        orchestrator = _build(make_facts(OperatingSystem.MACOS, home="/Users/dev"))
        assert orchestrator.title == "macOS onboarding"
        assert [step.description for step in orchestrator.steps] == [
            "Install Homebrew",
            "Install Homebrew packages",
            "Install Visual Studio Code",
            "Configure Git user identity",
            "Clone project repository",
        ]

    def test_steps_share_one_configuration(self):
        orchestrator = _build(make_facts(OperatingSystem.WINDOWS))
        configurations = {
            id(step.configuration) for step in orchestrator.steps if hasattr(step, "configuration")
        }
        assert len(configurations) == 1
