"""Tests for user interaction module."""

import io
import logging

import pytest
from rich.console import Console

from onboarder.interaction import (
    TRANSCRIPT_LOGGER_NAME,
    AutoResponseInteraction,
    ConsoleUserInteraction,
    InteractionUnavailableError,
)
from onboarder.interaction import handler as handler_module
from onboarder.orchestrator import StepResult

from conftest import make_facts


def _console():
    buffer = io.StringIO()
    return Console(file=buffer, width=120, force_terminal=False, color_system=None), buffer


class TestConsoleUserInteraction:
    """Tests for the rich console front end."""

    def test_status_glyphs(self):
        console, buffer = _console()
        ui = ConsoleUserInteraction(console=console)

        ui.write_success("Git installed")
        ui.write_warning("Restart required")
        ui.write_error("winget missing")

        output = buffer.getvalue()
        assert "✓ Git installed" in output
        assert "⚠ Restart required" in output
        assert "✗ winget missing" in output

    def test_markup_in_messages_is_printed_literally(self):
        console, buffer = _console()
        ui = ConsoleUserInteraction(console=console)

        ui.write_normal("[bold]not markup[/bold]")

        assert "[bold]not markup[/bold]" in buffer.getvalue()

    def test_debug_only_shown_when_verbose(self):
        console, buffer = _console()
        ConsoleUserInteraction(console=console).write_debug("hidden detail")
        assert "hidden detail" not in buffer.getvalue()

        console, buffer = _console()
        ConsoleUserInteraction(console=console, verbose=True).write_debug("shown detail")
        assert "shown detail" in buffer.getvalue()

    def test_announcement_wording(self):
        console, buffer = _console()
        ui = ConsoleUserInteraction(console=console)

        ui.announce_start("Ubuntu onboarding")
        ui.announce_check("Install apt packages")
        ui.announce_already_configured("Install apt packages")
        ui.announce_dry_run_skip("Clone project repository")
        ui.announce_running("Configure Git user identity")
        ui.announce_step_succeeded("Configure Git user identity")
        ui.announce_step_failed("Install Visual Studio Code", "download failed")
        ui.announce_overall_success("Ubuntu onboarding complete.")

        output = buffer.getvalue()
        assert "Starting Ubuntu onboarding..." in output
        assert "Checking Install apt packages..." in output
        assert "✓ Install apt packages already configured." in output
        assert "Dry run: would execute Clone project repository." in output
        assert "Running Configure Git user identity..." in output
        assert "✓ Configure Git user identity completed." in output
        assert "✗ Install Visual Studio Code failed: download failed" in output
        assert output.rstrip().endswith("✓ Ubuntu onboarding complete.")

    def test_summary_table(self):
        console, buffer = _console()
        ui = ConsoleUserInteraction(console=console)

        ui.render_summary([
            StepResult.executed("Install Git"),
            StepResult.skipped("Install GitHub CLI", "Already configured"),
            StepResult.failed("Install Docker Desktop", RuntimeError("winget failed")),
        ])

        output = buffer.getvalue()
        assert "Onboarding summary" in output
        for text in ("Step", "Status", "Details", "Install Git", "Executed", "Skipped",
                     "Already configured", "Failed", "winget failed"):
            assert text in output

    def test_welcome_banner_shows_platform_facts(self):
        console, buffer = _console()
        ui = ConsoleUserInteraction(console=console)

        ui.show_welcome_banner(make_facts(is_wsl=True))

        output = buffer.getvalue()
        assert "Linux" in output
        assert "x64" in output
        assert "WSL:              yes" in output
        assert "/home/dev" in output

    def test_markdown_rendered(self):
        console, buffer = _console()
        ConsoleUserInteraction(console=console).write_markdown("### Choose an option")
        assert "Choose an option" in buffer.getvalue()

    def test_end_of_input_becomes_interaction_unavailable(self, monkeypatch):
        def raise_eof(*args, **kwargs):
            raise EOFError

        monkeypatch.setattr(handler_module.Prompt, "ask", raise_eof)
        console, _ = _console()
        ui = ConsoleUserInteraction(console=console)

        with pytest.raises(InteractionUnavailableError):
            ui.ask("Enter your Git user name")

    def test_ask_passes_default_only_when_given(self, monkeypatch):
        seen = []

        def fake_ask(prompt, **kwargs):
            seen.append(kwargs)
            return kwargs.get("default", "typed")

        monkeypatch.setattr(handler_module.Prompt, "ask", fake_ask)
        console, _ = _console()
        ui = ConsoleUserInteraction(console=console)

        assert ui.ask("Name") == "typed"
        assert ui.ask("Email", "dev@example.com") == "dev@example.com"
        assert "default" not in seen[0]
        assert seen[1]["default"] == "dev@example.com"

    def test_messages_recorded_in_transcript(self, caplog, monkeypatch):
        console, _ = _console()
        ui = ConsoleUserInteraction(console=console)
        monkeypatch.setattr(logging.getLogger(TRANSCRIPT_LOGGER_NAME), "propagate", True)

        with caplog.at_level(logging.INFO, logger=TRANSCRIPT_LOGGER_NAME):
            ui.write_warning("Restart required")

        assert "WARNING: Restart required" in caplog.text


class TestAutoResponseInteraction:
    """Tests for the non-interactive front end."""

    def test_keyword_response(self):
        console, buffer = _console()
        ui = AutoResponseInteraction(
            console=console, default_responses={"user name": "Dev Person"}
        )

        assert ui.ask("Enter your Git user name") == "Dev Person"
        assert "Enter your Git user name Dev Person (auto)" in buffer.getvalue()

    def test_falls_back_to_default(self):
        console, _ = _console()
        ui = AutoResponseInteraction(console=console)
        assert ui.ask("Configure dotfiles (CUSTOM/DEFAULT/SKIP):", "DEFAULT") == "DEFAULT"

    def test_no_answer_raises(self):
        console, _ = _console()
        ui = AutoResponseInteraction(console=console)
        with pytest.raises(InteractionUnavailableError):
            ui.ask("Enter your Git email address")

    def test_defaults_can_be_disabled(self):
        console, _ = _console()
        ui = AutoResponseInteraction(console=console, use_defaults=False)
        with pytest.raises(InteractionUnavailableError):
            ui.ask("Pick one", "DEFAULT")

    def test_rejected_automatic_answer_is_not_repeated(self):
        console, _ = _console()
        ui = AutoResponseInteraction(console=console, default_responses={"user name": " "})

        assert ui.ask("Enter your Git user name") == " "
        with pytest.raises(InteractionUnavailableError, match="was not accepted"):
            ui.ask("Enter your Git user name")

    def test_different_prompts_may_share_an_answer(self):
        console, _ = _console()
        ui = AutoResponseInteraction(console=console)
        assert ui.ask("First", "same") == "same"
        assert ui.ask("Second", "same") == "same"
