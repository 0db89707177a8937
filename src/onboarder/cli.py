"""Command-line interface for onboarder."""

from __future__ import annotations

import argparse
import asyncio
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .assembly import UnsupportedPlatformError, build_orchestrator
from .config import AppConfig, load_config
from .interaction import AutoResponseInteraction, ConsoleUserInteraction, UserInteraction
from .local.probe import PlatformDetector
from .local.session import ProcessRunner
from .orchestrator import ExecutionOptions, OrchestrationFailure
from .paths import get_logs_dir, new_transcript_path
from .utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

MODE_WSL_GUEST = "wsl-guest"
SUPPORTED_MODES = (MODE_WSL_GUEST,)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


class _ModeAction(argparse.Action):
    """``--mode`` may be given once and must name a supported mode."""

    def __call__(self, parser, namespace, values, option_string=None):
        if getattr(namespace, "_mode_seen", False):
            parser.error("--mode can only be specified once.")
        setattr(namespace, "_mode_seen", True)

        value = (values or "").strip().lower()
        if not value:
            parser.error("--mode requires a value.")
        if value not in SUPPORTED_MODES:
            parser.error(
                f"Unsupported mode '{values}'. Supported modes: {', '.join(SUPPORTED_MODES)}."
            )
        setattr(namespace, self.dest, value)


@dataclass
class CLIContext:
    """Context captured from CLI arguments."""

    config: AppConfig
    options: ExecutionOptions
    wsl_guest_mode: bool
    non_interactive: bool
    log_file: Optional[Path] = None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="onboarder",
        description="Set up this machine for development: tools, Git, editors and the project repository.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a JSON config file overriding defaults.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Check every step and report what would run, without changing anything.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug output.",
    )
    parser.add_argument(
        "--mode",
        action=_ModeAction,
        default=None,
        metavar="MODE",
        help="Onboarding mode. 'wsl-guest' runs the flow for the Linux side of WSL.",
    )
    parser.add_argument(
        "--non-interactive",
        action="store_true",
        help="Never prompt; use defaults and fail steps that need an answer.",
    )
    return parser


def _build_context(args: argparse.Namespace) -> CLIContext:
    config = load_config(args.config)
    options = ExecutionOptions(
        is_dry_run=args.dry_run or config.execution.dry_run,
        is_verbose=args.verbose or config.execution.verbose,
    )
    return CLIContext(
        config=config,
        options=options,
        wsl_guest_mode=args.mode == MODE_WSL_GUEST,
        non_interactive=args.non_interactive,
    )


def _prepare_logging(context: CLIContext) -> None:
    if context.config.logging.transcript_enabled:
        try:
            context.log_file = new_transcript_path(get_logs_dir(context.config.logging.log_dir))
        except OSError as exc:
            print(f"Transcript disabled: {exc}", file=sys.stderr)
    configure_logging(verbose=context.options.is_verbose, log_file=context.log_file)


def build_interaction(context: CLIContext) -> UserInteraction:
    if context.non_interactive:
        return AutoResponseInteraction(verbose=context.options.is_verbose)
    return ConsoleUserInteraction(verbose=context.options.is_verbose)


def dispatch_command(args: argparse.Namespace) -> int:
    try:
        context = _build_context(args)
    except (FileNotFoundError, ValueError) as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    _prepare_logging(context)

    facts = PlatformDetector().detect()
    interaction = build_interaction(context)
    interaction.show_welcome_banner(facts)
    if context.options.is_dry_run:
        interaction.write_warning("Dry run: checks only, no changes will be made.")

    try:
        orchestrator = build_orchestrator(
            facts,
            context.options,
            interaction,
            context.config.onboarding,
            wsl_guest_mode=context.wsl_guest_mode,
            runner=ProcessRunner(default_timeout=context.config.execution.command_timeout),
        )
    except UnsupportedPlatformError as exc:
        interaction.write_error(f"Failed to initialize orchestrator: {exc}")
        return EXIT_FAILURE

    try:
        asyncio.run(orchestrator.execute())
    except OrchestrationFailure as exc:
        interaction.write_error(str(exc))
        exit_code = EXIT_FAILURE
    except KeyboardInterrupt:
        interaction.write_warning("Onboarding cancelled.")
        exit_code = EXIT_INTERRUPTED
    else:
        exit_code = EXIT_OK

    if context.log_file is not None:
        interaction.write_debug(f"Transcript written to {context.log_file}")
    logger.debug("Exiting with code %d", exit_code)
    return exit_code


def run_cli(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return dispatch_command(args)
