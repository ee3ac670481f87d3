"""Command-line interface for site-deployer."""

from __future__ import annotations

import argparse
import sys
from typing import Callable, Optional

from .config import AppConfig, load_config
from .errors import ConfigError, DeploymentError, InvalidCredentials, UserAborted
from .interaction import AutoConfirmationProvider, CLIConfirmationProvider
from .orchestrator import DeploymentPipeline
from .refresh import ContentRefresh
from .utils.logging import get_logger

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="site-deployer",
        description=(
            "Provision an EC2 web server with Terraform and configure it with Ansible."
        ),
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a JSON config file overriding defaults.",
    )
    parser.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help="Answer the 'terraform apply' confirmation with yes (unattended runs).",
    )
    return parser


def build_refresh_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="site-deployer-refresh",
        description="Refresh the website content on an already-deployed host.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a JSON config file overriding defaults.",
    )
    return parser


def _load(path: Optional[str]) -> AppConfig:
    try:
        return load_config(path)
    except (OSError, TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def report_failure(exc: DeploymentError) -> None:
    logger.error("❌ %s", exc)
    # Streamed commands already printed their output above the error line
    if exc.diagnostic and not exc.echoed:
        print(exc.diagnostic, file=sys.stderr)
    if isinstance(exc, InvalidCredentials) and exc.hints:
        print("\n       Options to configure credentials:", file=sys.stderr)
        for index, hint in enumerate(exc.hints, 1):
            print(f"         {index}. {hint}", file=sys.stderr)


def _guard(action: Callable[[], object]) -> int:
    """The single place where pipeline outcomes become exit codes."""
    try:
        action()
    except UserAborted as exc:
        logger.warning("⚠️  %s", exc)
        return EXIT_OK
    except DeploymentError as exc:
        report_failure(exc)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.warning("Interrupted.")
        return EXIT_INTERRUPTED
    return EXIT_OK


def run_cli(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    def deploy() -> None:
        config = _load(args.config)
        auto_approve = args.yes or config.provisioning.auto_approve
        confirmation = AutoConfirmationProvider("y") if auto_approve else CLIConfirmationProvider()
        DeploymentPipeline(config, confirmation=confirmation).run()

    return _guard(deploy)


def run_refresh_cli(argv: Optional[list[str]] = None) -> int:
    args = build_refresh_parser().parse_args(argv)
    return _guard(lambda: ContentRefresh(_load(args.config)).refresh())
