"""Entry points for the site-deployer CLI."""

from __future__ import annotations

import sys

from .cli import run_cli, run_refresh_cli


def app_main() -> None:
    exit_code = run_cli()
    sys.exit(exit_code)


def refresh_main() -> None:
    sys.exit(run_refresh_cli())


if __name__ == "__main__":  # pragma: no cover
    app_main()
