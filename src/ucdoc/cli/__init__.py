"""ucdoc CLI - Command line interface for ucdoc."""

from __future__ import annotations

from ucdoc.cli.commands import cli, setup_logging


def main() -> None:
    """Main entry point for the ucdoc CLI."""
    cli()


__all__ = [
    "main",
    "cli",
    "setup_logging",
]
