"""Shared helpers for CLI commands."""

import sys

import click
from rich.console import Console

from ..config import Settings
from ..core.calculator import GreenFareCalculator
from ..core.exceptions import GreenFareError
from ..data.loader import load_calculator

error_console = Console(stderr=True)


def get_settings(ctx: click.Context) -> Settings:
    """Settings stored on the root command context."""
    return ctx.find_root().obj["settings"]


def get_calculator(ctx: click.Context) -> GreenFareCalculator:
    """Load the calculator once per CLI invocation, exiting on data errors."""
    root = ctx.find_root()
    if "calculator" not in root.obj:
        try:
            root.obj["calculator"] = load_calculator(get_settings(ctx))
        except GreenFareError as e:
            error_console.print(f"[red]Data error:[/red] {e}")
            sys.exit(1)
    return root.obj["calculator"]
