"""Utility functions to print formatted CLI messages."""

from __future__ import annotations

import click

__all__ = ["echo_banner", "echo_success", "echo_section"]


def echo_banner(text: str) -> None:
    """Print a banner announcing a processing step.

    Args:
        text: Banner text.
    """
    click.secho(f"\n=== {text} ===", fg="cyan")


def echo_success(text: str) -> None:
    """Echo a green success message prefixed with a tick.

    Args:
        text: Message to display.
    """
    click.secho(f"✓ {text}", fg="green")


def echo_section(text: str) -> None:
    """Echo a section header used for module-set blocks."""
    click.secho(f"\n  — {text} —", fg="magenta")
