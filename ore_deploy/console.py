"""Rich console utilities for ore-deploy.

This module provides a shared Rich Console instance and helper functions
for CLI output, with GitHub Actions annotations when running in CI.
"""

import os
from typing import Any, List, Optional, Tuple

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

# Detect GitHub Actions
IS_GITHUB_ACTIONS = os.getenv("GITHUB_ACTIONS") == "true"

custom_theme = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "success": "bold green",
        "highlight": "magenta",
    }
)

# Shared console instance
# Force colors ON in GitHub Actions (it supports ANSI colors but Rich may incorrectly disable them)
console = Console(
    theme=custom_theme,
    force_terminal=IS_GITHUB_ACTIONS or None,
    color_system="auto",
)


def print_banner(version: str = "unknown") -> None:
    """Print the ore-deploy banner."""
    banner = Text()
    banner.append("ore-deploy", style="bold magenta")
    version_display = version if version.startswith("v") or version == "unknown" else f"v{version}"
    banner.append(f" {version_display}", style="yellow")
    banner.append(" - publish signed plugin builds to Ore", style="cyan")
    console.print(banner)


def gha_error(message: str, title: Optional[str] = None) -> None:
    """
    Emit an error that appears in GitHub Actions job summary.

    Args:
        message: Error message
        title: Optional title for the error
    """
    if IS_GITHUB_ACTIONS:
        # Annotations are single-line
        flat = message.replace("\n", "%0A")
        if title:
            print(f"::error title={title}::{flat}")
        else:
            print(f"::error::{flat}")
    else:
        if title:
            console.print(f"[error]Error ({title}):[/error] {escape(message)}")
        else:
            console.print(f"[error]Error:[/error] {escape(message)}")


def print_summary_table(title: str, data: List[Tuple[str, Any]]) -> None:
    """
    Print a two column summary table, skipping empty values.

    Args:
        title: Table title
        data: List of (label, value) tuples
    """
    data = [(label, value) for label, value in data if value not in (None, "")]
    if not data:
        return

    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    for label, value in data:
        table.add_row(label, str(value))

    console.print(table)


def print_upload_summary(
    url: str,
    success: bool,
    channel: Optional[str] = None,
    error_message: Optional[str] = None,
) -> None:
    """
    Print upload result summary.

    Args:
        url: Upload URL
        success: Whether upload succeeded
        channel: Channel the version was published to
        error_message: Optional error message if failed
    """
    if success:
        console.print(f"[success]✓ Uploaded to {url}[/success]")
        if channel:
            console.print(f"  Channel: {channel}")
    else:
        console.print(f"[error]✗ Upload to {url} failed[/error]")
        if error_message:
            console.print(f"  Error: {escape(error_message)}")


def print_final_success() -> None:
    """Print final success message."""
    console.print()
    if IS_GITHUB_ACTIONS:
        console.print("[bold green]✓ SUCCESS![/bold green] Plugin version published.")
    else:
        console.rule("[bold green]SUCCESS[/bold green]", style="green")
        console.print("[bold green]Plugin version published![/bold green]", justify="center")
    console.print()


def print_final_failure(message: str) -> None:
    """Print final failure message."""
    console.print()
    gha_error(message, title="Plugin Deployment Failed")
    if not IS_GITHUB_ACTIONS:
        console.rule("[bold red]FAILED[/bold red]", style="red")
        console.print(Text(message, style="bold red"), justify="center")
    console.print()
