"""
pwncheck CLI - Main entry point for the command-line interface.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import logging

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from pwncheck import __version__
from pwncheck.config import Settings

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="pwncheck")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """pwncheck - credential exposure checks

    Check passwords (k-anonymity, only a 5 character hash prefix is sent)
    and email addresses against known data breaches, and keep an
    encrypted history of recently checked passwords.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    ctx.ensure_object(dict)
    ctx.obj.setdefault("settings", Settings.from_env())
    ctx.obj["console"] = console


@main.command("config")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Show configuration and secret key status."""
    settings: Settings = ctx.obj["settings"]

    table = Table(title="pwncheck Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row(
        "Secret Key",
        "[bold red]INSECURE DEVELOPMENT DEFAULT[/bold red]"
        if settings.using_insecure_key
        else "[green]Set (PWNCHECK_SECRET_KEY)[/green]",
    )
    table.add_row(
        "HIBP API Key",
        f"[green]Set ({escape(settings.hibp_api_key[:8])}...)[/green]" if settings.hibp_api_key else "[red]Not set[/red]",
    )
    table.add_row("History Path", escape(str(settings.get_history_path())))
    table.add_row("Password API URL", escape(settings.passwords_api))
    table.add_row("HIBP API URL", escape(settings.hibp_api))
    table.add_row("Timeout", f"{settings.timeout:g}s")
    table.add_row("Padding", "yes" if settings.padding else "no")

    console.print(table)

    errors = settings.validate()
    for error in errors:
        console.print(f"[red]Invalid setting: {escape(error)}[/red]")

    if settings.using_insecure_key:
        console.print("\n[yellow]Password history uses the built-in development key.[/yellow]")
        console.print("  export PWNCHECK_SECRET_KEY=<a long random value>")

    if errors:
        raise SystemExit(1)


# Import and register subcommand groups
from pwncheck.exposure.cli import add_exposure_commands
from pwncheck.history.cli import add_history_commands

add_exposure_commands(main)
add_history_commands(main)


if __name__ == "__main__":
    main()
