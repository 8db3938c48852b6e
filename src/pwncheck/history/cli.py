"""
CLI commands for the encrypted password history.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pwncheck.config import Settings
from pwncheck.history.cache import HistoryCache

console = Console()


def mask(password: str) -> str:
    """Hide all but the first character of a password."""
    return password[:1] + "*" * (len(password) - 1)


@click.group()
@click.pass_context
def history(ctx: click.Context) -> None:
    """Recently checked passwords (stored encrypted).

    Passwords are added with `pwncheck password --remember`. The history
    is encrypted with PWNCHECK_SECRET_KEY and keeps the 5 most recent.
    """
    settings: Settings = ctx.obj["settings"]
    if settings.using_insecure_key:
        console.print("[yellow]Warning: history is encrypted with the insecure development key.[/yellow]")


@history.command("show")
@click.option("--reveal", is_flag=True, help="Show passwords in plain text")
@click.pass_context
def show_history(ctx: click.Context, reveal: bool) -> None:
    """List recently checked passwords, most recent first."""
    cache = HistoryCache.from_settings(ctx.obj["settings"])
    try:
        entries = cache.load()
    finally:
        cache.store.close()

    if not entries:
        console.print("[dim]No passwords in history[/dim]")
        return

    table = Table(title="Recently Checked Passwords")
    table.add_column("#", justify="right")
    table.add_column("Password", style="cyan")

    for i, entry in enumerate(entries, 1):
        table.add_row(str(i), escape(entry if reveal else mask(entry)))

    console.print(table)


@history.command("clear")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def clear_history(ctx: click.Context, yes: bool) -> None:
    """Delete the stored password history."""
    if not yes:
        click.confirm("Delete the password history?", abort=True)

    cache = HistoryCache.from_settings(ctx.obj["settings"])
    try:
        cache.clear()
    finally:
        cache.store.close()

    console.print("[green]Password history cleared[/green]")


def add_history_commands(main_cli):
    """Add history commands to main CLI."""
    main_cli.add_command(history)
