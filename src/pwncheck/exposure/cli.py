"""
CLI commands for password and email exposure checks.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import asyncio
import json

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from pwncheck.config import Settings
from pwncheck.exposure.client import BreachRangeClient
from pwncheck.exposure.models import PasswordCheckResult, RiskLevel
from pwncheck.session import CheckerSession
from pwncheck.strength import StrengthReport

console = Console()


def risk_color(risk: RiskLevel) -> str:
    """Get color for risk level."""
    colors = {
        RiskLevel.SAFE: "green",
        RiskLevel.LOW: "yellow",
        RiskLevel.MEDIUM: "orange3",
        RiskLevel.HIGH: "red",
        RiskLevel.CRITICAL: "bold red",
    }
    return colors.get(risk, "white")


def spinner() -> Progress:
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    )


def print_strength(report: StrengthReport) -> None:
    lines = [f"Strength: [{report.color}]{report.label}[/{report.color}] ({report.percent}%)"]
    if report.warning:
        lines.append(f"[red]{escape(report.warning)}[/red]")
    for suggestion in report.suggestions:
        lines.append(f"  - {escape(suggestion)}")
    console.print(Panel("\n".join(lines), title="Password Strength"))


def print_password_result(result: PasswordCheckResult) -> None:
    exposure = result.exposure
    color = risk_color(exposure.risk_level)

    if not exposure.found:
        console.print(Panel(
            f"[green]Good news![/green] This password has NOT been found in any known data breaches.\n\n"
            f"Risk Level: [{color}]{exposure.risk_level.value.upper()}[/{color}]",
            title="Password Check Result"
        ))
    else:
        console.print(Panel(
            f"[red]Warning![/red] This password has been seen [bold]{exposure.occurrences:,}[/bold] times in data breaches!\n\n"
            f"Risk Level: [{color}]{exposure.risk_level.value.upper()}[/{color}]\n\n"
            f"{exposure.risk_description}",
            title="Password Check Result"
        ))


@click.command("password")
@click.option("--password", "-p", help="Password to check (or prompts securely)")
@click.option("--hash", "password_hash", help="SHA-1 hash to check instead")
@click.option("--remember", is_flag=True, help="Add the password to the encrypted history")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def check_password(
    ctx: click.Context,
    password: str | None,
    password_hash: str | None,
    remember: bool,
    json_output: bool,
) -> None:
    """Check if a password has been exposed in data breaches.

    Uses k-anonymity - only the first 5 characters of the SHA-1 hash
    are sent to the API. Your password never leaves your system.

    Example:
        pwncheck password --remember
        pwncheck password --hash 5BAA61E4C9B93F3F0682250B6CF8331B7EE68FD8
    """
    settings: Settings = ctx.obj["settings"]
    transport = ctx.obj.get("transport")

    if password_hash and remember:
        raise click.UsageError("--remember cannot be used with --hash (there is no password to remember)")

    if password_hash:
        async def _check_hash():
            async with BreachRangeClient.from_settings(settings, transport) as client:
                return await client.check_hash(password_hash)

        try:
            with spinner() as progress:
                progress.add_task("Checking hash...", total=None)
                result = asyncio.run(_check_hash())
        except ValueError as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            raise SystemExit(1)
        strength = None
    else:
        if not password:
            password = click.prompt("Password to check", hide_input=True)

        if remember and settings.using_insecure_key:
            console.print("[yellow]Warning: history is encrypted with the insecure development key.[/yellow]")

        async def _check():
            async with CheckerSession.from_settings(settings, transport, keep_history=remember) as session:
                return await session.check_password(password, remember=remember)

        try:
            with spinner() as progress:
                progress.add_task("Checking password...", total=None)
                report = asyncio.run(_check())
        except ValueError as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            raise SystemExit(1)
        result, strength = report.result, report.strength

    if result is None:
        console.print("[yellow]Nothing to check[/yellow]")
        return

    if json_output:
        output = result.to_dict()
        if strength:
            output["strength"] = strength.to_dict()
        click.echo(json.dumps(output, indent=2, default=str))
        if not result.ok:
            raise SystemExit(1)
        return

    if strength:
        print_strength(strength)

    if not result.ok:
        console.print(f"[red]Error: could not verify this password ({escape(str(result.error))})[/red]")
        raise SystemExit(1)

    print_password_result(result)

    if remember:
        if report.remembered:
            console.print("[dim]Saved to encrypted history.[/dim]")
        elif report.remembered is None:
            console.print("[dim]Already in history.[/dim]")
        else:
            console.print("[yellow]Could not save to history.[/yellow]")


@click.command("email")
@click.argument("email")
@click.option("--api-key", "-k", envvar="HIBP_API_KEY", help="HIBP API key")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def check_email(
    ctx: click.Context,
    email: str,
    api_key: str | None,
    json_output: bool,
) -> None:
    """Check if an email has been in any data breaches.

    The full address is sent to the provider (this lookup has no
    k-anonymity scheme).

    Example:
        pwncheck email user@example.com
    """
    settings: Settings = ctx.obj["settings"]
    if api_key:
        settings.hibp_api_key = api_key
    transport = ctx.obj.get("transport")

    async def _check():
        async with CheckerSession.from_settings(settings, transport, keep_history=False) as session:
            return await session.check_email(email)

    with spinner() as progress:
        progress.add_task(f"Checking {escape(email)}...", total=None)
        result = asyncio.run(_check())

    if result is None:
        console.print("[yellow]Nothing to check[/yellow]")
        return

    if json_output:
        click.echo(json.dumps(result.to_dict(), indent=2, default=str))
        if not result.ok:
            raise SystemExit(1)
        return

    if not result.ok:
        console.print(f"[red]Error: could not verify this email ({escape(str(result.error))})[/red]")
        if not settings.hibp_api_key:
            console.print("Set HIBP_API_KEY or use --api-key. Get a key at: https://haveibeenpwned.com/API/Key")
        raise SystemExit(1)

    if not result.is_breached:
        console.print(Panel(
            f"[green]Good news![/green] No breaches found for [cyan]{escape(email)}[/cyan]",
            title="Breach Check Result"
        ))
        return

    console.print(Panel(
        f"[red]Oh no![/red] [cyan]{escape(email)}[/cyan] found in [bold red]{result.breach_count}[/bold red] breach(es)",
        title="Breach Check Result"
    ))

    table = Table(title="\nBreach Details")
    table.add_column("Breach", style="cyan")
    table.add_column("Date", style="yellow")
    table.add_column("Accounts", justify="right")
    table.add_column("Data Exposed")

    for breach in sorted(result.breaches, key=lambda b: b.breach_date, reverse=True):
        data_types = ", ".join(breach.data_classes[:3])
        if len(breach.data_classes) > 3:
            data_types += f" (+{len(breach.data_classes) - 3})"

        table.add_row(
            escape(breach.name),
            escape(breach.breach_date),
            f"{breach.pwn_count:,}" if breach.pwn_count is not None else "-",
            escape(data_types) or "-",
        )

    console.print(table)


def add_exposure_commands(main_cli):
    """Add exposure commands to main CLI."""
    main_cli.add_command(check_password)
    main_cli.add_command(check_email)
