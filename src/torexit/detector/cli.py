"""
Tor exit detection CLI commands.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from dataclasses import replace

import click
from rich.console import Console
from rich.table import Table

from torexit.config import get_config
from torexit.detector.core import TorDetector
from torexit.detector.errors import InvalidArgumentError, TorDetectorError


def _detector(list_path: str | None, cache: bool = False) -> TorDetector:
    config = get_config()
    if list_path:
        config = replace(config, list_path=list_path)
    if cache:
        config = replace(config, cache_enabled=True)
    return TorDetector(config=config)


list_path_option = click.option(
    "--list-path",
    "-l",
    envvar="TOREXIT_LIST_PATH",
    help="Exit list file (defaults to TOREXIT_LIST_PATH)",
)


@click.group()
def detector():
    """Tor exit node list utilities."""
    pass


@detector.command()
@list_path_option
def refresh(list_path: str | None):
    """Download the current Tor exit list into the list file.

    Examples:
        torexit detector refresh --list-path tor_exit_list.txt
    """
    console = Console()
    tor = _detector(list_path)

    try:
        with console.status("[cyan]Downloading Tor exit list...[/cyan]"):
            tor.refresh_list()
        count = tor.status().entries
    except TorDetectorError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    console.print(f"[green]Exit list updated[/green]: {count} addresses in {tor.get_list_path()}")


@detector.command()
@click.argument("ips", nargs=-1, required=True)
@list_path_option
def check(ips: tuple[str, ...], list_path: str | None):
    """Check one or more IPs against the local exit list.

    Examples:
        torexit detector check 185.220.101.1
        torexit detector check 185.220.101.1 8.8.8.8 2001:db8::1
    """
    console = Console()
    # One read for the whole batch
    tor = _detector(list_path, cache=True)

    table = Table(box=None)
    table.add_column("IP", style="white", width=40)
    table.add_column("Status", width=20)

    tor_count = 0
    for ip in ips:
        try:
            is_exit = tor.is_tor(ip)
        except InvalidArgumentError:
            table.add_row(ip, "[yellow]Invalid IP[/yellow]")
            continue
        except TorDetectorError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise SystemExit(1)

        if is_exit:
            tor_count += 1
            table.add_row(ip, "[red]TOR EXIT[/red]")
        else:
            table.add_row(ip, "[green]Clean[/green]")

    console.print(table)
    console.print(f"\n[cyan]Summary:[/cyan] {tor_count} of {len(ips)} IPs are Tor exit nodes")


@detector.command()
@list_path_option
def status(list_path: str | None):
    """Show the state of the local exit list."""
    console = Console()
    tor = _detector(list_path)

    try:
        result = tor.status()
    except TorDetectorError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    table = Table(show_header=False, box=None)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("List Path", result.path or "[yellow]not set[/yellow]")
    table.add_row("Exists", "[green]Yes[/green]" if result.exists else "[red]No[/red]")
    if result.exists:
        table.add_row("Addresses", str(result.entries))
        table.add_row("Last Updated", result.modified.strftime("%Y-%m-%d %H:%M:%S"))
    table.add_row("Feed", tor.fetcher.url)

    console.print(table)
