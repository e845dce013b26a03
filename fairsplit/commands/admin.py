"""Admin commands for init and listing supported currencies."""

import sqlite3
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from fairsplit.config import ConfigError, create_default_config, get_config_path, get_rate_settings
from fairsplit.store.schema import get_db_path, init_database

console = Console()


def run_full_init(db_path: Path, config_path: Path) -> None:
    """Initialize new database and config."""
    console.print(f"[cyan]Initializing database at {db_path}...[/cyan]")
    init_database(db_path)
    console.print("[green]✓[/green] Database initialized")

    console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
    create_default_config(config_path)
    console.print("[green]✓[/green] Config file created (permissions: 600)")

    console.print("\n[green]Initialization complete![/green]", style="bold")
    console.print(f"[dim]Database: {db_path}[/dim]")
    console.print(f"[dim]Config: {config_path}[/dim]")


def init_command(force: bool = False) -> None:
    """Initialize fairsplit database and configuration."""
    db_path = get_db_path()
    config_path = get_config_path()

    db_exists = db_path.exists()
    config_exists = config_path.exists()

    try:
        # Guard: refuse to overwrite without force flag
        if not force and (db_exists or config_exists):
            console.print("[red]Initialization failed:[/red]", style="bold")
            if db_exists:
                console.print(f"  Database already exists: {db_path}")
            if config_exists:
                console.print(f"  Config already exists: {config_path}")
            console.print("\n[yellow]Use 'fairsplit init --force' to overwrite the config[/yellow]")
            sys.exit(1)

        # Existing history is kept; --force only resets the config
        run_full_init(db_path, config_path)

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)


def currencies_command() -> None:
    """List the currencies the calculator accepts."""
    try:
        settings = get_rate_settings()
    except ConfigError as e:
        console.print(f"[red]Config error: {e}[/red]", style="bold")
        sys.exit(1)

    catalog = settings.catalog
    table = Table(title="Supported currencies")
    table.add_column("Code", style="cyan")
    table.add_column("Name", style="white")
    table.add_column("Symbol", justify="center")
    table.add_column("Fallback rate", justify="right", style="dim")

    for code in catalog.codes:
        fallback = "reference" if code == catalog.reference else f"{settings.fallback[code]:,.2f}"
        table.add_row(code, catalog.name(code), catalog.symbol(code), fallback)

    console.print(table)
