"""History commands for listing, deleting, and summarizing saved calculations."""

import sqlite3
import sys

from rich.console import Console
from rich.table import Table

from fairsplit.commands.auth import require_identity
from fairsplit.config import ConfigError, get_rate_settings
from fairsplit.dates import format_timestamp
from fairsplit.store.queries import delete_calculation, get_calculation_stats, get_user_calculations
from fairsplit.store.schema import get_db_path

console = Console()


def history_command(limit: int = 20, all: bool = False) -> None:
    """List saved calculations, newest first."""
    identity = require_identity()
    db_path = get_db_path()

    try:
        fmt = get_rate_settings().catalog.format_amount
        calculations = get_user_calculations(identity.user_id, db_path, None if all else limit)

        if not calculations:
            console.print("[yellow]No saved calculations yet[/yellow]")
            return

        table = Table(title=f"Calculation history ({len(calculations)})")
        table.add_column("#", style="dim", justify="right")
        table.add_column("Date", style="cyan")
        table.add_column("Bill", justify="right")
        table.add_column("Person A", style="white")
        table.add_column("Person B", style="white")
        table.add_column("% of income", justify="right")

        for calc in calculations:
            table.add_row(
                str(calc.id),
                format_timestamp(calc.created_at),
                fmt(calc.total_bill, calc.bill_currency),
                f"{calc.person_a_name}: {fmt(calc.person_a_payment, calc.bill_currency)}",
                f"{calc.person_b_name}: {fmt(calc.person_b_payment, calc.bill_currency)}",
                f"{calc.person_a_percentage:.2f}%",
            )

        console.print(table)

    except ConfigError as e:
        console.print(f"[red]Config error: {e}[/red]", style="bold")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)


def delete_command(calculation_id: int) -> None:
    """Delete one saved calculation."""
    identity = require_identity()

    try:
        if delete_calculation(calculation_id, identity.user_id, get_db_path()):
            console.print(f"[green]✓[/green] Deleted calculation #{calculation_id}")
        else:
            console.print(f"[red]Calculation #{calculation_id} not found[/red]", style="bold")
            sys.exit(1)

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)


def stats_command() -> None:
    """Show statistics about saved calculations."""
    identity = require_identity()

    try:
        stats = get_calculation_stats(identity.user_id, get_db_path())
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[bold cyan]Statistics for {identity.email}[/bold cyan]\n")
    console.print(f"  Total calculations: {stats.total_calculations}")
    console.print(f"  Most used currency: {stats.most_used_currency or '-'}")
    console.print(f"  Average bill amount: {stats.average_bill_amount:,.2f}")
    console.print(f"  Last calculation: {format_timestamp(stats.last_calculation_at)}")
