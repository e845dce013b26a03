"""Calc command for splitting a bill in proportion to income."""

import sqlite3
import sys

from rich.console import Console
from rich.table import Table

from fairsplit.commands.rates import load_rates, render_degraded_warning
from fairsplit.config import ConfigError, get_rate_settings
from fairsplit.domain.errors import ValidationError
from fairsplit.domain.history import CalculationRecord
from fairsplit.domain.models import CurrencyCatalog
from fairsplit.domain.split import BillAmount, Party, SplitResult, compute_split, parse_split_inputs
from fairsplit.identity import current_identity
from fairsplit.store.queries import insert_calculation
from fairsplit.store.schema import database_exists, get_db_path

console = Console()


def render_validation_errors(error: ValidationError) -> None:
    """Print every invalid field at once."""
    console.print("[red]Please fix the following:[/red]", style="bold")
    for violation in error.violations:
        console.print(f"  • {violation.message} [dim]({violation.field})[/dim]")


def render_split_result(party_a: Party, party_b: Party, result: SplitResult, catalog: CurrencyCatalog) -> None:
    """Render who pays what."""
    bill_currency = result.bill.currency
    table = Table(title=f"Bill: {catalog.format_amount(result.bill.amount, bill_currency)}")
    table.add_column("Person", style="cyan")
    table.add_column("Income", justify="right")
    table.add_column("Pays", justify="right", style="bold")
    table.add_column("% of income", justify="right")

    for party, share in ((party_a, result.party_a), (party_b, result.party_b)):
        table.add_row(
            share.name,
            catalog.format_amount(party.income, party.currency),
            catalog.format_amount(share.payment, bill_currency),
            f"{share.percentage:.2f}%",
        )

    console.print(table)
    console.print(
        f"Both pay [bold]{result.party_a.percentage:.2f}%[/bold] of their income "
        f"(total {catalog.format_amount(result.total, bill_currency)})"
    )


def save_result(party_a: Party, party_b: Party, bill: BillAmount, result: SplitResult) -> None:
    """Save a calculation for the signed-in user, if any."""
    if not database_exists():
        console.print("[yellow]Database not found. Run 'fairsplit init' to save calculations.[/yellow]")
        return

    db_path = get_db_path()
    identity = current_identity(db_path)
    if identity is None:
        console.print("[yellow]Sign in with 'fairsplit login EMAIL' to save your calculations.[/yellow]")
        return

    record = CalculationRecord.from_split(party_a, party_b, bill, result, identity.user_id)
    calculation_id = insert_calculation(record, db_path)
    console.print(f"[green]✓[/green] Saved as calculation #{calculation_id}")


def calc_command(
    income_a: str,
    currency_a: str,
    income_b: str,
    currency_b: str,
    bill: str,
    bill_currency: str,
    name_a: str,
    name_b: str,
    save: bool = False,
) -> None:
    """Split a bill so both people pay the same share of their income."""
    try:
        catalog = get_rate_settings().catalog
        party_a, party_b, bill_amount = parse_split_inputs(
            income_a, currency_a, income_b, currency_b, bill, bill_currency, name_a, name_b, catalog
        )

        _, table = load_rates()
        render_degraded_warning(table)

        result = compute_split(party_a, party_b, bill_amount, table)
        render_split_result(party_a, party_b, result, catalog)

        if save:
            save_result(party_a, party_b, bill_amount, result)

    except ValidationError as e:
        render_validation_errors(e)
        sys.exit(1)
    except ConfigError as e:
        console.print(f"[red]Config error: {e}[/red]", style="bold")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
