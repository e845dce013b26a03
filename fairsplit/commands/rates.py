"""Rates command for viewing the current exchange rate table."""

import sys

from rich.console import Console
from rich.table import Table

from fairsplit.config import ConfigError
from fairsplit.dates import format_timestamp
from fairsplit.domain.models import CurrencyCatalog
from fairsplit.domain.rates import RateTable
from fairsplit.rate_provider import RateProvider, get_rate_provider

console = Console()


def load_rates() -> tuple[RateProvider, RateTable]:
    """Get the rate provider and a ready table, exiting on config errors.

    Rate source failures never exit: the provider falls back to static rates.
    """
    try:
        provider = get_rate_provider()
    except ConfigError as e:
        console.print(f"[red]Config error: {e}[/red]", style="bold")
        sys.exit(1)

    with console.status("Fetching currency rates..."):
        table = provider.ensure_ready()
    return provider, table


def render_degraded_warning(table: RateTable) -> None:
    """Tell the user the rates are static fallback values."""
    if not table.degraded:
        return
    console.print("[yellow]⚠ Live rates unavailable, using fallback rates.[/yellow]")
    if table.error:
        console.print(f"[dim]{table.error}[/dim]")


def render_rate_table(table: RateTable, catalog: CurrencyCatalog) -> None:
    """Render a rate table with its status and timestamp."""
    status = "[green]live[/green]" if not table.degraded else "[yellow]fallback[/yellow]"
    title = f"Exchange rates in {table.reference} ({len(table.rates)} currencies)"
    rates_table = Table(title=title)
    rates_table.add_column("Currency", style="cyan")
    rates_table.add_column("Name", style="white")
    rates_table.add_column(f"1 unit = {table.reference}", justify="right")

    for code, rate in table.rates.items():
        rates_table.add_row(code, catalog.name(code) if catalog.is_known(code) else code, f"{rate:,.2f}")

    console.print(rates_table)
    console.print(f"Status: {status}")
    console.print(f"[dim]Last updated: {format_timestamp(table.updated_at)}[/dim]")


def rates_command() -> None:
    """Fetch and show the current exchange rates."""
    provider, table = load_rates()
    render_degraded_warning(table)
    render_rate_table(table, provider.settings.catalog)
