"""CLI entry point for fairsplit."""

import typer

from fairsplit.commands.admin import currencies_command, init_command
from fairsplit.commands.auth import login_command, logout_command, signup_command, whoami_command
from fairsplit.commands.calculate import calc_command
from fairsplit.commands.history import delete_command, history_command, stats_command
from fairsplit.commands.rates import rates_command
from fairsplit.domain.split import DEFAULT_NAME_A, DEFAULT_NAME_B
from fairsplit.logs import configure_logging

app = typer.Typer(
    name="fairsplit",
    help="Split shared bills so everyone pays the same share of their income",
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Split shared bills so everyone pays the same share of their income."""
    configure_logging(verbose)


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
) -> None:
    """Initialize fairsplit database and configuration."""
    init_command(force)


@app.command()
def calc(
    income_a: str = typer.Option(..., "--income-a", prompt="Person A income", help="Person A's income"),
    currency_a: str = typer.Option("ARS", "--currency-a", help="Currency of person A's income"),
    income_b: str = typer.Option(..., "--income-b", prompt="Person B income", help="Person B's income"),
    currency_b: str = typer.Option("ARS", "--currency-b", help="Currency of person B's income"),
    bill: str = typer.Option(..., "--bill", prompt="Total bill", help="Bill amount to split"),
    bill_currency: str = typer.Option("ARS", "--bill-currency", help="Currency of the bill"),
    name_a: str = typer.Option(DEFAULT_NAME_A, "--name-a", help="Display name for person A"),
    name_b: str = typer.Option(DEFAULT_NAME_B, "--name-b", help="Display name for person B"),
    save: bool = typer.Option(False, "--save", "-s", help="Save the result to your history"),
) -> None:
    """Split a bill in proportion to both incomes."""
    calc_command(income_a, currency_a, income_b, currency_b, bill, bill_currency, name_a, name_b, save)


@app.command()
def rates() -> None:
    """Show current exchange rates."""
    rates_command()


@app.command()
def currencies() -> None:
    """List supported currencies."""
    currencies_command()


@app.command()
def history(
    limit: int = typer.Option(20, min=1, help="Maximum calculations to show"),
    all: bool = typer.Option(False, "--all", "-a", help="Show all your calculations"),
) -> None:
    """List your saved calculations."""
    history_command(limit, all)


@app.command()
def delete(
    calculation_id: int = typer.Argument(..., help="Calculation number from 'fairsplit history'"),
) -> None:
    """Delete a saved calculation."""
    delete_command(calculation_id)


@app.command()
def stats() -> None:
    """Show statistics about your saved calculations."""
    stats_command()


@app.command()
def signup(
    email: str,
    password: str = typer.Option(..., prompt=True, confirmation_prompt=True, hide_input=True),
) -> None:
    """Create an account to save calculations."""
    signup_command(email, password)


@app.command()
def login(
    email: str,
    password: str = typer.Option(..., prompt=True, hide_input=True),
) -> None:
    """Sign in to your account."""
    login_command(email, password)


@app.command()
def logout() -> None:
    """Sign out of your account."""
    logout_command()


@app.command()
def whoami() -> None:
    """Show the signed-in account."""
    whoami_command()


if __name__ == "__main__":
    app()
