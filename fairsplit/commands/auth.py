"""Account commands: sign up, sign in, sign out, and who am I."""

import sqlite3
import sys

from rich.console import Console

from fairsplit.identity import AuthenticationError, Identity, current_identity, sign_in, sign_out, sign_up
from fairsplit.store.schema import database_exists, get_db_path

console = Console()


def ensure_database() -> None:
    """Exit with a hint if the database has not been initialized."""
    if not database_exists():
        console.print("[red]Database not found. Run 'fairsplit init' first.[/red]", style="bold")
        sys.exit(1)


def require_identity() -> Identity:
    """Get the signed-in identity or exit with a hint."""
    ensure_database()
    try:
        identity = current_identity(get_db_path())
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    if identity is None:
        console.print("[yellow]You are not signed in. Run 'fairsplit login EMAIL' first.[/yellow]")
        sys.exit(1)
    return identity


def signup_command(email: str, password: str) -> None:
    """Create an account and sign in with it."""
    ensure_database()
    db_path = get_db_path()

    try:
        identity = sign_up(email, password, db_path)
        sign_in(identity.email, password, db_path)
        console.print(f"[green]✓[/green] Account created. Signed in as [bold]{identity.email}[/bold]")
    except AuthenticationError as e:
        console.print(f"[red]{e}[/red]", style="bold")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)


def login_command(email: str, password: str) -> None:
    """Sign in to an existing account."""
    ensure_database()

    try:
        identity = sign_in(email, password, get_db_path())
        console.print(f"[green]✓[/green] Signed in as [bold]{identity.email}[/bold]")
    except AuthenticationError as e:
        console.print(f"[red]{e}[/red]", style="bold")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)


def logout_command() -> None:
    """Sign out of the current account."""
    if sign_out():
        console.print("[green]✓[/green] Signed out")
    else:
        console.print("[dim]You were not signed in[/dim]")


def whoami_command() -> None:
    """Show the signed-in account."""
    identity = require_identity()
    console.print(f"Signed in as [bold]{identity.email}[/bold]")
