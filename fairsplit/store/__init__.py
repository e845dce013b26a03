"""SQLite persistence for accounts and saved calculations."""

from fairsplit.store.queries import (
    delete_calculation,
    get_calculation,
    get_calculation_stats,
    get_user_by_email,
    get_user_by_id,
    get_user_calculations,
    insert_calculation,
    insert_user,
)
from fairsplit.store.schema import database_exists, get_db_path, init_database

__all__ = [
    # Schema
    "database_exists",
    "get_db_path",
    "init_database",
    # Queries
    "delete_calculation",
    "get_calculation",
    "get_calculation_stats",
    "get_user_by_email",
    "get_user_by_id",
    "get_user_calculations",
    "insert_calculation",
    "insert_user",
]
