"""Database query functions."""

import sqlite3
from pathlib import Path
from typing import Any

from fairsplit.dates import utc_now
from fairsplit.domain.history import CalculationRecord, CalculationStats, compute_calculation_stats
from fairsplit.store.schema import get_db_path

CALCULATION_COLUMNS = (
    "id, user_id, person_a_name, person_b_name, person_a_income, person_b_income, "
    "person_a_currency, person_b_currency, total_bill, bill_currency, "
    "person_a_payment, person_b_payment, person_a_percentage, person_b_percentage, created_at"
)


def _connect(db_path: Path | None = None) -> sqlite3.Connection:
    """Create a database connection with row factory.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Database connection with row_factory configured.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def insert_user(email: str, password_hash: str, salt: str, db_path: Path | None = None) -> int:
    """Insert a new user.

    Args:
        email: Normalized email address.
        password_hash: Hex encoded password hash.
        salt: Hex encoded salt.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        ID of the new user.

    Raises:
        sqlite3.IntegrityError: If the email is already registered.
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(
                "INSERT INTO users (email, password_hash, salt, created_at) VALUES (?, ?, ?, ?)",
                (email, password_hash, salt, utc_now().isoformat()),
            )
            conn.commit()
            return int(cursor.lastrowid)
        except sqlite3.Error:
            conn.rollback()
            raise


def get_user_by_email(email: str, db_path: Path | None = None) -> dict[str, Any] | None:
    """Get a user row by email.

    Args:
        email: Normalized email address.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        User dictionary or None if not found.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT id, email, password_hash, salt FROM users WHERE email = ?", (email,))
        row = cursor.fetchone()
        return dict(row) if row else None


def get_user_by_id(user_id: int, db_path: Path | None = None) -> dict[str, Any] | None:
    """Get a user row by ID.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT id, email FROM users WHERE id = ?", (user_id,))
        row = cursor.fetchone()
        return dict(row) if row else None


def insert_calculation(record: CalculationRecord, db_path: Path | None = None) -> int:
    """Save a calculation for its owner.

    Args:
        record: Calculation to save. Its id is ignored.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        ID of the saved calculation.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(
                """
                INSERT INTO calculations (
                    user_id, person_a_name, person_b_name, person_a_income, person_b_income,
                    person_a_currency, person_b_currency, total_bill, bill_currency,
                    person_a_payment, person_b_payment, person_a_percentage, person_b_percentage,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record.owner_id,
                    record.person_a_name,
                    record.person_b_name,
                    record.person_a_income,
                    record.person_b_income,
                    record.person_a_currency,
                    record.person_b_currency,
                    record.total_bill,
                    record.bill_currency,
                    record.person_a_payment,
                    record.person_b_payment,
                    record.person_a_percentage,
                    record.person_b_percentage,
                    record.created_at.isoformat(),
                    record.created_at.isoformat(),
                ),
            )
            conn.commit()
            return int(cursor.lastrowid)
        except sqlite3.Error:
            conn.rollback()
            raise


def get_user_calculations(
    user_id: int, db_path: Path | None = None, limit: int | None = None
) -> list[CalculationRecord]:
    """Get a user's saved calculations.

    Args:
        user_id: Owner ID.
        db_path: Path to the database file. If None, uses default location.
        limit: Maximum number of calculations to return. If None, returns all.

    Returns:
        List of calculations ordered newest first.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        query = f"SELECT {CALCULATION_COLUMNS} FROM calculations WHERE user_id = ? ORDER BY created_at DESC, id DESC"
        params: list[Any] = [user_id]

        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        cursor.execute(query, params)
        rows = cursor.fetchall()
        return [CalculationRecord.from_row(dict(row)) for row in rows]


def get_calculation(calculation_id: int, user_id: int, db_path: Path | None = None) -> CalculationRecord | None:
    """Get one calculation if it belongs to the user.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(
            f"SELECT {CALCULATION_COLUMNS} FROM calculations WHERE id = ? AND user_id = ?",
            (calculation_id, user_id),
        )
        row = cursor.fetchone()
        return CalculationRecord.from_row(dict(row)) if row else None


def delete_calculation(calculation_id: int, user_id: int, db_path: Path | None = None) -> bool:
    """Delete a calculation owned by the user.

    Args:
        calculation_id: Calculation ID.
        user_id: Owner ID. Calculations of other users are never deleted.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        True if a calculation was deleted.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute("DELETE FROM calculations WHERE id = ? AND user_id = ?", (calculation_id, user_id))
            conn.commit()
            return cursor.rowcount > 0
        except sqlite3.Error:
            conn.rollback()
            raise


def get_calculation_stats(user_id: int, db_path: Path | None = None) -> CalculationStats:
    """Get aggregate statistics for a user's history.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    return compute_calculation_stats(get_user_calculations(user_id, db_path))
