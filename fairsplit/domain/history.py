"""Pure functions for calculation history records and statistics.

This module contains the functional core for history:
- No I/O operations (the sqlite store lives in fairsplit.store)
- Records are immutable snapshots of one saved calculation
"""

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from fairsplit.dates import utc_now
from fairsplit.domain.models import Currency
from fairsplit.domain.split import BillAmount, Party, SplitResult


@dataclass(frozen=True)
class CalculationRecord:
    """Immutable saved calculation."""

    owner_id: int
    person_a_name: str
    person_b_name: str
    person_a_income: float
    person_b_income: float
    person_a_currency: Currency
    person_b_currency: Currency
    total_bill: float
    bill_currency: Currency
    person_a_payment: float
    person_b_payment: float
    person_a_percentage: float
    person_b_percentage: float
    created_at: datetime
    id: int | None = None

    @classmethod
    def from_split(
        cls,
        party_a: Party,
        party_b: Party,
        bill: BillAmount,
        result: SplitResult,
        owner_id: int,
        created_at: datetime | None = None,
    ) -> "CalculationRecord":
        """Capture one calculation's inputs and outputs for storage."""
        return cls(
            owner_id=owner_id,
            person_a_name=party_a.name,
            person_b_name=party_b.name,
            person_a_income=party_a.income,
            person_b_income=party_b.income,
            person_a_currency=party_a.currency,
            person_b_currency=party_b.currency,
            total_bill=bill.amount,
            bill_currency=bill.currency,
            person_a_payment=result.party_a.payment,
            person_b_payment=result.party_b.payment,
            person_a_percentage=result.party_a.percentage,
            person_b_percentage=result.party_b.percentage,
            created_at=created_at or utc_now(),
        )

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "CalculationRecord":
        """Build a record from a store row dictionary."""
        return cls(
            id=row["id"],
            owner_id=row["user_id"],
            person_a_name=row["person_a_name"],
            person_b_name=row["person_b_name"],
            person_a_income=row["person_a_income"],
            person_b_income=row["person_b_income"],
            person_a_currency=Currency(row["person_a_currency"]),
            person_b_currency=Currency(row["person_b_currency"]),
            total_bill=row["total_bill"],
            bill_currency=Currency(row["bill_currency"]),
            person_a_payment=row["person_a_payment"],
            person_b_payment=row["person_b_payment"],
            person_a_percentage=row["person_a_percentage"],
            person_b_percentage=row["person_b_percentage"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )


@dataclass(frozen=True)
class CalculationStats:
    """Aggregate statistics over one owner's history."""

    total_calculations: int
    most_used_currency: Currency | None
    average_bill_amount: float
    last_calculation_at: datetime | None


def most_used_currency(records: Sequence[CalculationRecord]) -> Currency | None:
    """Find the most frequent bill currency.

    Ties go to the currency used most recently.

    Args:
        records: Saved calculations in any order.

    Returns:
        Currency code, or None if there are no records.
    """
    if not records:
        return None

    counts = Counter(record.bill_currency for record in records)
    last_used: dict[Currency, datetime] = {}
    for record in records:
        seen = last_used.get(record.bill_currency)
        if seen is None or record.created_at > seen:
            last_used[record.bill_currency] = record.created_at

    return max(counts, key=lambda currency: (counts[currency], last_used[currency]))


def average_bill_amount(records: Sequence[CalculationRecord]) -> float:
    """Mean of the bill amounts as entered (0.0 when empty)."""
    if not records:
        return 0.0
    return sum(record.total_bill for record in records) / len(records)


def compute_calculation_stats(records: Sequence[CalculationRecord]) -> CalculationStats:
    """Compute aggregate statistics for a history.

    Args:
        records: One owner's saved calculations.

    Returns:
        CalculationStats summary.
    """
    return CalculationStats(
        total_calculations=len(records),
        most_used_currency=most_used_currency(records),
        average_bill_amount=average_bill_amount(records),
        last_calculation_at=max((record.created_at for record in records), default=None),
    )
