"""Pure functions for rate tables and currency conversion.

This module contains the functional core for exchange rates:
- No I/O operations (the network fetch lives in fairsplit.integrations)
- RateTable values are immutable and replaced wholesale
- Every conversion passes through the reference currency

A rate is the number of reference units equal to one foreign unit,
so reference_amount = foreign_amount * rate.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from types import MappingProxyType

from fairsplit.dates import utc_now
from fairsplit.domain.errors import DivideByZeroError, MissingRateError
from fairsplit.domain.models import Currency

# Fallback values used when the live source is unavailable
DEFAULT_FALLBACK_RATES: Mapping[Currency, float] = MappingProxyType(
    {
        Currency("USD"): 1300.0,
        Currency("EUR"): 1550.0,
        Currency("BRL"): 244.0,
        Currency("CLP"): 1.37,
        Currency("UYU"): 33.06,
    }
)


class RateStatus(str, Enum):
    """Where a rate table came from."""

    LIVE = "live"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class RateQuote:
    """One normalized record from the rate source."""

    currency: Currency
    sell: float
    updated_at: datetime
    buy: float | None = None


@dataclass(frozen=True)
class RateTable:
    """Immutable snapshot of conversion rates against a reference currency."""

    reference: Currency
    rates: Mapping[Currency, float]
    status: RateStatus
    updated_at: datetime
    error: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "rates", MappingProxyType(dict(self.rates)))

    @property
    def degraded(self) -> bool:
        return self.status is RateStatus.FALLBACK

    @property
    def currencies(self) -> tuple[Currency, ...]:
        return (self.reference, *self.rates)

    def rate_for(self, currency: Currency) -> float:
        """Get the rate for a currency (1.0 for the reference).

        Raises:
            MissingRateError: If the table has no rate for the currency.
        """
        if currency == self.reference:
            return 1.0
        try:
            return self.rates[currency]
        except KeyError:
            raise MissingRateError([currency]) from None


def _usable(value: float) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0 and value != float("inf")


def build_live_table(
    quotes: Iterable[RateQuote],
    required: Iterable[Currency],
    reference: Currency,
) -> RateTable:
    """Select the required currencies from source quotes into a live table.

    Args:
        quotes: Normalized quotes from the rate source.
        required: Foreign currencies that must be present.
        reference: Reference currency of the table.

    Returns:
        RateTable with LIVE status, stamped with the newest quote timestamp.

    Raises:
        MissingRateError: Naming every required currency without a usable sell rate.
    """
    by_currency: dict[Currency, RateQuote] = {}
    for quote in quotes:
        # First record per currency wins
        by_currency.setdefault(quote.currency, quote)

    selected: dict[Currency, RateQuote] = {}
    missing: list[str] = []
    for currency in required:
        quote = by_currency.get(currency)
        if quote is None or not _usable(quote.sell):
            missing.append(currency)
        else:
            selected[currency] = quote

    if missing:
        raise MissingRateError(missing)

    updated_at = max(q.updated_at for q in selected.values()) if selected else utc_now()
    return RateTable(
        reference=reference,
        rates={currency: float(q.sell) for currency, q in selected.items()},
        status=RateStatus.LIVE,
        updated_at=updated_at,
    )


def build_fallback_table(
    reference: Currency,
    fallback_rates: Mapping[Currency, float],
    failed_at: datetime,
    error: str | None = None,
) -> RateTable:
    """Create a degraded table from static constants.

    Args:
        reference: Reference currency of the table.
        fallback_rates: Static rate per foreign currency.
        failed_at: When the live fetch failed; used as the table timestamp.
        error: Message of the failure that caused the fallback.

    Returns:
        RateTable with FALLBACK status.
    """
    return RateTable(
        reference=reference,
        rates=dict(fallback_rates),
        status=RateStatus.FALLBACK,
        updated_at=failed_at,
        error=error,
    )


def to_reference(amount: float, currency: Currency, table: RateTable) -> float:
    """Convert an amount into the reference currency.

    Args:
        amount: Amount in `currency`.
        currency: Currency of the amount.
        table: Rate table to convert with.

    Returns:
        Amount in the table's reference currency.
    """
    if currency == table.reference:
        return amount
    return amount * table.rate_for(currency)


def from_reference(amount: float, currency: Currency, table: RateTable) -> float:
    """Convert a reference-currency amount into `currency`.

    Raises:
        DivideByZeroError: If the table holds a zero rate for the currency.
    """
    if currency == table.reference:
        return amount
    rate = table.rate_for(currency)
    if rate == 0:
        raise DivideByZeroError(f"Rate for {currency} is zero")
    return amount / rate
