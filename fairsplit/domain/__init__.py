"""Functional core for fairsplit.

Validation, currency conversion, the proportional split and history
statistics live here as pure functions over frozen dataclasses. Nothing
in this package touches the network, the database or the terminal.
"""

from fairsplit.domain.models import Currency, CurrencyCatalog, CurrencyInfo
from fairsplit.domain.rates import RateStatus, RateTable
from fairsplit.domain.split import BillAmount, Party, SplitResult

__all__ = [
    "BillAmount",
    "Currency",
    "CurrencyCatalog",
    "CurrencyInfo",
    "Party",
    "RateStatus",
    "RateTable",
    "SplitResult",
]
