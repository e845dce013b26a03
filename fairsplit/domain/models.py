"""Domain type definitions for fairsplit.

These types provide semantic clarity and help with type checking:
- Currency: Upper-case currency code (e.g., "ARS", "USD")
- CurrencyInfo: Display name and symbol for a currency
- CurrencyCatalog: The closed set of currencies the calculator accepts
"""

from dataclasses import dataclass, field
from typing import NewType

from fairsplit.domain.errors import FieldViolation, ValidationError

# Currency codes are always upper case (e.g., "USD")
Currency = NewType("Currency", str)

# Reference currency used when nothing else is configured
DEFAULT_REFERENCE = Currency("ARS")


@dataclass(frozen=True)
class CurrencyInfo:
    """Immutable display data for one currency."""

    code: Currency
    name: str
    symbol: str


KNOWN_CURRENCIES: dict[Currency, CurrencyInfo] = {
    Currency("ARS"): CurrencyInfo(Currency("ARS"), "Argentine Peso", "$"),
    Currency("USD"): CurrencyInfo(Currency("USD"), "US Dollar", "$"),
    Currency("EUR"): CurrencyInfo(Currency("EUR"), "Euro", "€"),
    Currency("BRL"): CurrencyInfo(Currency("BRL"), "Brazilian Real", "R$"),
    Currency("CLP"): CurrencyInfo(Currency("CLP"), "Chilean Peso", "$"),
    Currency("UYU"): CurrencyInfo(Currency("UYU"), "Uruguayan Peso", "$U"),
}

DEFAULT_FOREIGN_CURRENCIES: tuple[Currency, ...] = (
    Currency("USD"),
    Currency("EUR"),
    Currency("BRL"),
    Currency("CLP"),
    Currency("UYU"),
)


def normalize_code(raw: str) -> Currency:
    """Normalize user input into a currency code.

    Args:
        raw: Raw code, any case, possibly padded.

    Returns:
        Upper-case Currency.
    """
    return Currency(raw.strip().upper())


@dataclass(frozen=True)
class CurrencyCatalog:
    """The closed set of currencies: one reference plus its foreign currencies.

    Both the rate normalizer (required codes) and the presentation layer
    (names and symbols) read from the same catalog.
    """

    reference: Currency = DEFAULT_REFERENCE
    foreign_codes: tuple[Currency, ...] = DEFAULT_FOREIGN_CURRENCIES
    _info: dict[Currency, CurrencyInfo] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "foreign_codes", tuple(self.foreign_codes))
        info = {
            code: KNOWN_CURRENCIES.get(code, CurrencyInfo(code, code, code))
            for code in (self.reference, *self.foreign_codes)
        }
        object.__setattr__(self, "_info", info)

    @property
    def codes(self) -> tuple[Currency, ...]:
        """All codes, reference first."""
        return (self.reference, *self.foreign_codes)

    def is_known(self, code: str) -> bool:
        return code in self._info

    def info(self, code: Currency) -> CurrencyInfo:
        return self._info[code]

    def name(self, code: Currency) -> str:
        return self._info[code].name

    def symbol(self, code: Currency) -> str:
        return self._info[code].symbol

    def parse(self, raw: str, field_name: str = "currency") -> Currency:
        """Parse a currency code against this catalog.

        Args:
            raw: Raw currency code.
            field_name: Input field reported on failure.

        Returns:
            Normalized Currency.

        Raises:
            ValidationError: If the code is not part of the catalog.
        """
        code = normalize_code(raw)
        if not self.is_known(code):
            raise ValidationError([FieldViolation(field_name, f"Unsupported currency '{raw}'")])
        return code

    def format_amount(self, amount: float, code: Currency) -> str:
        """Format an amount with its currency symbol and code.

        Codes outside the catalog (e.g. from older history) print without a symbol.
        """
        info = self._info.get(code) or KNOWN_CURRENCIES.get(code)
        symbol = info.symbol if info else ""
        return f"{symbol}{amount:,.2f} {code}"


DEFAULT_CATALOG = CurrencyCatalog()
