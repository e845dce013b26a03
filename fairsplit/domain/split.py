"""Pure functions for proportional bill splitting.

Each party pays the share of the bill that their income represents of
the combined income, so both end up paying the same percentage of
their own income. Incomes and bill may be in different currencies;
everything is normalized through the rate table's reference currency.

No I/O here: the rate table is passed in, never fetched.
"""

import math
import re
from dataclasses import dataclass

from fairsplit.domain.errors import DegenerateInputError, FieldViolation, ValidationError
from fairsplit.domain.models import DEFAULT_CATALOG, Currency, CurrencyCatalog
from fairsplit.domain.rates import RateStatus, RateTable, from_reference, to_reference

DEFAULT_NAME_A = "Person A"
DEFAULT_NAME_B = "Person B"

# Tolerance for comparing the two percentages
PERCENTAGE_TOLERANCE = 1e-9

THOUSANDS_PATTERN = re.compile(r"^\d{1,3}(,\d{3})+(\.\d+)?$")


@dataclass(frozen=True)
class Party:
    """One of the two people sharing the bill."""

    name: str
    income: float
    currency: Currency


@dataclass(frozen=True)
class BillAmount:
    """The shared bill."""

    amount: float
    currency: Currency


@dataclass(frozen=True)
class PartyShare:
    """What one party pays, in the bill currency."""

    name: str
    payment: float
    percentage: float


@dataclass(frozen=True)
class SplitResult:
    """Immutable outcome of one split calculation."""

    party_a: PartyShare
    party_b: PartyShare
    bill: BillAmount
    rate_status: RateStatus = RateStatus.LIVE

    @property
    def total(self) -> float:
        return self.party_a.payment + self.party_b.payment

    @property
    def is_fair(self) -> bool:
        return math.isclose(
            self.party_a.percentage, self.party_b.percentage, rel_tol=PERCENTAGE_TOLERANCE, abs_tol=PERCENTAGE_TOLERANCE
        )


def _check_positive(value: float, field: str, label: str) -> FieldViolation | None:
    if not isinstance(value, (int, float)) or isinstance(value, bool) or math.isnan(value):
        return FieldViolation(field, f"{label} must be a number")
    if math.isinf(value):
        return FieldViolation(field, f"{label} must be finite")
    if value <= 0:
        return FieldViolation(field, f"{label} must be greater than zero")
    return None


def validate_split_inputs(party_a: Party, party_b: Party, bill: BillAmount) -> list[FieldViolation]:
    """Check every input field and collect all violations.

    Args:
        party_a: First party.
        party_b: Second party.
        bill: Bill to split.

    Returns:
        List of violations, empty if inputs are valid.
    """
    checks = [
        _check_positive(party_a.income, "person_a_income", f"{party_a.name}'s income"),
        _check_positive(party_b.income, "person_b_income", f"{party_b.name}'s income"),
        _check_positive(bill.amount, "bill_amount", "Bill amount"),
    ]
    return [violation for violation in checks if violation is not None]


def _parse_number(raw: str, field: str, label: str, violations: list[FieldViolation]) -> float:
    text = raw.strip() if isinstance(raw, str) else raw
    # Commas are only accepted as thousands separators (1,234.50)
    if isinstance(text, str) and "," in text and THOUSANDS_PATTERN.match(text):
        text = text.replace(",", "")
    try:
        value = float(text)
    except (TypeError, ValueError):
        violations.append(FieldViolation(field, f"{label} must be a number"))
        return math.nan
    violation = _check_positive(value, field, label)
    if violation:
        violations.append(violation)
    return value


def _parse_currency(raw: str, field: str, catalog: CurrencyCatalog, violations: list[FieldViolation]) -> Currency:
    try:
        return catalog.parse(raw, field)
    except ValidationError as e:
        violations.extend(e.violations)
        return Currency(raw)


def parse_split_inputs(
    income_a: str,
    currency_a: str,
    income_b: str,
    currency_b: str,
    bill_amount: str,
    bill_currency: str,
    name_a: str = DEFAULT_NAME_A,
    name_b: str = DEFAULT_NAME_B,
    catalog: CurrencyCatalog = DEFAULT_CATALOG,
) -> tuple[Party, Party, BillAmount]:
    """Build split inputs from raw text, collecting every problem in one pass.

    Args:
        income_a: First party's income as typed.
        currency_a: First party's currency code.
        income_b: Second party's income as typed.
        currency_b: Second party's currency code.
        bill_amount: Bill amount as typed.
        bill_currency: Bill currency code.
        name_a: First party's display name.
        name_b: Second party's display name.
        catalog: Currencies accepted.

    Returns:
        Tuple of (party_a, party_b, bill).

    Raises:
        ValidationError: Listing every non-numeric, non-positive or unknown field.
    """
    name_a = name_a.strip() or DEFAULT_NAME_A
    name_b = name_b.strip() or DEFAULT_NAME_B
    violations: list[FieldViolation] = []

    party_a = Party(
        name=name_a,
        income=_parse_number(income_a, "person_a_income", f"{name_a}'s income", violations),
        currency=_parse_currency(currency_a, "person_a_currency", catalog, violations),
    )
    party_b = Party(
        name=name_b,
        income=_parse_number(income_b, "person_b_income", f"{name_b}'s income", violations),
        currency=_parse_currency(currency_b, "person_b_currency", catalog, violations),
    )
    bill = BillAmount(
        amount=_parse_number(bill_amount, "bill_amount", "Bill amount", violations),
        currency=_parse_currency(bill_currency, "bill_currency", catalog, violations),
    )

    if violations:
        raise ValidationError(violations)
    return party_a, party_b, bill


def compute_split(party_a: Party, party_b: Party, bill: BillAmount, table: RateTable) -> SplitResult:
    """Split a bill so both parties pay the same percentage of their income.

    Args:
        party_a: First party.
        party_b: Second party.
        bill: Bill to split.
        table: Rate table snapshot used for every conversion.

    Returns:
        SplitResult with payments in the bill currency.

    Raises:
        ValidationError: If any income or the bill is not positive.
        DegenerateInputError: If the combined income is zero.
    """
    violations = validate_split_inputs(party_a, party_b, bill)
    if violations:
        raise ValidationError(violations)

    income_a_ref = to_reference(party_a.income, party_a.currency, table)
    income_b_ref = to_reference(party_b.income, party_b.currency, table)
    bill_ref = to_reference(bill.amount, bill.currency, table)

    total_income_ref = income_a_ref + income_b_ref
    if total_income_ref == 0:
        raise DegenerateInputError("Combined income is zero")

    payment_a_ref = bill_ref * (income_a_ref / total_income_ref)
    payment_b_ref = bill_ref * (income_b_ref / total_income_ref)

    return SplitResult(
        party_a=PartyShare(
            name=party_a.name,
            payment=from_reference(payment_a_ref, bill.currency, table),
            percentage=(payment_a_ref / income_a_ref) * 100,
        ),
        party_b=PartyShare(
            name=party_b.name,
            payment=from_reference(payment_b_ref, bill.currency, table),
            percentage=(payment_b_ref / income_b_ref) * 100,
        ),
        bill=bill,
        rate_status=table.status,
    )
