"""Exceptions raised by the fairsplit functional core."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldViolation:
    """One invalid input field and the reason it was rejected."""

    field: str
    message: str


class FairSplitError(Exception):
    """Base class for all domain errors."""


class ValidationError(FairSplitError):
    """Input out of domain. Carries every violated field, not just the first."""

    def __init__(self, violations: list[FieldViolation]) -> None:
        self.violations = list(violations)
        details = "; ".join(f"{v.field}: {v.message}" for v in self.violations)
        super().__init__(f"Invalid input ({details})")

    @property
    def fields(self) -> list[str]:
        return [v.field for v in self.violations]


class DegenerateInputError(FairSplitError):
    """Total income in the reference currency is zero."""


class RateError(FairSplitError):
    """Base class for rate table problems."""


class SourceUnavailableError(RateError):
    """The rate source could not be reached or returned garbage."""


class MissingRateError(RateError):
    """One or more required currencies have no usable rate."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = tuple(missing)
        super().__init__(f"Missing rates for: {', '.join(self.missing)}")


class DivideByZeroError(RateError):
    """A rate of exactly zero was found in the table."""
