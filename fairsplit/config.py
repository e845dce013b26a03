"""Configuration file management for fairsplit."""

import math
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w

from fairsplit.domain.models import (
    DEFAULT_FOREIGN_CURRENCIES,
    DEFAULT_REFERENCE,
    Currency,
    CurrencyCatalog,
    normalize_code,
)
from fairsplit.domain.rates import DEFAULT_FALLBACK_RATES
from fairsplit.integrations.dolarapi import API_QUOTES_URL, DEFAULT_TIMEOUT

RATES_URL_ENV = "FAIRSPLIT_RATES_URL"


class ConfigError(ValueError):
    """Configuration file contents are invalid."""


@dataclass(frozen=True)
class RateSettings:
    """Settings for fetching and falling back on exchange rates."""

    source_url: str = API_QUOTES_URL
    timeout: float = DEFAULT_TIMEOUT
    reference: Currency = DEFAULT_REFERENCE
    currencies: tuple[Currency, ...] = DEFAULT_FOREIGN_CURRENCIES
    fallback: dict[Currency, float] = field(default_factory=lambda: dict(DEFAULT_FALLBACK_RATES))

    @property
    def catalog(self) -> CurrencyCatalog:
        return CurrencyCatalog(reference=self.reference, foreign_codes=self.currencies)


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_dir() -> Path:
    """Get the fairsplit config directory (XDG compliant)."""
    return get_xdg_config_home() / "fairsplit"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_config_dir() / "config.toml"


def default_config() -> dict[str, Any]:
    """Build the default configuration dictionary."""
    return {
        "rates": {
            "source_url": API_QUOTES_URL,
            "timeout": DEFAULT_TIMEOUT,
            "reference": DEFAULT_REFERENCE,
            "currencies": list(DEFAULT_FOREIGN_CURRENCIES),
            "fallback": {code: rate for code, rate in DEFAULT_FALLBACK_RATES.items()},
        }
    }


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    save_config(default_config(), config_path)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ConfigError: If the file is not valid TOML.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid config file {config_path}: {e}") from e


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to TOML file.

    Args:
        config: Configuration dictionary.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def _is_positive_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


def parse_rate_settings(config: dict[str, Any]) -> RateSettings:
    """Build and validate rate settings from a config dictionary.

    Missing keys take their default values.

    Args:
        config: Configuration dictionary (as loaded from TOML).

    Returns:
        Validated RateSettings.

    Raises:
        ConfigError: If any rates setting is invalid.
    """
    rates = config.get("rates", {})
    if not isinstance(rates, dict):
        raise ConfigError("[rates] must be a table")

    source_url = os.environ.get(RATES_URL_ENV) or rates.get("source_url", API_QUOTES_URL)

    timeout = rates.get("timeout", DEFAULT_TIMEOUT)
    if not _is_positive_number(timeout):
        raise ConfigError("rates.timeout must be a positive number")

    reference = normalize_code(str(rates.get("reference", DEFAULT_REFERENCE)))
    currencies = tuple(normalize_code(str(code)) for code in rates.get("currencies", DEFAULT_FOREIGN_CURRENCIES))
    if reference in currencies:
        raise ConfigError(f"Reference currency {reference} cannot also be a foreign currency")
    if len(set(currencies)) != len(currencies):
        raise ConfigError("rates.currencies contains duplicates")

    raw_fallback = rates.get("fallback", DEFAULT_FALLBACK_RATES)
    if not isinstance(raw_fallback, Mapping):
        raise ConfigError("[rates.fallback] must be a table")
    fallback = {normalize_code(str(code)): value for code, value in dict(raw_fallback).items()}
    for code in currencies:
        value = fallback.get(code)
        if not _is_positive_number(value):
            raise ConfigError(f"rates.fallback.{code} must be a positive number")

    return RateSettings(
        source_url=source_url,
        timeout=float(timeout),
        reference=reference,
        currencies=currencies,
        fallback={code: float(fallback[code]) for code in currencies},
    )


def get_rate_settings(config_path: Path | None = None) -> RateSettings:
    """Load rate settings, using defaults when no config file exists.

    Args:
        config_path: Path to config file. If None, uses default location.

    Raises:
        ConfigError: If the config file is invalid.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        config = {}
    return parse_rate_settings(config)
