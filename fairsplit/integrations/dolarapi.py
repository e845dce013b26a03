"""DolarAPI currency quote interactions."""

from datetime import datetime
from typing import Any

import pandas as pd
import requests

from fairsplit.dates import utc_now
from fairsplit.domain.errors import SourceUnavailableError
from fairsplit.domain.models import normalize_code
from fairsplit.domain.rates import RateQuote

API_QUOTES_URL = "https://dolarapi.com/v1/cotizaciones"
DEFAULT_TIMEOUT = 10.0


def get_quotes(url: str = API_QUOTES_URL, timeout: float = DEFAULT_TIMEOUT) -> list[dict[str, Any]]:
    """Fetch raw currency quotes.

    Args:
        url: Quotes endpoint.
        timeout: Request timeout in seconds.

    Returns:
        List of quote dictionaries as returned by the API.

    Raises:
        SourceUnavailableError: On network errors, non-2xx status, or a body that is not a JSON list.
    """
    headers = {"Accept": "application/json"}
    try:
        response = requests.get(url, headers=headers, timeout=timeout)
        response.raise_for_status()
        data = response.json()
    except requests.RequestException as e:
        raise SourceUnavailableError(f"Rate source request failed: {e}") from e
    except ValueError as e:
        raise SourceUnavailableError(f"Rate source returned invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise SourceUnavailableError("Rate source returned an unexpected payload")
    return data


def parse_timestamp(raw: Any) -> datetime:
    """Normalize a quote timestamp to a naive UTC datetime.

    Uses pandas.to_datetime so ISO strings with or without offsets and
    fractional seconds all parse the same way.

    Raises:
        ValueError: If the timestamp cannot be parsed.
    """
    try:
        parsed = pd.to_datetime(raw, utc=True)
    except (ValueError, TypeError, pd.errors.ParserError) as e:
        raise ValueError(f"Could not parse timestamp '{raw}': {e}") from e
    if pd.isna(parsed):
        raise ValueError(f"Could not parse timestamp '{raw}'")
    return parsed.tz_localize(None).to_pydatetime()


def _as_rate(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_quote(item: dict[str, Any], fetched_at: datetime) -> RateQuote | None:
    """Convert one API record into a RateQuote.

    Args:
        item: Raw record with moneda, compra, venta, fechaActualizacion.
        fetched_at: Timestamp used when the record has no usable one.

    Returns:
        RateQuote, or None if the record has no currency code.
    """
    code = item.get("moneda")
    if not isinstance(code, str) or not code.strip():
        return None

    try:
        updated_at = parse_timestamp(item["fechaActualizacion"])
    except (KeyError, ValueError):
        updated_at = fetched_at

    sell = _as_rate(item.get("venta"))
    return RateQuote(
        currency=normalize_code(code),
        # Non-numeric sell rates become 0 so the table builder reports them missing
        sell=sell if sell is not None else 0.0,
        updated_at=updated_at,
        buy=_as_rate(item.get("compra")),
    )


def fetch_quotes(url: str = API_QUOTES_URL, timeout: float = DEFAULT_TIMEOUT) -> list[RateQuote]:
    """Fetch and normalize all quotes from the rate source.

    Raises:
        SourceUnavailableError: If the source cannot be read.
    """
    fetched_at = utc_now()
    quotes = []
    for item in get_quotes(url, timeout):
        if not isinstance(item, dict):
            continue
        quote = parse_quote(item, fetched_at)
        if quote is not None:
            quotes.append(quote)
    return quotes

