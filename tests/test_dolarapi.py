"""Tests for fairsplit.integrations.dolarapi."""

from datetime import datetime
from typing import Any

import pytest
import requests

from fairsplit.domain.errors import SourceUnavailableError
from fairsplit.integrations import dolarapi

SAMPLE_RESPONSE = [
    {
        "moneda": "USD",
        "casa": "oficial",
        "nombre": "Dólar",
        "compra": 1280,
        "venta": 1320,
        "fechaActualizacion": "2025-01-15T14:00:00.000Z",
    },
    {
        "moneda": "EUR",
        "casa": "oficial",
        "nombre": "Euro",
        "compra": 1500.5,
        "venta": 1560.25,
        "fechaActualizacion": "2025-01-15T11:00:00-03:00",
    },
    {"moneda": "BRL", "casa": "oficial", "nombre": "Real", "compra": 230, "venta": "bad", "fechaActualizacion": "x"},
]


class FakeResponse:
    def __init__(self, payload: Any, status_code: int = 200) -> None:
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self) -> Any:
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class TestGetQuotes:
    """Tests for get_quotes."""

    def test_returns_payload(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should request the quotes URL and return the list."""
        captured = {}

        def fake_get(url: str, headers: dict[str, str], timeout: float) -> FakeResponse:
            captured["url"] = url
            captured["timeout"] = timeout
            return FakeResponse(SAMPLE_RESPONSE)

        monkeypatch.setattr(dolarapi.requests, "get", fake_get)

        assert dolarapi.get_quotes(timeout=3) == SAMPLE_RESPONSE
        assert captured == {"url": "https://dolarapi.com/v1/cotizaciones", "timeout": 3}

    def test_connection_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should wrap network errors as SourceUnavailableError."""

        def fake_get(*args: Any, **kwargs: Any) -> FakeResponse:
            raise requests.ConnectionError("no route to host")

        monkeypatch.setattr(dolarapi.requests, "get", fake_get)

        with pytest.raises(SourceUnavailableError, match="no route to host"):
            dolarapi.get_quotes()

    def test_http_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should treat non-2xx status as unavailable."""
        monkeypatch.setattr(dolarapi.requests, "get", lambda *a, **k: FakeResponse([], status_code=503))

        with pytest.raises(SourceUnavailableError, match="503"):
            dolarapi.get_quotes()

    def test_invalid_json(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should treat an unparseable body as unavailable."""
        monkeypatch.setattr(dolarapi.requests, "get", lambda *a, **k: FakeResponse(ValueError("Expecting value")))

        with pytest.raises(SourceUnavailableError, match="invalid JSON"):
            dolarapi.get_quotes()

    def test_unexpected_payload(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should reject a body that is not a list."""
        monkeypatch.setattr(dolarapi.requests, "get", lambda *a, **k: FakeResponse({"error": "maintenance"}))

        with pytest.raises(SourceUnavailableError, match="unexpected payload"):
            dolarapi.get_quotes()


class TestParseTimestamp:
    """Tests for parse_timestamp."""

    def test_zulu_timestamp(self) -> None:
        """Should parse a UTC timestamp with milliseconds."""
        assert dolarapi.parse_timestamp("2025-01-15T14:00:00.000Z") == datetime(2025, 1, 15, 14, 0)

    def test_offset_timestamp_converted_to_utc(self) -> None:
        """Should convert offsets to naive UTC."""
        assert dolarapi.parse_timestamp("2025-01-15T11:00:00-03:00") == datetime(2025, 1, 15, 14, 0)

    @pytest.mark.parametrize("raw", ["not a date", None])
    def test_invalid_timestamp(self, raw: Any) -> None:
        """Should raise ValueError for unparseable values."""
        with pytest.raises(ValueError):
            dolarapi.parse_timestamp(raw)


class TestFetchQuotes:
    """Tests for fetch_quotes."""

    def test_normalizes_records(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should turn API records into RateQuotes."""
        monkeypatch.setattr(dolarapi.requests, "get", lambda *a, **k: FakeResponse(SAMPLE_RESPONSE))

        quotes = dolarapi.fetch_quotes()

        assert [q.currency for q in quotes] == ["USD", "EUR", "BRL"]
        assert quotes[0].sell == 1320.0
        assert quotes[0].buy == 1280.0
        assert quotes[0].updated_at == datetime(2025, 1, 15, 14, 0)
        assert quotes[1].sell == 1560.25

    def test_bad_values_are_flagged(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should zero a non-numeric sell rate and stamp a bad timestamp with fetch time."""
        monkeypatch.setattr(dolarapi.requests, "get", lambda *a, **k: FakeResponse(SAMPLE_RESPONSE))
        monkeypatch.setattr(dolarapi, "utc_now", lambda: datetime(2025, 6, 1, 0, 0))

        brl = dolarapi.fetch_quotes()[2]

        assert brl.sell == 0.0
        assert brl.updated_at == datetime(2025, 6, 1, 0, 0)

    def test_skips_records_without_currency(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should drop records that are not objects or have no code."""
        payload = ["garbage", {"venta": 10}, {"moneda": "clp", "venta": 1.4, "fechaActualizacion": "2025-01-01"}]
        monkeypatch.setattr(dolarapi.requests, "get", lambda *a, **k: FakeResponse(payload))

        quotes = dolarapi.fetch_quotes()

        assert len(quotes) == 1
        assert quotes[0].currency == "CLP"
        assert quotes[0].buy is None
