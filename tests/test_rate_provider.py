"""Tests for fairsplit.rate_provider."""

import logging
from datetime import datetime

import pytest

from fairsplit.config import RateSettings
from fairsplit.domain.errors import MissingRateError, SourceUnavailableError
from fairsplit.domain.models import Currency
from fairsplit.domain.rates import RateQuote, RateStatus
from fairsplit.domain.split import BillAmount, Party, compute_split
from fairsplit.rate_provider import RateProvider, get_rate_provider

UPDATED = datetime(2025, 1, 15, 14, 0)


def live_quotes() -> list[RateQuote]:
    return [
        RateQuote(Currency("USD"), 1320.0, UPDATED),
        RateQuote(Currency("EUR"), 1560.0, UPDATED),
        RateQuote(Currency("BRL"), 250.0, UPDATED),
        RateQuote(Currency("CLP"), 1.4, UPDATED),
        RateQuote(Currency("UYU"), 34.0, UPDATED),
    ]


def failing_fetcher(url: str, timeout: float) -> list[RateQuote]:
    raise SourceUnavailableError("Rate source request failed: timed out")


class TestFetchRates:
    """Tests for RateProvider.fetch_rates."""

    def test_live_table(self) -> None:
        """Should build a live table from fetched quotes."""
        provider = RateProvider(fetcher=lambda url, timeout: live_quotes())

        table = provider.fetch_rates()

        assert table.status is RateStatus.LIVE
        assert table.rates[Currency("USD")] == 1320.0
        assert table.updated_at == UPDATED

    def test_passes_url_and_timeout(self) -> None:
        """Should call the fetcher with configured URL and timeout."""
        calls = []

        def fetcher(url: str, timeout: float) -> list[RateQuote]:
            calls.append((url, timeout))
            return live_quotes()

        RateProvider(RateSettings(source_url="http://rates.test/q", timeout=2.5), fetcher).fetch_rates()

        assert calls == [("http://rates.test/q", 2.5)]

    def test_missing_currency_raises(self) -> None:
        """Should raise MissingRateError instead of falling back."""
        provider = RateProvider(fetcher=lambda url, timeout: live_quotes()[:2])

        with pytest.raises(MissingRateError):
            provider.fetch_rates()

    def test_does_not_replace_held_table(self) -> None:
        """Should leave the held table alone."""
        provider = RateProvider(fetcher=lambda url, timeout: live_quotes())

        provider.fetch_rates()

        assert provider.table is None


class TestRefresh:
    """Tests for RateProvider.refresh and ensure_ready."""

    def test_falls_back_when_source_unavailable(self, caplog: pytest.LogCaptureFixture) -> None:
        """Should use fallback constants and log a warning."""
        provider = RateProvider(fetcher=failing_fetcher)

        with caplog.at_level(logging.WARNING, logger="fairsplit"):
            table = provider.refresh()

        assert table.degraded
        assert table.rates[Currency("USD")] == 1300.0
        assert table.error == "Rate source request failed: timed out"
        assert provider.table is table
        assert "Using fallback currency rates" in caplog.text

    def test_falls_back_when_currency_missing(self) -> None:
        """Should fall back when the response lacks a required currency."""
        provider = RateProvider(fetcher=lambda url, timeout: live_quotes()[:4])

        table = provider.refresh()

        assert table.degraded
        assert "UYU" in (table.error or "")

    def test_fallback_uses_configured_constants(self) -> None:
        """Should use the configured fallback values for the configured currencies."""
        settings = RateSettings(currencies=(Currency("USD"),), fallback={Currency("USD"): 999.0})

        table = RateProvider(settings, failing_fetcher).refresh()

        assert dict(table.rates) == {"USD": 999.0}

    def test_fallback_still_computes_split(self) -> None:
        """Should allow a split after the fetch failed."""
        table = RateProvider(fetcher=failing_fetcher).refresh()

        result = compute_split(
            Party("Person A", 1000, Currency("USD")),
            Party("Person B", 1_300_000, Currency("ARS")),
            BillAmount(2600, Currency("ARS")),
            table,
        )

        assert result.rate_status is RateStatus.FALLBACK
        assert result.party_a.payment == pytest.approx(1300)

    def test_recovers_to_live(self) -> None:
        """Should go from fallback back to live on the next successful fetch."""
        responses = [failing_fetcher, lambda url, timeout: live_quotes()]
        provider = RateProvider(fetcher=lambda url, timeout: responses.pop(0)(url, timeout))

        assert provider.refresh().degraded
        assert provider.refresh().status is RateStatus.LIVE
        assert provider.table is not None and not provider.table.degraded

    def test_live_does_not_expire_on_its_own(self) -> None:
        """Should keep a live table until a refresh fails."""
        provider = RateProvider(fetcher=lambda url, timeout: live_quotes())
        live = provider.refresh()

        assert provider.ensure_ready() is live

    def test_latest_refresh_wins(self) -> None:
        """Should hold the table from the last refresh."""
        provider = RateProvider(fetcher=lambda url, timeout: live_quotes())
        provider.refresh()
        provider._fetcher = failing_fetcher

        last = provider.refresh()

        assert provider.table is last
        assert last.degraded

    def test_ensure_ready_fetches_once(self) -> None:
        """Should fetch on first use only."""
        calls = []

        def fetcher(url: str, timeout: float) -> list[RateQuote]:
            calls.append(url)
            return live_quotes()

        provider = RateProvider(fetcher=fetcher)
        first = provider.ensure_ready()
        second = provider.ensure_ready()

        assert first is second
        assert len(calls) == 1


class TestGetRateProvider:
    """Tests for get_rate_provider."""

    def test_cached(self, monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
        """Should return the same provider until the cache is cleared."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        get_rate_provider.cache_clear()

        try:
            assert get_rate_provider() is get_rate_provider()
        finally:
            get_rate_provider.cache_clear()
