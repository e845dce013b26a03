"""Session-scoped holder for the current exchange rate table.

The provider owns exactly one RateTable reference. `refresh` always
resolves to a table: live when the source answers with every required
currency, fallback constants otherwise. The newest resolved refresh
replaces the held table.
"""

import logging
from collections.abc import Callable
from functools import lru_cache

from fairsplit.config import RateSettings, get_rate_settings
from fairsplit.dates import utc_now
from fairsplit.domain.errors import RateError
from fairsplit.domain.rates import RateQuote, RateTable, build_fallback_table, build_live_table
from fairsplit.integrations import dolarapi

logger = logging.getLogger(__name__)

QuoteFetcher = Callable[[str, float], list[RateQuote]]


class RateProvider:
    """Fetches rate tables and keeps the latest one."""

    def __init__(self, settings: RateSettings | None = None, fetcher: QuoteFetcher | None = None) -> None:
        self.settings = settings or RateSettings()
        self._fetcher = fetcher or dolarapi.fetch_quotes
        self._table: RateTable | None = None

    @property
    def table(self) -> RateTable | None:
        return self._table

    def fetch_rates(self) -> RateTable:
        """Fetch a live rate table.

        Returns:
            RateTable with LIVE status.

        Raises:
            SourceUnavailableError: If the source cannot be read.
            MissingRateError: If a required currency is absent from the response.
        """
        logger.debug("Fetching currency rates from %s", self.settings.source_url)
        quotes = self._fetcher(self.settings.source_url, self.settings.timeout)
        table = build_live_table(quotes, self.settings.currencies, self.settings.reference)
        logger.info("Fetched live rates for %s", ", ".join(table.rates))
        return table

    def fallback_table(self, error: str | None = None) -> RateTable:
        """Build the degraded table from configured constants."""
        return build_fallback_table(self.settings.reference, self.settings.fallback, utc_now(), error)

    def refresh(self) -> RateTable:
        """Fetch rates, or fall back to static constants on failure.

        Returns:
            The table now held by the provider.
        """
        try:
            table = self.fetch_rates()
        except RateError as e:
            logger.warning("Using fallback currency rates: %s", e)
            table = self.fallback_table(str(e))
        self._table = table
        return table

    def ensure_ready(self) -> RateTable:
        """Return the held table, fetching one first if none is held."""
        if self._table is None:
            return self.refresh()
        return self._table


@lru_cache()
def get_rate_provider() -> RateProvider:
    """Get the process-wide rate provider (cached).

    Call get_rate_provider.cache_clear() to rebuild it with fresh settings.
    """
    return RateProvider(get_rate_settings())
