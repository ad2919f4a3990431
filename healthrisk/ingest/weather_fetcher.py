"""Weather fetcher: cached primary source with a single secondary fallback hop."""

import logging

from healthrisk.ingest.cache import CacheKey, TemporalCache
from healthrisk.ingest.nasa_power_client import NasaPowerClient
from healthrisk.ingest.open_meteo_client import OpenMeteoClient
from healthrisk.models.weather import (
    FailureReason,
    FetchOutcome,
    SourceFailure,
    WeatherSnapshot,
)

logger = logging.getLogger(__name__)

CACHE_TAG = "weather"


class WeatherSourceError(Exception):
    """Raised when neither weather source produced a snapshot.

    Carries the primary source's failure; the secondary failure is kept for
    diagnostics only.
    """

    def __init__(
        self, primary: SourceFailure, secondary: SourceFailure | None = None
    ):
        super().__init__(f"{primary.source} failed ({primary.reason}): {primary.detail}")
        self.primary = primary
        self.secondary = secondary

    @property
    def status_code(self) -> int | None:
        return self.primary.status_code


class WeatherFetcher:
    def __init__(
        self,
        cache: TemporalCache[WeatherSnapshot],
        primary: OpenMeteoClient,
        secondary: NasaPowerClient,
    ):
        self.cache = cache
        self.primary = primary
        self.secondary = secondary

    def fetch(self, latitude: float, longitude: float, days: int = 7) -> WeatherSnapshot:
        """Return a canonical snapshot for the point, from cache when fresh.

        Raises WeatherSourceError carrying the primary failure when both
        sources fail.
        """
        key = CacheKey.for_point(CACHE_TAG, latitude, longitude, days)
        cached = self.cache.get(key)
        if cached is not None:
            logger.info("Weather cache hit for %s", key)
            return cached

        outcome = self.primary.fetch(latitude, longitude, days)
        if not outcome.ok:
            outcome = self._fallback(outcome, latitude, longitude, days)

        assert outcome.snapshot is not None
        self.cache.set(key, outcome.snapshot)
        return outcome.snapshot

    def _fallback(
        self, primary_outcome: FetchOutcome, latitude: float, longitude: float, days: int
    ) -> FetchOutcome:
        failure = primary_outcome.failure
        assert failure is not None

        if failure.reason == FailureReason.HTTP_STATUS:
            logger.warning(
                "%s returned HTTP %s, falling back to secondary source",
                failure.source, failure.status_code,
            )
        elif failure.reason == FailureReason.TRANSPORT:
            logger.warning(
                "%s unreachable (%s), falling back to secondary source",
                failure.source, failure.detail,
            )
        else:
            logger.warning(
                "%s sent an unusable response (%s), falling back to secondary source",
                failure.source, failure.detail,
            )

        outcome = self.secondary.fetch(latitude, longitude, days)
        if outcome.ok:
            return outcome

        secondary = outcome.failure
        logger.error(
            "Secondary weather source failed too: %s",
            secondary.detail if secondary else "unknown",
        )
        if failure.error is not None:
            raise WeatherSourceError(failure, secondary) from failure.error
        raise WeatherSourceError(failure, secondary)

    def clear_cache(self) -> None:
        self.cache.clear()
