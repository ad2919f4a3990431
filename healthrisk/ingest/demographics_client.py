"""World Bank indicator client for population age structure."""

import logging

from healthrisk.ingest.http import fetch_json

logger = logging.getLogger(__name__)

WORLD_BANK_URL = "https://api.worldbank.org/v2"
DEFAULT_USER_AGENT = "healthrisk-engine/0.1.0"
ELDERLY_INDICATOR = "SP.POP.65UP.TO.ZS"  # % of population aged 65 and above


class DemographicsClient:
    def __init__(
        self,
        base_url: str = WORLD_BANK_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout

    def elderly_percent(self, country_code: str, year: int | None = None) -> float | None:
        """Most recent reported elderly share for a country, or None."""
        url = f"{self.base_url}/country/{country_code}/indicator/{ELDERLY_INDICATOR}"
        params = {
            "format": "json",
            "date": str(year) if year is not None else "2015:2023",
            "per_page": 1 if year is not None else 20,
        }
        payload, failure = fetch_json(
            "worldbank", url, params, self.timeout, self.user_agent
        )
        if failure is not None:
            logger.warning("World Bank request failed: %s", failure.detail)
            return None

        # The body is [paging, datapoints]; datapoints are newest first.
        if not isinstance(payload, list) or len(payload) < 2:
            return None
        for entry in payload[1] or []:
            if entry and entry.get("value") is not None:
                return float(entry["value"])
        return None
