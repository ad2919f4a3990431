"""Health checker: DB connectivity, source reachability, last run age."""

import sqlite3
from datetime import UTC, datetime

import httpx

from healthrisk.config.schema import SourceConfig
from healthrisk.models.reporting import HealthStatus
from healthrisk.storage import run_repo


class HealthChecker:
    def __init__(self, conn: sqlite3.Connection, sources: SourceConfig):
        self.conn = conn
        self.sources = sources

    def check(self) -> HealthStatus:
        db_connected = self._check_db()
        latest = self._latest_run() if db_connected else None
        return HealthStatus(
            db_connected=db_connected,
            primary_weather_reachable=self._reachable(
                self.sources.primary_weather_url,
                {"latitude": 0, "longitude": 0, "forecast_days": 1},
            ),
            secondary_weather_reachable=self._reachable(self.sources.secondary_weather_url),
            air_quality_reachable=self._reachable(
                f"{self.sources.air_quality_url.rstrip('/')}/locations", {"limit": 1}
            ),
            last_run_age_minutes=_age_minutes(latest.get("completed_at") if latest else None),
            last_run_status=latest.get("status") if latest else None,
        )

    def _check_db(self) -> bool:
        try:
            self.conn.execute("SELECT 1")
            return True
        except sqlite3.Error:
            return False

    def _latest_run(self) -> dict | None:
        try:
            return run_repo.get_latest_run(self.conn)
        except sqlite3.Error:
            return None

    def _reachable(self, url: str, params: dict | None = None) -> bool:
        """Any HTTP answer below 500 counts as reachable."""
        try:
            resp = httpx.get(
                url,
                params=params,
                headers={"User-Agent": self.sources.user_agent},
                timeout=self.sources.timeout_seconds,
            )
            return resp.status_code < 500
        except httpx.HTTPError:
            return False


def _age_minutes(completed_at: str | None, now: datetime | None = None) -> float | None:
    if completed_at is None:
        return None
    if now is None:
        now = datetime.now(UTC)
    try:
        end = datetime.fromisoformat(completed_at)
    except (ValueError, TypeError):
        return None
    if end.tzinfo is None:
        end = end.replace(tzinfo=UTC)
    return (now - end).total_seconds() / 60
