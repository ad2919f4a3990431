"""Canonical weather snapshot models and source fetch outcomes."""

from dataclasses import dataclass, field
from enum import StrEnum

HOURS_PER_DAY = 24


class WeatherSource(StrEnum):
    OPEN_METEO = "open-meteo"
    NASA_POWER = "nasa-power"


class FailureReason(StrEnum):
    TRANSPORT = "transport"
    HTTP_STATUS = "http_status"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class HourlySeries:
    time: list[str]
    temperature: list[float]
    humidity: list[float]
    wind_speed: list[float]
    precipitation: list[float]

    def __len__(self) -> int:
        return len(self.time)


@dataclass(frozen=True)
class DailySeries:
    time: list[str]  # YYYY-MM-DD
    temperature_max: list[float]
    temperature_min: list[float]
    uv_index_max: list[float]
    precipitation_sum: list[float]

    def __len__(self) -> int:
        return len(self.time)


@dataclass(frozen=True)
class WeatherSnapshot:
    """Uniform weather shape regardless of the originating provider.

    Every series is fully populated. Values the provider did not report are
    filled with defaults and their (field, index) pair is listed in
    ``imputed`` so scoring can tell observed inputs from defaulted ones.
    Field names are prefixed with ``hourly.`` or ``daily.``.
    """

    latitude: float
    longitude: float
    source: WeatherSource
    hourly: HourlySeries | None
    daily: DailySeries | None
    imputed: frozenset[tuple[str, int]] = field(default_factory=frozenset)

    @property
    def days(self) -> int:
        return len(self.daily) if self.daily is not None else 0

    def is_observed(self, field_name: str, index: int) -> bool:
        return (field_name, index) not in self.imputed


@dataclass(frozen=True)
class SourceFailure:
    source: str
    reason: FailureReason
    detail: str
    status_code: int | None = None
    error: Exception | None = None


@dataclass(frozen=True)
class FetchOutcome:
    """Either a snapshot or the reason a single source could not provide one."""

    snapshot: WeatherSnapshot | None = None
    failure: SourceFailure | None = None

    @property
    def ok(self) -> bool:
        return self.snapshot is not None

    @classmethod
    def success(cls, snapshot: WeatherSnapshot) -> "FetchOutcome":
        return cls(snapshot=snapshot)

    @classmethod
    def failed(cls, failure: SourceFailure) -> "FetchOutcome":
        return cls(failure=failure)
