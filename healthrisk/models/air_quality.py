"""Air-quality station and snapshot models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Station:
    id: int
    name: str
    latitude: float
    longitude: float


@dataclass(frozen=True)
class AirQualitySnapshot:
    pm25: float | None = None
    pm10: float | None = None
    no2: float | None = None
    station: str | None = None
    distance_km: float | None = None

    @classmethod
    def no_data(cls) -> "AirQualitySnapshot":
        return cls()

    @property
    def has_data(self) -> bool:
        return any(v is not None for v in (self.pm25, self.pm10, self.no2))
