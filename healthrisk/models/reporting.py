"""Evaluation run reporting and operational health models."""

from dataclasses import dataclass, field

from healthrisk.models.risk import AlertRecord, RegionRisk


@dataclass
class EvaluationSummary:
    run_id: str
    regions_total: int = 0
    regions_scored: int = 0
    regions_failed: int = 0
    region_risks: list[RegionRisk] = field(default_factory=list)
    alerts: list[AlertRecord] = field(default_factory=list)
    highest_composite: float = 0.0
    highest_composite_region: str = ""
    duration_seconds: float = 0.0
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class HealthStatus:
    db_connected: bool
    primary_weather_reachable: bool
    secondary_weather_reachable: bool
    air_quality_reachable: bool
    last_run_age_minutes: float | None
    last_run_status: str | None
