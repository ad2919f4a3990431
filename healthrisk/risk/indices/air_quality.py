"""Air Quality Risk Index: PM2.5, PM10 and NO2 concentrations."""

from healthrisk.models.air_quality import AirQualitySnapshot
from healthrisk.risk.normalize import clamp_score, normalize

# Safe-to-hazardous concentration ranges, ug/m3
PM25_RANGE = (0.0, 500.0)
PM10_RANGE = (0.0, 600.0)
NO2_RANGE = (0.0, 400.0)


def score(aq: AirQualitySnapshot) -> float:
    """Absent pollutants contribute nothing."""
    pm25_score = normalize(aq.pm25, *PM25_RANGE) if aq.pm25 is not None else 0.0
    pm10_score = normalize(aq.pm10, *PM10_RANGE) if aq.pm10 is not None else 0.0
    no2_score = normalize(aq.no2, *NO2_RANGE) if aq.no2 is not None else 0.0
    return clamp_score(pm25_score * 0.5 + pm10_score * 0.3 + no2_score * 0.2)
