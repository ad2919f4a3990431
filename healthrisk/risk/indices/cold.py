"""Cold Stress Index: min temperature, wind chill and snow cover."""

from healthrisk.risk.normalize import clamp_score, normalize

COLD_RANGE_C = (-30.0, 15.0)
SNOW_RANGE_CM = (0.0, 50.0)
WIND_CHILL_FACTOR = 0.5


def wind_chill(temperature_min: float, wind_speed: float) -> float:
    return temperature_min - wind_speed * WIND_CHILL_FACTOR


def score(temperature_min: float, wind_chill_c: float, snow_cover_cm: float = 0.0) -> float:
    min_temp_score = normalize(temperature_min, *COLD_RANGE_C, inverted=True)
    wind_chill_score = normalize(wind_chill_c, *COLD_RANGE_C, inverted=True)
    snow_score = normalize(snow_cover_cm, *SNOW_RANGE_CM)
    return clamp_score(min_temp_score * 0.5 + wind_chill_score * 0.3 + snow_score * 0.2)
