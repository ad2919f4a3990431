"""Heat Stress Index: max temperature, humidity and temperature anomaly."""

from healthrisk.risk.normalize import clamp_score, normalize

TEMPERATURE_RANGE_C = (0.0, 45.0)
HUMIDITY_RANGE_PCT = (0.0, 100.0)
ANOMALY_RANGE_Z = (-3.0, 3.0)


def score(temperature_max: float, humidity: float, anomaly_z: float) -> float:
    temp_score = normalize(temperature_max, *TEMPERATURE_RANGE_C)
    humidity_score = normalize(humidity, *HUMIDITY_RANGE_PCT)
    anomaly_score = normalize(anomaly_z, *ANOMALY_RANGE_Z)
    return clamp_score(temp_score * 0.5 + humidity_score * 0.3 + anomaly_score * 0.2)
