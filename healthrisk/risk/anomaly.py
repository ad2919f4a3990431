"""Temperature anomaly as a z-score against a recent history window."""

from collections.abc import Sequence

import numpy as np

MIN_HISTORY = 3


def temperature_anomaly(current: float, history: Sequence[float]) -> float:
    """Standardized deviation of ``current`` from ``history``.

    Uses the population standard deviation. Returns 0.0 when there are fewer
    than three history points or the history has no spread.
    """
    if len(history) < MIN_HISTORY:
        return 0.0
    values = np.asarray(history, dtype=float)
    std = float(values.std())
    if std == 0.0:
        return 0.0
    return float((current - values.mean()) / std)
