"""Range normalization onto the 0-100 score scale."""

SCORE_MIN = 0.0
SCORE_MAX = 100.0


def normalize(value: float, lo: float, hi: float, inverted: bool = False) -> float:
    """Map ``value`` linearly from [lo, hi] onto [0, 100], clamping outside.

    With ``inverted`` the scale runs the other way, for measures where a
    lower reading means higher risk.
    """
    if hi <= lo:
        raise ValueError(f"invalid range: hi ({hi}) must exceed lo ({lo})")
    ratio = min(max((value - lo) / (hi - lo), 0.0), 1.0)
    if inverted:
        ratio = 1.0 - ratio
    return ratio * SCORE_MAX


def clamp_score(score: float) -> float:
    return min(max(score, SCORE_MIN), SCORE_MAX)
