import math


def clamp_score(score: float) -> float:
    return max(0.0, min(100.0, score))


def round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; scores round .5 upwards.
    return int(math.floor(value + 0.5))
