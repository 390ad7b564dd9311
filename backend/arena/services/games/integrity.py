"""Static plausibility checks for submitted game sessions.

The wave/score bounds are an anti-cheat *heuristic*: a session that passes is
merely plausible, not proven legitimate. The multipliers are policy constants
and may need tuning as the game's scoring evolves.
"""

from arena.errors import IntegrityViolation, RangeError

SCORE_RANGE = (0, 1_000_000)
WAVE_RANGE = (0, 1_000)
DURATION_RANGE = (0, 86_400)  # 24 hours

# A wave is worth between 50 and 500 points, bounds inclusive
MIN_POINTS_PER_WAVE = 50
MAX_POINTS_PER_WAVE = 500


def score_bounds(wave_reached: int):
    return wave_reached * MIN_POINTS_PER_WAVE, wave_reached * MAX_POINTS_PER_WAVE


def validate_session(score: int, wave_reached: int, duration: int) -> None:
    """Raise if the triple is out of range or implausible; return None otherwise.

    Fields are checked in order score, wave_reached, duration and the first
    out-of-range one raises ``RangeError``. A score outside
    ``[50 * wave_reached, 500 * wave_reached]`` raises ``IntegrityViolation``.
    """
    for field, value, (low, high) in (
        ('score', score, SCORE_RANGE),
        ('waveReached', wave_reached, WAVE_RANGE),
        ('duration', duration, DURATION_RANGE),
    ):
        if value < low or value > high:
            raise RangeError(field, low, high)

    min_score, max_score = score_bounds(wave_reached)
    if score < min_score or score > max_score:
        raise IntegrityViolation()
