"""Points for a single live-quiz answer.

Pure functions only: the submission handler reads the participant's streak,
calls ``score_answer`` and persists whatever comes back.
"""
import math
from collections import namedtuple

DEFAULT_POINTS_PER_QUESTION = 1000
DEFAULT_QUESTION_TIMER_SECONDS = 20
DEFAULT_MAX_SPEED_BONUS = 500
MAX_STREAK_MULTIPLIER = 2.0
STREAK_STEP = 0.1

ScoreResult = namedtuple("ScoreResult", ["points_earned", "new_streak", "speed_bonus", "multiplier"])


def _setting(settings, key, default):
    value = settings.get(key)
    return default if value is None else value


def question_timer_ms(settings):
    """Only a missing timer falls back to the default; zero stays zero."""
    return int(_setting(settings or {}, "questionTimer", DEFAULT_QUESTION_TIMER_SECONDS)) * 1000


def speed_bonus(answer_time_ms, question_timer_ms, max_speed_bonus):
    """Bonus shrinks linearly with elapsed time; answers at or after the limit get none."""
    if question_timer_ms <= 0:
        return 0
    speed_ratio = max(0, (question_timer_ms - answer_time_ms) / question_timer_ms)
    return math.floor(speed_ratio * max_speed_bonus)


def streak_multiplier(new_streak):
    """1.0 for the first correct answer, +0.1 per extra answer in a row, capped at 2.0."""
    return min(MAX_STREAK_MULTIPLIER, 1.0 + (new_streak - 1) * STREAK_STEP)


def score_answer(is_correct, answer_time_ms, settings, previous_streak=0):
    settings = settings or {}
    answer_time_ms = max(0, int(answer_time_ms or 0))

    if not is_correct:
        return ScoreResult(points_earned=0, new_streak=0, speed_bonus=0, multiplier=1.0)

    points = _setting(settings, "pointsPerQuestion", DEFAULT_POINTS_PER_QUESTION)
    new_streak = (previous_streak or 0) + 1
    bonus = 0
    multiplier = 1.0

    if settings.get("speedBonus"):
        timer_ms = question_timer_ms(settings)
        bonus = speed_bonus(answer_time_ms, timer_ms,
                            _setting(settings, "maxSpeedBonus", DEFAULT_MAX_SPEED_BONUS))
        points += bonus

    # The multiplier applies to the base points plus the speed bonus
    if settings.get("streakMultiplier"):
        multiplier = streak_multiplier(new_streak)
        points = math.floor(points * multiplier)

    return ScoreResult(points_earned=int(points), new_streak=new_streak,
                       speed_bonus=bonus, multiplier=multiplier)
