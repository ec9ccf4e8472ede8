import pytest

from models import QuizSession
from utils.scoring import score_answer, speed_bonus, streak_multiplier, question_timer_ms

PLAIN = {"pointsPerQuestion": 1000, "speedBonus": False, "streakMultiplier": False}
BONUS = {"pointsPerQuestion": 1000, "speedBonus": True, "maxSpeedBonus": 500, "questionTimer": 20,
         "streakMultiplier": False}


@pytest.mark.parametrize("settings", [PLAIN, BONUS, {**BONUS, "streakMultiplier": True}, {}])
@pytest.mark.parametrize("answer_time_ms", [0, 5000, 25000])
def test_incorrect_answer_scores_nothing_and_resets_streak(settings, answer_time_ms):
    result = score_answer(False, answer_time_ms, settings, previous_streak=4)
    assert result.points_earned == 0
    assert result.new_streak == 0


def test_plain_correct_answer_earns_exactly_points_per_question():
    assert score_answer(True, 3000, PLAIN).points_earned == 1000
    assert score_answer(True, 3000, {**PLAIN, "pointsPerQuestion": 250}).points_earned == 250


def test_half_time_answer_earns_half_the_speed_bonus():
    result = score_answer(True, 10000, BONUS, previous_streak=0)
    assert result.speed_bonus == 250
    assert result.points_earned == 1250
    assert result.new_streak == 1


@pytest.mark.parametrize("answer_time_ms", [20000, 20001, 60000])
def test_no_speed_bonus_at_or_after_the_time_limit(answer_time_ms):
    result = score_answer(True, answer_time_ms, BONUS)
    assert result.speed_bonus == 0
    assert result.points_earned == 1000


def test_speed_bonus_is_floored():
    assert speed_bonus(1, 20000, 500) == 499


def test_bonus_is_added_before_the_multiplier():
    settings = {**BONUS, "streakMultiplier": True}
    # third correct answer in a row: (1000 + 500) * 1.2
    result = score_answer(True, 0, settings, previous_streak=2)
    assert result.new_streak == 3
    assert result.points_earned == 1800


def test_first_correct_answer_has_no_multiplier():
    assert streak_multiplier(1) == 1.0


@pytest.mark.parametrize("new_streak", [11, 12, 50])
def test_streak_multiplier_caps_at_two(new_streak):
    assert streak_multiplier(new_streak) == 2.0


def test_long_streak_at_most_doubles_points():
    settings = {**PLAIN, "streakMultiplier": True}
    assert score_answer(True, 0, settings, previous_streak=30).points_earned == 2000


def test_missing_settings_fall_back_to_defaults():
    result = score_answer(True, 0, {"pointsPerQuestion": None, "speedBonus": True, "questionTimer": None})
    assert result.points_earned == 1500


@pytest.mark.parametrize("settings, expected", [({}, 20000), ({"questionTimer": None}, 20000),
                                                ({"questionTimer": 0}, 0), ({"questionTimer": 45}, 45000)])
def test_question_timer_defaults_only_when_missing(settings, expected):
    assert question_timer_ms(settings) == expected
    assert QuizSession(settings=settings).question_timer_ms == expected
