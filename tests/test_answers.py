from datetime import datetime, timedelta

import pytest

from models import db, SessionAnswer, SessionParticipant, LeaderboardEntry
from classes.answer_manager import AnswerManager
from classes.session_controller import SessionController
from utils.errors import (AlreadyAnswered, AnswerWindowClosed, ParticipantNotFound, QuestionNotFound,
                          SessionFinished, ValidationFailed)


def _participant(user):
    return SessionParticipant.query.filter_by(user_id=user.id).one()


def test_correct_answer_at_half_time(student, started_session):
    result = AnswerManager.submit_answer(student.id, started_session.id, 0, 1, 10000)

    assert result == {
        "success": True,
        "isCorrect": True,
        "pointsEarned": 1250,
        "newTotalScore": 1250,
        "newStreak": 1,
        "correctAnswer": 1,
    }
    participant = _participant(student)
    assert participant.correct_answers == 1
    assert participant.questions_answered == 1
    assert participant.longest_streak == 1

    entry = LeaderboardEntry.query.filter_by(user_id=student.id).one()
    assert entry.total_points == 1250
    assert entry.quiz_points == 1250
    assert entry.correct_answers == 1
    assert entry.total_attempts == 1


def test_incorrect_answer_only_counts_an_attempt(student, started_session):
    db.session.add(LeaderboardEntry(user_id=student.id, total_points=300, quiz_points=300,
                                    correct_answers=2, total_attempts=4))
    participant = _participant(student)
    participant.current_streak = 3
    db.session.commit()

    result = AnswerManager.submit_answer(student.id, started_session.id, 0, 3, 10000)

    assert result["isCorrect"] is False
    assert result["pointsEarned"] == 0
    assert result["newStreak"] == 0

    entry = LeaderboardEntry.query.filter_by(user_id=student.id).one()
    assert entry.total_attempts == 5
    assert entry.total_points == 300
    assert entry.correct_answers == 2
    assert _participant(student).longest_streak == 0


def test_unanswered_question_is_recorded_as_incorrect(student, started_session):
    result = AnswerManager.submit_answer(student.id, started_session.id, 0, None, 20000)

    answer = SessionAnswer.query.one()
    assert result["isCorrect"] is False
    assert answer.selected_option_id is None
    assert answer.question_id == "q_0"


def test_second_submission_for_the_same_question_is_rejected(student, started_session):
    AnswerManager.submit_answer(student.id, started_session.id, 0, 1, 4000)

    with pytest.raises(AlreadyAnswered):
        AnswerManager.submit_answer(student.id, started_session.id, 0, 2, 5000)

    assert SessionAnswer.query.count() == 1
    assert _participant(student).questions_answered == 1


def test_streak_carries_across_questions(mentor, student, started_session):
    started_session.settings = {**started_session.settings, "streakMultiplier": True, "speedBonus": False}
    db.session.commit()

    AnswerManager.submit_answer(student.id, started_session.id, 0, 1, 1000)
    SessionController.advance_question(mentor.id, started_session.id)
    result = AnswerManager.submit_answer(student.id, started_session.id, 1, 0, 1000)

    assert result["newStreak"] == 2
    assert result["pointsEarned"] == 1100
    assert result["newTotalScore"] == 2100


def test_late_answer_is_rejected(app, student, started_session):
    started_session.question_started_at = datetime.utcnow() - timedelta(
        milliseconds=started_session.question_timer_ms + app.config["LATE_ANSWER_GRACE_MS"] + 1000)
    db.session.commit()

    with pytest.raises(AnswerWindowClosed):
        AnswerManager.submit_answer(student.id, started_session.id, 0, 1, 1000)
    assert SessionAnswer.query.count() == 0


def test_only_the_current_question_accepts_answers(mentor, student, started_session):
    SessionController.advance_question(mentor.id, started_session.id)
    with pytest.raises(AnswerWindowClosed):
        AnswerManager.submit_answer(student.id, started_session.id, 0, 1, 1000)


def test_answers_after_the_session_ends_are_rejected(mentor, student, started_session):
    SessionController.end_session(mentor.id, started_session.id)
    with pytest.raises(SessionFinished):
        AnswerManager.submit_answer(student.id, started_session.id, 0, 1, 1000)


def test_non_participant_cannot_answer(other_student, started_session):
    with pytest.raises(ParticipantNotFound):
        AnswerManager.submit_answer(other_student.id, started_session.id, 0, 1, 1000)


def test_question_out_of_range(student, started_session):
    with pytest.raises(QuestionNotFound):
        AnswerManager.submit_answer(student.id, started_session.id, 9, 1, 1000)


@pytest.mark.parametrize("option, answer_time", [("1", 1000), (True, 1000), (1, -5), (1, "fast"), (1, float("inf")), (1, float("nan"))])
def test_malformed_submissions(student, started_session, option, answer_time):
    with pytest.raises(ValidationFailed):
        AnswerManager.submit_answer(student.id, started_session.id, 0, option, answer_time)


def test_student_view_hides_the_answer_until_answered(student, started_session):
    view = AnswerManager.get_question_for_student(student.id, started_session.id)
    assert view["hasAnswered"] is False
    assert "correctOptionIndex" not in view["question"]
    assert view["question"]["questionText"] == "2 + 2?"
    assert 0 <= view["timeRemainingMs"] <= 20000

    AnswerManager.submit_answer(student.id, started_session.id, 0, 1, 1000)

    view = AnswerManager.get_question_for_student(student.id, started_session.id)
    assert view["hasAnswered"] is True
    assert view["question"]["correctOptionIndex"] == 1
    assert view["answer"]["points_earned"] == 1475
