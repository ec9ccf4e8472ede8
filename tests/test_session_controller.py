from datetime import datetime, timedelta

import pytest

from models import db, QuizSession, SessionParticipant, LeaderboardEntry, SessionEvent
from classes.answer_manager import AnswerManager
from classes.session_controller import SessionController
from classes.session_manager import SessionManager
from utils.errors import Conflict, SessionFinished, SessionNotFound, QuestionNotFound, ValidationFailed
from tests.conftest import make_user


def test_new_session_starts_in_lobby_with_merged_settings(live_session):
    assert live_session.status == "lobby"
    assert len(live_session.session_code) == 6
    assert live_session.settings["speedBonus"] is True
    assert live_session.settings["streakMultiplier"] is False
    assert live_session.settings["showLeaderboard"] is True


def test_start_promotes_waiting_participants(mentor, student, live_session):
    _, participant, already_joined = SessionManager.join_session(student.id, live_session.session_code)
    assert already_joined is False
    assert participant.status == "waiting"

    SessionManager.start_session(mentor.id, live_session.id)
    assert live_session.status == "active"
    assert live_session.question_started_at is not None
    assert participant.status == "active"


def test_joining_twice_returns_the_existing_participant(student, live_session):
    _, first, _ = SessionManager.join_session(student.id, live_session.session_code)
    _, second, already_joined = SessionManager.join_session(student.id, live_session.session_code.lower())
    assert already_joined is True
    assert second.id == first.id
    assert SessionManager.participant_count(live_session.id) == 1


def test_late_join_requires_the_setting(mentor, other_student, started_session):
    with pytest.raises(Conflict):
        SessionManager.join_session(other_student.id, started_session.session_code)

    started_session.settings = {**started_session.settings, "allowLateJoin": True}
    db.session.commit()
    _, participant, _ = SessionManager.join_session(other_student.id, started_session.session_code)
    assert participant.status == "active"


def test_unknown_session_code(student, live_session):
    with pytest.raises(SessionNotFound):
        SessionManager.join_session(student.id, "ZZZZZZ")


def test_only_the_host_controls_the_session(student, started_session):
    with pytest.raises(SessionNotFound):
        SessionController.advance_question(student.id, started_session.id)


def test_advance_moves_forward_and_restamps_the_question(mentor, started_session):
    started_session.question_started_at = datetime.utcnow() - timedelta(minutes=5)
    db.session.commit()
    previous_stamp = started_session.question_started_at

    result = SessionController.advance_question(mentor.id, started_session.id)

    assert result == {"success": True, "nextIndex": 1}
    assert started_session.current_question_index == 1
    assert started_session.question_started_at > previous_stamp


def test_advance_before_start_is_rejected(mentor, live_session):
    with pytest.raises(Conflict):
        SessionController.advance_question(mentor.id, live_session.id)


def test_advancing_past_the_last_question_finishes(mentor, started_session):
    SessionController.advance_question(mentor.id, started_session.id)
    SessionController.advance_question(mentor.id, started_session.id)
    assert started_session.current_question_index == 2

    result = SessionController.advance_question(mentor.id, started_session.id)

    assert result == {"finished": True}
    assert "nextIndex" not in result
    assert started_session.status == "finished"
    assert started_session.finished_at is not None
    assert started_session.current_question_index == 2


def test_finished_session_never_changes_again(mentor, started_session):
    SessionController.end_session(mentor.id, started_session.id)
    finished_at = started_session.finished_at

    assert SessionController.advance_question(mentor.id, started_session.id) == {"finished": True}
    assert SessionController.end_session(mentor.id, started_session.id) == {"success": True}

    session = db.session.get(QuizSession, started_session.id)
    assert session.status == "finished"
    assert session.current_question_index == 0
    assert session.finished_at == finished_at
    with pytest.raises(SessionFinished):
        SessionManager.start_session(mentor.id, started_session.id)


def test_repeated_finish_counts_completion_once(mentor, student, started_session):
    AnswerManager.submit_answer(student.id, started_session.id, 0, 1, 1000)

    SessionController.finish(started_session, mentor.id)
    SessionController.finish(started_session, mentor.id)

    entry = LeaderboardEntry.query.filter_by(user_id=student.id).one()
    assert entry.quizzes_completed == 1
    participant = SessionParticipant.query.filter_by(user_id=student.id).one()
    assert participant.status == "finished"


def test_leaderboard_breaks_ties_by_join_time(mentor, live_session):
    base = datetime(2024, 1, 1, 12, 0, 0)
    scores = [("ana", 50), ("ben", 80), ("cai", 80), ("dev", 30)]
    ids = {}
    for offset, (name, score) in enumerate(scores):
        user = make_user(name)
        participant = SessionParticipant(session_id=live_session.id, user_id=user.id, nickname=name,
                                         total_score=score, joined_at=base + timedelta(seconds=offset))
        db.session.add(participant)
        db.session.flush()
        ids[name] = participant.id
    db.session.commit()

    leaderboard = SessionController.get_leaderboard(live_session.id)

    assert [row["nickname"] for row in leaderboard] == ["ben", "cai", "ana", "dev"]
    assert [row["rank"] for row in leaderboard] == [1, 2, 3, 4]


def test_answer_stats_buckets(mentor, student, other_student, started_session):
    started_session.settings = {**started_session.settings, "allowLateJoin": True}
    db.session.commit()
    SessionManager.join_session(other_student.id, started_session.session_code)

    AnswerManager.submit_answer(student.id, started_session.id, 0, 1, 2000)
    AnswerManager.submit_answer(other_student.id, started_session.id, 0, None, 20000)

    stats = SessionController.get_answer_stats(started_session.id, 0)

    assert stats == {"0": 0, "1": 1, "2": 0, "3": 0, "total": 2, "correctCount": 1}


def test_answer_stats_for_missing_question(started_session):
    with pytest.raises(QuestionNotFound):
        SessionController.get_answer_stats(started_session.id, 7)


def test_lifecycle_is_audited(mentor, started_session):
    SessionController.end_session(mentor.id, started_session.id)
    event_types = [event.event_type for event in
                   SessionEvent.query.filter_by(session_id=started_session.id).order_by(SessionEvent.id)]
    assert event_types == ["session_created", "participant_joined", "session_started", "session_finished"]


@pytest.mark.parametrize("settings", [
    {"questionTimer": "abc"},
    {"questionTimer": 0},
    {"questionTimer": 12.5},
    {"pointsPerQuestion": "1000"},
    {"maxSpeedBonus": -1},
    {"speedBonus": "yes"},
    {"allowLateJoin": 1},
    {"colour": "blue"},
    ["questionTimer", 20],
])
def test_invalid_session_settings_are_rejected(mentor, quiz, settings):
    with pytest.raises(ValidationFailed):
        SessionManager.create_live_session(mentor.id, quiz.id, settings)
    assert QuizSession.query.count() == 0


def test_valid_overrides_replace_the_defaults(mentor, quiz):
    session = SessionManager.create_live_session(mentor.id, quiz.id, {"questionTimer": 45, "maxSpeedBonus": 0,
                                                                      "allowLateJoin": True})
    assert session.question_timer_ms == 45000
    assert session.settings["maxSpeedBonus"] == 0
    assert session.settings["allowLateJoin"] is True
    assert session.settings["pointsPerQuestion"] == 1000


def test_finish_reads_participant_state_from_the_store(mentor, student, started_session):
    # Another worker already finished the session; this process still holds the old rows
    QuizSession.query.filter_by(id=started_session.id).update(
        {"status": "finished", "finished_at": datetime.utcnow()}, synchronize_session=False)
    SessionParticipant.query.filter_by(session_id=started_session.id).update(
        {"status": "finished"}, synchronize_session=False)
    db.session.commit()

    assert SessionController.end_session(mentor.id, started_session.id) == {"success": True}
    assert SessionController.advance_question(mentor.id, started_session.id) == {"finished": True}

    assert LeaderboardEntry.query.filter_by(user_id=student.id).first() is None
    finished_events = SessionEvent.query.filter_by(session_id=started_session.id,
                                                   event_type="session_finished").count()
    assert finished_events == 0


def test_finish_skips_participants_finished_elsewhere(mentor, student, other_student, started_session):
    started_session.settings = {**started_session.settings, "allowLateJoin": True}
    db.session.commit()
    SessionManager.join_session(other_student.id, started_session.session_code)
    AnswerManager.submit_answer(other_student.id, started_session.id, 0, 1, 1000)
    SessionParticipant.query.filter_by(user_id=student.id).update({"status": "finished"},
                                                                  synchronize_session=False)
    db.session.commit()

    SessionController.end_session(mentor.id, started_session.id)

    assert LeaderboardEntry.query.filter_by(user_id=student.id).first() is None
    assert LeaderboardEntry.query.filter_by(user_id=other_student.id).one().quizzes_completed == 1
