import pytest

from models import db, Quiz, QuizSession, SessionParticipant
from classes.quiz_manager import QuizManager
from classes.session_controller import SessionController
from classes.session_manager import SessionManager
from utils.errors import Conflict, Forbidden, QuizNotFound, ValidationFailed
from tests.conftest import QUESTIONS


def test_saving_a_draft_twice_updates_it(mentor):
    first = QuizManager.save_draft(mentor.id, "Space", "v1", QUESTIONS[:1])
    second = QuizManager.save_draft(mentor.id, "Space", "v2", QUESTIONS)

    assert first.id == second.id
    assert Quiz.query.count() == 1
    assert second.description == "v2"
    assert second.total_questions == 3


def test_question_shape_is_validated(mentor):
    bad = [{"question": "Pick one", "options": ["only"], "correctOptionIndex": 0}]
    with pytest.raises(ValidationFailed):
        QuizManager.save_draft(mentor.id, "Broken", None, bad)

    bad = [{"question": "Pick one", "options": ["a", "b"], "correctOptionIndex": 2}]
    with pytest.raises(ValidationFailed):
        QuizManager.save_draft(mentor.id, "Broken", None, bad)


def test_publish_assigns_a_new_code_each_time(mentor):
    quiz = QuizManager.save_draft(mentor.id, "Space", None, QUESTIONS)
    first_code = QuizManager.publish(mentor.id, quiz.id).quiz_code
    second_code = QuizManager.publish(mentor.id, quiz.id).quiz_code

    assert quiz.status == "published"
    assert len(first_code) == 8
    assert first_code != second_code
    assert QuizManager.get_by_code(second_code.lower()).id == quiz.id


def test_empty_quiz_cannot_be_published(mentor):
    quiz = QuizManager.save_draft(mentor.id, "Empty", None, [])
    with pytest.raises(ValidationFailed):
        QuizManager.publish(mentor.id, quiz.id)


def test_drafts_are_not_found_by_code(mentor):
    with pytest.raises(QuizNotFound):
        QuizManager.get_by_code("NOPE1234")


def test_quizzes_belong_to_their_author(mentor, student):
    quiz = QuizManager.save_draft(mentor.id, "Space", None, QUESTIONS)
    with pytest.raises(Forbidden):
        QuizManager.update_quiz(student.id, quiz.id, {"title": "Mine now"})


def test_update_checks_the_title_length(mentor, quiz):
    with pytest.raises(ValidationFailed):
        QuizManager.update_quiz(mentor.id, quiz.id, {"title": "x" * 256})
    assert db.session.get(Quiz, quiz.id).title == "General knowledge"


def test_questions_are_frozen_while_a_session_runs(mentor, started_session):
    quiz_id = started_session.quiz_id
    with pytest.raises(Conflict):
        QuizManager.update_quiz(mentor.id, quiz_id, {"questions": QUESTIONS[:1]})

    # Metadata edits stay allowed
    quiz = QuizManager.update_quiz(mentor.id, quiz_id, {"title": "Renamed"})
    assert quiz.title == "Renamed"
    assert quiz.total_questions == 3

    SessionController.end_session(mentor.id, started_session.id)
    quiz = QuizManager.update_quiz(mentor.id, quiz_id, {"questions": QUESTIONS[:1]})
    assert quiz.total_questions == 1


def test_quiz_with_an_open_session_cannot_be_deleted(mentor, student, live_session):
    quiz_id = live_session.quiz_id
    SessionManager.join_session(student.id, live_session.session_code)
    with pytest.raises(Conflict):
        QuizManager.delete_quiz(mentor.id, quiz_id)

    SessionController.end_session(mentor.id, live_session.id)
    QuizManager.delete_quiz(mentor.id, quiz_id)

    assert db.session.get(Quiz, quiz_id) is None
    assert QuizSession.query.count() == 0
    assert SessionParticipant.query.count() == 0


def test_draft_with_an_open_session_keeps_its_questions(mentor):
    draft = QuizManager.save_draft(mentor.id, "Warmup", None, QUESTIONS)
    SessionManager.create_live_session(mentor.id, draft.id)

    with pytest.raises(Conflict):
        QuizManager.save_draft(mentor.id, "Warmup", None, QUESTIONS[:1])
    assert db.session.get(Quiz, draft.id).total_questions == 3
