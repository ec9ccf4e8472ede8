import pytest

from app import create_app
from models import db, User, Quiz
from classes.session_manager import SessionManager
from utils.tokens import get_jwt_token

QUESTIONS = [
    {"id": "q_0", "question": "2 + 2?", "options": ["3", "4", "5", "6"], "correctOptionIndex": 1},
    {"id": "q_1", "question": "Capital of France?", "options": ["Paris", "Rome", "Madrid"], "correctOptionIndex": 0},
    {"id": "q_2", "question": "Largest planet?", "options": ["Mars", "Venus", "Jupiter", "Earth"], "correctOptionIndex": 2},
]

SCORING_SETTINGS = {
    "questionTimer": 20,
    "pointsPerQuestion": 1000,
    "speedBonus": True,
    "maxSpeedBonus": 500,
    "streakMultiplier": False,
}


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def make_user(username, role="student", full_name=None):
    user = User(username=username, email=f"{username}@example.com", role=role, full_name=full_name)
    user.set_password("password123")
    db.session.add(user)
    db.session.commit()
    return user


def auth_headers(user):
    token = get_jwt_token({"user_id": user.id, "username_or_email": user.username, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def mentor(app):
    return make_user("mentor", role="mentor", full_name="Maya Mentor")


@pytest.fixture
def student(app):
    return make_user("student", full_name="Sam Student")


@pytest.fixture
def other_student(app):
    return make_user("other", full_name="Olu Other")


@pytest.fixture
def quiz(mentor):
    quiz = Quiz(title="General knowledge", questions=QUESTIONS, status="published",
                quiz_code="ABCD1234", created_by=mentor.id)
    db.session.add(quiz)
    db.session.commit()
    return quiz


@pytest.fixture
def live_session(mentor, quiz):
    return SessionManager.create_live_session(mentor.id, quiz.id, SCORING_SETTINGS)


@pytest.fixture
def started_session(mentor, student, live_session):
    """A running session with ``student`` already joined."""
    SessionManager.join_session(student.id, live_session.session_code)
    SessionManager.start_session(mentor.id, live_session.id)
    return live_session
