"""Live session setup: creation, lobby, joining and the start signal."""
import logging
from datetime import datetime

from flask import current_app
from sqlalchemy.exc import IntegrityError

from models import db, Quiz, QuizSession, SessionParticipant, SessionEvent, User
from classes.validators import validate_session_settings
from utils.codes import generate_unique_code, SESSION_CODE_LENGTH
from utils.errors import QuizNotFound, SessionNotFound, SessionFinished, ValidationFailed, Conflict

logger = logging.getLogger("services")


def log_session_event(session_id, event_type, user_id=None, event_data=None):
    db.session.add(SessionEvent(
        session_id=session_id,
        event_type=event_type,
        user_id=user_id,
        event_data=event_data,
    ))

def _session_code_taken(code):
    return QuizSession.query.filter_by(session_code=code).first() is not None


class SessionManager:
    @staticmethod
    def get_session(session_id):
        session = db.session.get(QuizSession, session_id)
        if not session:
            raise SessionNotFound()
        return session

    @staticmethod
    def get_hosted_session(host_id, session_id, lock=False):
        """With ``lock`` the row is re-read under SELECT ... FOR UPDATE so state checks see the committed status."""
        if lock:
            session = (
                QuizSession.query
                .filter_by(id=session_id)
                .populate_existing()
                .with_for_update()
                .first()
            )
            if not session:
                raise SessionNotFound()
        else:
            session = SessionManager.get_session(session_id)
        if session.host_id != host_id:
            raise SessionNotFound("Session not found or unauthorized")
        return session

    @staticmethod
    def create_live_session(host_id, quiz_id, settings=None):
        quiz = Quiz.query.filter_by(id=quiz_id, created_by=host_id).first()
        if not quiz:
            raise QuizNotFound()
        if not quiz.questions:
            raise ValidationFailed("Quiz has no questions")

        final_settings = {**current_app.config["DEFAULT_SESSION_SETTINGS"], **validate_session_settings(settings)}
        session = QuizSession(
            quiz_id=quiz.id,
            host_id=host_id,
            session_code=generate_unique_code(SESSION_CODE_LENGTH, _session_code_taken),
            status="lobby",
            settings=final_settings,
            current_question_index=0,
        )
        db.session.add(session)
        db.session.flush()
        log_session_event(session.id, "session_created", host_id,
                          {"quiz_id": quiz.id, "quiz_title": quiz.title})
        db.session.commit()

        logger.info("Created live session %s (%s) for quiz %s", session.id, session.session_code, quiz.id)
        return session

    @staticmethod
    def get_session_by_code(session_code):
        session = QuizSession.query.filter_by(session_code=(session_code or "").strip().upper()).first()
        if not session:
            raise SessionNotFound("Session not found. Please check the code.")
        return session

    @staticmethod
    def join_session(user_id, session_code):
        """Returns (session, participant, already_joined)."""
        user = db.session.get(User, user_id)
        session = SessionManager.get_session_by_code(session_code)

        if session.status == "finished":
            raise SessionFinished()
        if session.status != "lobby" and not (session.settings or {}).get("allowLateJoin"):
            raise Conflict("This session has already started and late join is not allowed")

        existing = SessionParticipant.query.filter_by(session_id=session.id, user_id=user_id).first()
        if existing:
            return session, existing, True

        participant = SessionParticipant(
            session_id=session.id,
            user_id=user_id,
            nickname=user.display_name if user else "Anonymous",
            status="waiting" if session.status == "lobby" else "active",
        )
        db.session.add(participant)
        try:
            db.session.flush()
        except IntegrityError:
            # Same user joined from another tab in the meantime
            db.session.rollback()
            existing = SessionParticipant.query.filter_by(session_id=session.id, user_id=user_id).first()
            return session, existing, True

        log_session_event(session.id, "participant_joined", user_id, {"nickname": participant.nickname})
        db.session.commit()
        logger.info("User %s joined session %s", user_id, session.id)
        return session, participant, False

    @staticmethod
    def start_session(host_id, session_id):
        session = SessionManager.get_hosted_session(host_id, session_id, lock=True)
        if session.status == "finished":
            raise SessionFinished()
        if session.status == "active":
            raise Conflict("Session already started")
        if not session.quiz.questions:
            raise ValidationFailed("Quiz has no questions")

        now = datetime.utcnow()
        session.status = "active"
        session.started_at = now
        session.current_question_index = 0
        session.question_started_at = now

        waiting = SessionParticipant.query.filter_by(session_id=session.id, status="waiting").all()
        for participant in waiting:
            participant.status = "active"

        log_session_event(session.id, "session_started", host_id, {"question_index": 0})
        db.session.commit()
        logger.info("Started session %s", session.id)
        return session

    @staticmethod
    def participant_count(session_id):
        SessionManager.get_session(session_id)
        return SessionParticipant.query.filter_by(session_id=session_id).count()

    @staticmethod
    def get_participant(session_id, user_id):
        return SessionParticipant.query.filter_by(session_id=session_id, user_id=user_id).first()
