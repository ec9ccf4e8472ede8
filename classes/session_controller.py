"""Mentor-side control of a running live quiz.

State machine: ``lobby -> active -> finished``. While active the question
pointer only moves forward; ``finished`` is terminal and every operation on a
finished session leaves it untouched.
"""
import logging
from datetime import datetime

from models import db, SessionParticipant, SessionAnswer
from classes.session_manager import SessionManager, log_session_event
from utils.errors import Conflict, QuestionNotFound
from utils.helpers import parse_option_index
from utils.leaderboard_service import record_quiz_completed

logger = logging.getLogger("services")

MIN_OPTION_BUCKETS = 4


class SessionController:
    @staticmethod
    def get_current_question(host_id, session_id):
        session = SessionManager.get_hosted_session(host_id, session_id)
        quiz = session.quiz
        return {
            "question": quiz.question_at(session.current_question_index),
            "index": session.current_question_index,
            "total": quiz.total_questions,
            "session": session.to_dict(),
        }

    @staticmethod
    def advance_question(host_id, session_id):
        session = SessionManager.get_hosted_session(host_id, session_id, lock=True)

        if session.is_finished:
            return {"finished": True}
        if session.status != "active":
            raise Conflict("Session has not started yet")

        next_index = session.current_question_index + 1
        if next_index >= session.quiz.total_questions:
            SessionController.finish(session, host_id)
            return {"finished": True}

        session.current_question_index = next_index
        session.question_started_at = datetime.utcnow()
        log_session_event(session.id, "question_started", host_id, {"question_index": next_index})
        db.session.commit()

        logger.info("Session %s advanced to question %s", session.id, next_index)
        return {"success": True, "nextIndex": next_index}

    @staticmethod
    def end_session(host_id, session_id):
        """Manual early stop, valid from any position."""
        session = SessionManager.get_hosted_session(host_id, session_id, lock=True)
        if not session.is_finished:
            SessionController.finish(session, host_id)
        return {"success": True}

    @staticmethod
    def finish(session, user_id=None):
        """
        Close the session and do the completion bookkeeping.
        The caller holds the session row lock. Participants are read from the
        store, so anyone already marked finished is skipped and a retried
        finish never counts the same quiz twice.
        """
        now = datetime.utcnow()
        session.status = "finished"
        session.finished_at = now

        pending = (
            SessionParticipant.query
            .filter(SessionParticipant.session_id == session.id,
                    SessionParticipant.status != "finished")
            .populate_existing()
            .with_for_update()
            .all()
        )
        completed = 0
        for participant in pending:
            record_quiz_completed(participant.user_id)
            participant.status = "finished"
            completed += 1

        log_session_event(session.id, "session_finished", user_id, {"participants": completed})
        db.session.commit()
        logger.info("Session %s finished, %s participants completed", session.id, completed)

    @staticmethod
    def get_leaderboard(session_id):
        SessionManager.get_session(session_id)
        participants = (
            SessionParticipant.query
            .filter_by(session_id=session_id)
            .order_by(SessionParticipant.total_score.desc(),
                      SessionParticipant.joined_at.asc(),
                      SessionParticipant.id.asc())
            .all()
        )
        return [
            {**participant.to_dict(), "rank": position}
            for position, participant in enumerate(participants, start=1)
        ]

    @staticmethod
    def get_answer_stats(session_id, question_index):
        session = SessionManager.get_session(session_id)
        question = session.quiz.question_at(question_index)
        if question is None:
            raise QuestionNotFound()

        answers = SessionAnswer.query.filter_by(session_id=session_id, question_index=question_index).all()

        bucket_count = max(MIN_OPTION_BUCKETS, len(question["options"]))
        stats = {str(index): 0 for index in range(bucket_count)}
        stats["total"] = len(answers)
        stats["correctCount"] = 0

        for answer in answers:
            option_index = parse_option_index(answer.selected_option_id)
            # Unanswered or unparseable selections still count toward the total
            if option_index is not None and 0 <= option_index < bucket_count:
                stats[str(option_index)] += 1
            if answer.is_correct:
                stats["correctCount"] += 1

        return stats
