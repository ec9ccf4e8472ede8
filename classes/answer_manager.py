"""Student-side answer submission for live quizzes."""
import logging
import math
from datetime import datetime

from flask import current_app
from sqlalchemy.exc import IntegrityError

from models import db, SessionParticipant, SessionAnswer
from classes.session_manager import SessionManager, log_session_event
from utils.errors import (ParticipantNotFound, QuestionNotFound, SessionFinished, AlreadyAnswered,
                          AnswerWindowClosed, Conflict, ValidationFailed)
from utils.leaderboard_service import record_answer
from utils.scoring import score_answer

logger = logging.getLogger("services")


def _elapsed_ms(started_at, now):
    if started_at is None:
        return 0
    return int((now - started_at).total_seconds() * 1000)

def _validate_option(selected_option_index):
    if selected_option_index is None:
        return None
    if isinstance(selected_option_index, bool) or not isinstance(selected_option_index, int):
        raise ValidationFailed("Selected option must be an integer or null")
    return selected_option_index

def _validate_answer_time(answer_time_ms):
    if (isinstance(answer_time_ms, bool) or not isinstance(answer_time_ms, (int, float))
            or not math.isfinite(answer_time_ms) or answer_time_ms < 0):
        raise ValidationFailed("Answer time must be a non-negative number of milliseconds")
    return int(answer_time_ms)


class AnswerManager:
    @staticmethod
    def _open_question(session, question_index, now):
        """Reject answers for anything but the current, still running question."""
        if session.status == "finished":
            raise SessionFinished()
        if session.status != "active":
            raise Conflict("Session has not started yet")
        if question_index != session.current_question_index:
            raise AnswerWindowClosed("This question is no longer open")

        limit_ms = session.question_timer_ms + current_app.config.get("LATE_ANSWER_GRACE_MS", 0)
        if _elapsed_ms(session.question_started_at, now) > limit_ms:
            raise AnswerWindowClosed()

    @staticmethod
    def _record(session, participant, user_id, question, question_index,
                selected_option_index, answer_time_ms, is_correct, result, now):
        """Answer row, participant totals and leaderboard aggregate, all in the caller's transaction."""
        db.session.add(SessionAnswer(
            session_id=session.id,
            participant_id=participant.id,
            user_id=user_id,
            question_id=question["id"],
            question_index=question_index,
            selected_option_id=str(selected_option_index) if selected_option_index is not None else None,
            is_correct=is_correct,
            time_taken_ms=answer_time_ms,
            points_earned=result.points_earned,
            answered_at=now,
        ))

        participant.total_score = participant.total_score + result.points_earned
        participant.current_streak = result.new_streak
        participant.longest_streak = max(participant.longest_streak or 0, result.new_streak)
        participant.correct_answers = participant.correct_answers + (1 if is_correct else 0)
        participant.questions_answered = participant.questions_answered + 1

        record_answer(user_id, is_correct, result.points_earned)
        log_session_event(session.id, "answer_submitted", user_id,
                          {"question_index": question_index, "time_taken_ms": answer_time_ms})

    @staticmethod
    def submit_answer(user_id, session_id, question_index, selected_option_index, answer_time_ms):
        selected_option_index = _validate_option(selected_option_index)
        answer_time_ms = _validate_answer_time(answer_time_ms)
        now = datetime.utcnow()

        # Row lock so two submissions from the same participant serialize on MySQL
        participant = (
            SessionParticipant.query
            .filter_by(session_id=session_id, user_id=user_id)
            .with_for_update()
            .first()
        )
        if not participant:
            raise ParticipantNotFound()

        session = SessionManager.get_session(session_id)
        question = session.quiz.question_at(question_index)
        if question is None:
            raise QuestionNotFound()

        already_answered = SessionAnswer.query.filter_by(
            participant_id=participant.id, question_index=question_index
        ).first()
        if already_answered:
            raise AlreadyAnswered()

        AnswerManager._open_question(session, question_index, now)

        is_correct = selected_option_index is not None and selected_option_index == question["correctOptionIndex"]
        result = score_answer(is_correct, answer_time_ms, session.settings, participant.current_streak)

        try:
            AnswerManager._record(session, participant, user_id, question, question_index,
                                  selected_option_index, answer_time_ms, is_correct, result, now)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            # The unique (participant, question) constraint caught a concurrent duplicate
            if SessionAnswer.query.filter_by(participant_id=participant.id, question_index=question_index).first():
                raise AlreadyAnswered()
            raise

        logger.info("Participant %s answered question %s of session %s: correct=%s points=%s",
                    participant.id, question_index, session.id, is_correct, result.points_earned)

        return {
            "success": True,
            "isCorrect": is_correct,
            "pointsEarned": result.points_earned,
            "newTotalScore": participant.total_score,
            "newStreak": result.new_streak,
            "correctAnswer": question["correctOptionIndex"],
        }

    @staticmethod
    def get_question_for_student(user_id, session_id):
        session = SessionManager.get_session(session_id)
        participant = SessionManager.get_participant(session_id, user_id)
        if not participant:
            raise ParticipantNotFound()

        index = session.current_question_index
        answer = SessionAnswer.query.filter_by(participant_id=participant.id, question_index=index).first()
        question = session.quiz.question_at(index)

        # The correct option stays hidden until the student has answered
        if question is not None and not answer and not session.is_finished:
            question.pop("correctOptionIndex", None)

        time_remaining_ms = None
        if session.status == "active" and session.question_started_at is not None:
            elapsed = _elapsed_ms(session.question_started_at, datetime.utcnow())
            time_remaining_ms = max(0, session.question_timer_ms - elapsed)

        return {
            "session": session.to_dict(),
            "participant": participant.to_dict(),
            "question": question,
            "questionIndex": index,
            "totalQuestions": session.quiz.total_questions,
            "hasAnswered": answer is not None,
            "answer": answer.to_dict() if answer else None,
            "timeRemainingMs": time_remaining_ms,
        }
