import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError

from models import db, Quiz, QuizSession
from classes.validators import validate_required, validate_length, validate_questions
from utils.codes import generate_unique_code, QUIZ_CODE_LENGTH
from utils.errors import QuizNotFound, Forbidden, ValidationFailed, Conflict
from utils.helpers import to_stored_question, sanitize_text

logger = logging.getLogger("services")

CODE_COMMIT_RETRIES = 3


def _quiz_code_taken(code):
    return Quiz.query.filter_by(quiz_code=code).first() is not None

def _has_unfinished_session(quiz_id):
    return QuizSession.query.filter(
        QuizSession.quiz_id == quiz_id,
        QuizSession.status != "finished",
    ).first() is not None


class QuizManager:
    @staticmethod
    def get_owned_quiz(user_id, quiz_id):
        quiz = db.session.get(Quiz, quiz_id)
        if not quiz:
            raise QuizNotFound()
        if quiz.created_by != user_id:
            raise Forbidden("You can only manage your own quizzes")
        return quiz

    @staticmethod
    def list_quizzes(user_id):
        return Quiz.query.filter_by(created_by=user_id).order_by(Quiz.updated_at.desc()).all()

    @staticmethod
    def prepare_questions(questions):
        questions = questions or []
        validate_questions(questions)
        return [to_stored_question(question, index) for index, question in enumerate(questions)]

    @staticmethod
    def save_draft(user_id, title, description=None, questions=None):
        """Create a draft, or update the caller's draft that already has this title."""
        validate_required("Title", title)
        title = sanitize_text(title)
        validate_length("Title", title, 255)
        stored_questions = QuizManager.prepare_questions(questions)

        quiz = Quiz.query.filter_by(title=title, created_by=user_id, status="draft").first()
        if quiz:
            if _has_unfinished_session(quiz.id):
                raise Conflict("Questions cannot change while a live session of this quiz is running")
            quiz.description = sanitize_text(description)
            quiz.questions = stored_questions
            quiz.updated_at = datetime.utcnow()
        else:
            quiz = Quiz(
                title=title,
                description=sanitize_text(description),
                questions=stored_questions,
                status="draft",
                created_by=user_id,
            )
            db.session.add(quiz)

        db.session.commit()
        logger.info("Saved draft quiz %s", quiz.id)
        return quiz

    @staticmethod
    def update_quiz(user_id, quiz_id, data):
        quiz = QuizManager.get_owned_quiz(user_id, quiz_id)

        if "title" in data:
            validate_required("Title", data.get("title"))
            title = sanitize_text(data["title"])
            validate_length("Title", title, 255)
            quiz.title = title
        if "description" in data:
            quiz.description = sanitize_text(data.get("description"))
        if "questions" in data:
            if _has_unfinished_session(quiz.id):
                raise Conflict("Questions cannot change while a live session of this quiz is running")
            quiz.questions = QuizManager.prepare_questions(data.get("questions"))
        quiz.updated_at = datetime.utcnow()

        db.session.commit()
        return quiz

    @staticmethod
    def delete_quiz(user_id, quiz_id):
        quiz = QuizManager.get_owned_quiz(user_id, quiz_id)
        if _has_unfinished_session(quiz.id):
            raise Conflict("End the live sessions of this quiz before deleting it")
        db.session.delete(quiz)
        db.session.commit()

    @staticmethod
    def publish(user_id, quiz_id):
        """Publish (or republish) a quiz under a fresh join code."""
        quiz = QuizManager.get_owned_quiz(user_id, quiz_id)
        if not quiz.questions:
            raise ValidationFailed("Quiz has no questions")

        for attempt in range(1, CODE_COMMIT_RETRIES + 1):
            quiz.quiz_code = generate_unique_code(QUIZ_CODE_LENGTH, _quiz_code_taken)
            quiz.status = "published"
            quiz.updated_at = datetime.utcnow()
            try:
                db.session.commit()
                break
            except IntegrityError:
                # Another publish claimed the code between the check and the write
                db.session.rollback()
                logger.warning("Quiz code collision on attempt %s, regenerating", attempt)
                if attempt == CODE_COMMIT_RETRIES:
                    raise
                quiz = QuizManager.get_owned_quiz(user_id, quiz_id)

        logger.info("Published quiz %s with code %s", quiz.id, quiz.quiz_code)
        return quiz

    @staticmethod
    def get_by_code(code):
        quiz = Quiz.query.filter_by(quiz_code=(code or "").strip().upper(), status="published").first()
        if not quiz:
            raise QuizNotFound()
        return quiz
