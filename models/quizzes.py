from models import db
from datetime import datetime
from utils.helpers import normalize_question

class Quiz(db.Model):
    __tablename__ = "quizzes"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    # [{"id", "question", "options": [...], "correctOptionIndex"}]
    questions = db.Column(db.JSON, nullable=False, default=list)
    status = db.Column(db.String(20), nullable=False, default="draft")  # 'draft', 'published'
    quiz_code = db.Column(db.String(8), nullable=True, unique=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    created_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    author = db.relationship("User", back_populates="quizzes")

    sessions = db.relationship("QuizSession", back_populates="quiz", cascade="all, delete-orphan")

    @property
    def total_questions(self):
        return len(self.questions or [])

    def question_at(self, index):
        """Return the normalized question at ``index`` or None when out of range."""
        questions = self.questions or []
        if index is None or index < 0 or index >= len(questions):
            return None
        return normalize_question(questions[index], index)

    def __repr__(self):
        return f"<Quiz {self.title}>"

    def to_dict(self, include_answers=True):
        questions = [normalize_question(q, i) for i, q in enumerate(self.questions or [])]
        if not include_answers:
            for question in questions:
                question.pop("correctOptionIndex", None)
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "quiz_code": self.quiz_code,
            "created_by": self.created_by,
            "total_questions": self.total_questions,
            "questions": questions,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
