from models import db
from datetime import datetime
from utils import scoring

class QuizSession(db.Model):
    __tablename__ = "quiz_sessions"

    id = db.Column(db.Integer, primary_key=True)
    quiz_id = db.Column(db.Integer, db.ForeignKey("quizzes.id"), nullable=False)
    host_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    session_code = db.Column(db.String(6), nullable=False, unique=True)
    status = db.Column(db.String(20), nullable=False, default="lobby")  # 'lobby', 'active', 'finished'
    current_question_index = db.Column(db.Integer, nullable=False, default=0)
    question_started_at = db.Column(db.DateTime, nullable=True)
    settings = db.Column(db.JSON, nullable=False, default=dict)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    started_at = db.Column(db.DateTime, nullable=True)
    finished_at = db.Column(db.DateTime, nullable=True)

    quiz = db.relationship("Quiz", back_populates="sessions")
    host = db.relationship("User")
    participants = db.relationship("SessionParticipant", back_populates="session",
                                   cascade="all, delete-orphan", lazy=True)
    events = db.relationship("SessionEvent", cascade="all, delete-orphan", lazy=True)

    @property
    def is_finished(self):
        return self.status == "finished"

    @property
    def question_timer_ms(self):
        return scoring.question_timer_ms(self.settings)

    def __repr__(self):
        return f"<QuizSession {self.session_code} ({self.status})>"

    def to_dict(self):
        return {
            "id": self.id,
            "quiz_id": self.quiz_id,
            "host_id": self.host_id,
            "session_code": self.session_code,
            "status": self.status,
            "current_question_index": self.current_question_index,
            "question_started_at": self.question_started_at.isoformat() if self.question_started_at else None,
            "settings": self.settings,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }
