from models import db
from datetime import datetime

class SessionParticipant(db.Model):
    __tablename__ = "session_participants"

    id = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(db.Integer, db.ForeignKey("quiz_sessions.id"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    nickname = db.Column(db.String(100), nullable=True)
    status = db.Column(db.String(20), nullable=False, default="waiting")  # 'waiting', 'active', 'finished'

    total_score = db.Column(db.Integer, nullable=False, default=0)
    correct_answers = db.Column(db.Integer, nullable=False, default=0)
    questions_answered = db.Column(db.Integer, nullable=False, default=0)
    current_streak = db.Column(db.Integer, nullable=False, default=0)
    longest_streak = db.Column(db.Integer, nullable=False, default=0)

    joined_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    session = db.relationship("QuizSession", back_populates="participants")
    user = db.relationship("User")
    answers = db.relationship("SessionAnswer", back_populates="participant",
                              cascade="all, delete-orphan", lazy=True)

    __table_args__ = (
        db.UniqueConstraint("session_id", "user_id", name="unique_session_participant"),
    )

    def __repr__(self):
        return f"<SessionParticipant {self.nickname} session={self.session_id}>"

    def to_dict(self):
        return {
            "id": self.id,
            "session_id": self.session_id,
            "user_id": self.user_id,
            "nickname": self.nickname,
            "status": self.status,
            "total_score": self.total_score,
            "correct_answers": self.correct_answers,
            "questions_answered": self.questions_answered,
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "joined_at": self.joined_at.isoformat() if self.joined_at else None,
        }
