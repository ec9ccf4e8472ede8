from models import db
from datetime import datetime

class SessionAnswer(db.Model):
    __tablename__ = "session_answers"

    id = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(db.Integer, db.ForeignKey("quiz_sessions.id"), nullable=False)
    participant_id = db.Column(db.Integer, db.ForeignKey("session_participants.id"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    question_id = db.Column(db.String(64), nullable=False)
    question_index = db.Column(db.Integer, nullable=False)
    # Stored as text; statistics parse it back into an option bucket
    selected_option_id = db.Column(db.String(16), nullable=True)
    is_correct = db.Column(db.Boolean, nullable=False, default=False)
    time_taken_ms = db.Column(db.Integer, nullable=False, default=0)
    points_earned = db.Column(db.Integer, nullable=False, default=0)
    answered_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    participant = db.relationship("SessionParticipant", back_populates="answers")

    __table_args__ = (
        db.UniqueConstraint("participant_id", "question_index", name="unique_participant_question"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "session_id": self.session_id,
            "participant_id": self.participant_id,
            "user_id": self.user_id,
            "question_id": self.question_id,
            "question_index": self.question_index,
            "selected_option_id": self.selected_option_id,
            "is_correct": self.is_correct,
            "time_taken_ms": self.time_taken_ms,
            "points_earned": self.points_earned,
            "answered_at": self.answered_at.isoformat() if self.answered_at else None,
        }
