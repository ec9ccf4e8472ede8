from models import db
from datetime import datetime

class LeaderboardEntry(db.Model):
    """Cross-session running totals for one user."""
    __tablename__ = "leaderboard"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, unique=True)
    total_points = db.Column(db.Integer, nullable=False, default=0)
    quiz_points = db.Column(db.Integer, nullable=False, default=0)
    assignment_points = db.Column(db.Integer, nullable=False, default=0)
    bonus_points = db.Column(db.Integer, nullable=False, default=0)
    quizzes_completed = db.Column(db.Integer, nullable=False, default=0)
    correct_answers = db.Column(db.Integer, nullable=False, default=0)
    total_attempts = db.Column(db.Integer, nullable=False, default=0)
    last_activity = db.Column(db.DateTime, default=datetime.utcnow, nullable=True)

    user = db.relationship("User", back_populates="leaderboard_entry")

    @property
    def accuracy(self):
        if not self.total_attempts:
            return 0.0
        return round(self.correct_answers / self.total_attempts * 100, 1)

    def to_dict(self):
        return {
            "user_id": self.user_id,
            "total_points": self.total_points,
            "quiz_points": self.quiz_points,
            "assignment_points": self.assignment_points,
            "bonus_points": self.bonus_points,
            "quizzes_completed": self.quizzes_completed,
            "correct_answers": self.correct_answers,
            "total_attempts": self.total_attempts,
            "accuracy": self.accuracy,
            "last_activity": self.last_activity.isoformat() if self.last_activity else None,
        }
