from models import db
from sqlalchemy.orm import validates
from classes.validators import validate_length, validate_role
from werkzeug.security import generate_password_hash, check_password_hash


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(50), nullable=False, unique=True)
    email = db.Column(db.String(100), nullable=False, unique=True)
    password_hash = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(100), nullable=True)
    role = db.Column(db.String(20), nullable=False, default="student")  # 'student', 'mentor', 'admin'
    date_created = db.Column(db.DateTime, default=db.func.now(), nullable=False)

    quizzes = db.relationship("Quiz", back_populates="author", cascade="all, delete")
    leaderboard_entry = db.relationship("LeaderboardEntry", uselist=False, back_populates="user")

    def set_password(self, password):
        """Hashes the password before storing."""
        self.password_hash = generate_password_hash(password, method="pbkdf2:sha256")

    def check_password(self, password):
        """Checks if a given password matches the stored hash."""
        return check_password_hash(self.password_hash, password)

    @validates("username")
    def _validate_username(self, key, value):
        validate_length("Username", value, 50)
        return value

    @validates("role")
    def _validate_role(self, key, value):
        validate_role(value)
        return value

    @property
    def display_name(self):
        if self.full_name:
            return self.full_name
        if self.email:
            return self.email.split("@")[0]
        return "Anonymous"

    @property
    def leaderboard_points(self):
        """Read through to the aggregate so there is a single source of truth."""
        return self.leaderboard_entry.total_points if self.leaderboard_entry else 0

    def __repr__(self):
        return f"<User {self.username} ({self.role})>"

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "full_name": self.full_name,
            "role": self.role,
            "leaderboard_points": self.leaderboard_points,
            "date_created": self.date_created.isoformat() if self.date_created else None,
            }
