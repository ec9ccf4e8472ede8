from models import db
from datetime import datetime

class PointsConfig(db.Model):
    """Points granted per action type; inactive actions grant nothing."""
    __tablename__ = "points_config"

    id = db.Column(db.Integer, primary_key=True)
    action_type = db.Column(db.String(50), nullable=False, unique=True)
    points = db.Column(db.Integer, nullable=False, default=0)
    description = db.Column(db.String(255), nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "action_type": self.action_type,
            "points": self.points,
            "description": self.description,
            "is_active": self.is_active,
        }

class PointsHistory(db.Model):
    __tablename__ = "points_history"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    action_type = db.Column(db.String(50), nullable=False)
    points = db.Column(db.Integer, nullable=False)
    reference_id = db.Column(db.String(64), nullable=True)
    reference_type = db.Column(db.String(50), nullable=True)
    description = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "action_type": self.action_type,
            "points": self.points,
            "reference_id": self.reference_id,
            "reference_type": self.reference_type,
            "description": self.description,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
