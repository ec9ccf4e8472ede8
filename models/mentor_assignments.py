from models import db
from datetime import datetime
from sqlalchemy.orm import relationship

class MentorAssignment(db.Model):
    """Links a student to the mentor who sets their tasks."""
    __tablename__ = "mentor_assignments"

    id = db.Column(db.Integer, primary_key=True)
    mentor_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    # One mentor per student
    student_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, unique=True)
    status = db.Column(db.String(20), nullable=False, default="active")  # 'active', 'inactive'
    assigned_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    mentor = relationship("User", foreign_keys=[mentor_id])
    student = relationship("User", foreign_keys=[student_id])

    def to_dict(self):
        return {
            "id": self.id,
            "mentor_id": self.mentor_id,
            "mentor_name": self.mentor.display_name if self.mentor else None,
            "student_id": self.student_id,
            "student_name": self.student.display_name if self.student else None,
            "student_email": self.student.email if self.student else None,
            "status": self.status,
            "assigned_at": self.assigned_at.isoformat() if self.assigned_at else None,
        }
