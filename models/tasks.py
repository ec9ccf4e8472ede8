from models import db
from datetime import datetime
from sqlalchemy.orm import relationship

class Task(db.Model):
    __tablename__ = "tasks"

    id = db.Column(db.Integer, primary_key=True)
    mentor_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    due_date = db.Column(db.DateTime, nullable=True)
    points = db.Column(db.Integer, nullable=False, default=10)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    mentor = relationship("User")
    steps = relationship("TaskStep", back_populates="task",
                         cascade="all, delete-orphan", order_by="TaskStep.step_number")
    assignments = relationship("TaskAssignment", back_populates="task", cascade="all, delete-orphan")

    @property
    def required_step_ids(self):
        return {step.id for step in self.steps if step.is_required}

    def to_dict(self, include_steps=True):
        data = {
            "id": self.id,
            "mentor_id": self.mentor_id,
            "title": self.title,
            "description": self.description,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "points": self.points,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if include_steps:
            data["steps"] = [step.to_dict() for step in self.steps]
        return data

class TaskStep(db.Model):
    __tablename__ = "task_steps"

    id = db.Column(db.Integer, primary_key=True)
    task_id = db.Column(db.Integer, db.ForeignKey("tasks.id"), nullable=False)
    step_number = db.Column(db.Integer, nullable=False)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    submission_type = db.Column(db.String(20), nullable=False, default="text")  # 'text', 'link', 'file', ...
    is_required = db.Column(db.Boolean, nullable=False, default=True)

    task = relationship("Task", back_populates="steps")

    __table_args__ = (
        db.UniqueConstraint("task_id", "step_number", name="unique_task_step_number"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "step_number": self.step_number,
            "title": self.title,
            "description": self.description,
            "submission_type": self.submission_type,
            "is_required": self.is_required,
        }

class TaskAssignment(db.Model):
    __tablename__ = "task_assignments"

    id = db.Column(db.Integer, primary_key=True)
    task_id = db.Column(db.Integer, db.ForeignKey("tasks.id"), nullable=False)
    student_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    assigned_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    status = db.Column(db.String(20), nullable=False, default="assigned")  # 'assigned', 'in_progress', 'completed'
    assigned_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    started_at = db.Column(db.DateTime, nullable=True)
    completed_at = db.Column(db.DateTime, nullable=True)

    task = relationship("Task", back_populates="assignments")
    student = relationship("User", foreign_keys=[student_id])
    completions = relationship("TaskStepCompletion", back_populates="assignment", cascade="all, delete-orphan")

    __table_args__ = (
        db.UniqueConstraint("task_id", "student_id", name="unique_task_student"),
    )

    @property
    def completed_step_ids(self):
        return {completion.step_id for completion in self.completions if completion.is_completed}

    def progress(self):
        total = len(self.task.steps)
        completed = len(self.completed_step_ids)
        return {
            "total": total,
            "completed": completed,
            "percentage": round(completed / total * 100) if total else 0,
        }

    def to_dict(self, include_task=False):
        data = {
            "id": self.id,
            "task_id": self.task_id,
            "student_id": self.student_id,
            "student_name": self.student.display_name if self.student else None,
            "assigned_by": self.assigned_by,
            "status": self.status,
            "assigned_at": self.assigned_at.isoformat() if self.assigned_at else None,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "progress": self.progress(),
            "completions": [completion.to_dict() for completion in self.completions],
        }
        if include_task:
            data["task"] = self.task.to_dict()
        return data

class TaskStepCompletion(db.Model):
    __tablename__ = "task_step_completions"

    id = db.Column(db.Integer, primary_key=True)
    assignment_id = db.Column(db.Integer, db.ForeignKey("task_assignments.id"), nullable=False)
    step_id = db.Column(db.Integer, db.ForeignKey("task_steps.id"), nullable=False)
    text_content = db.Column(db.Text, nullable=True)
    link_url = db.Column(db.String(500), nullable=True)
    file_url = db.Column(db.String(500), nullable=True)
    is_completed = db.Column(db.Boolean, nullable=False, default=False)
    completed_at = db.Column(db.DateTime, nullable=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    assignment = relationship("TaskAssignment", back_populates="completions")
    step = relationship("TaskStep")

    __table_args__ = (
        db.UniqueConstraint("assignment_id", "step_id", name="unique_assignment_step"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "step_id": self.step_id,
            "text_content": self.text_content,
            "link_url": self.link_url,
            "file_url": self.file_url,
            "is_completed": self.is_completed,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }
