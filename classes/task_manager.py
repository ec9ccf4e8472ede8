"""Mentor tasks broken into steps, and the students working through them.

Assignment status moves ``assigned -> in_progress -> completed``. The first
completed step starts the task; submitting needs every required step and is
final, after which steps can no longer change.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError

from models import db, Task, TaskStep, TaskAssignment, TaskStepCompletion
from classes.mentorship_manager import MentorshipManager
from classes.validators import validate_required, validate_length
from utils.errors import TaskNotFound, AssignmentNotFound, NotFound, Forbidden, Conflict, ValidationFailed
from utils.helpers import sanitize_text
from utils.points_service import award_points

logger = logging.getLogger("services")

SUBMISSION_TYPES = ("text", "link", "file", "image", "video", "pdf", "multiple")
FILE_TYPES = ("file", "image", "video", "pdf")
DEFAULT_TASK_POINTS = 10


def _parse_due_date(value):
    if value in (None, ""):
        return None
    if not isinstance(value, str):
        raise ValidationFailed("Due date must be an ISO 8601 string")
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        raise ValidationFailed("Due date must be an ISO 8601 string")
    # Stored naive in UTC like every other timestamp
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed

def _validate_points(points):
    if points is None:
        return DEFAULT_TASK_POINTS
    if isinstance(points, bool) or not isinstance(points, int) or points < 0:
        raise ValidationFailed("Points must be a non-negative integer")
    return points

def _build_steps(steps):
    if not isinstance(steps, list) or not steps:
        raise ValidationFailed("A task needs at least one step")

    built = []
    for number, step in enumerate(steps, start=1):
        if not isinstance(step, dict):
            raise ValidationFailed(f"Step {number} is malformed")
        title = sanitize_text(step.get("title"))
        validate_required(f"Step {number} title", title)
        validate_length(f"Step {number} title", title, 255)

        submission_type = step.get("submission_type", "text")
        if submission_type not in SUBMISSION_TYPES:
            raise ValidationFailed(f"Step {number} submission type must be one of: {', '.join(SUBMISSION_TYPES)}")
        is_required = step.get("is_required", True)
        if not isinstance(is_required, bool):
            raise ValidationFailed(f"Step {number} is_required must be true or false")

        built.append(TaskStep(
            step_number=number,
            title=title,
            description=sanitize_text(step.get("description")),
            submission_type=submission_type,
            is_required=is_required,
        ))
    return built

def _is_url(value):
    return isinstance(value, str) and value.strip().lower().startswith(("http://", "https://"))

def _validate_submission(step, text_content, link_url, file_url):
    if step.submission_type == "text":
        if not isinstance(text_content, str) or not text_content.strip():
            raise ValidationFailed("This step needs a text answer")
    elif step.submission_type == "link":
        if not _is_url(link_url):
            raise ValidationFailed("This step needs an http(s) link")
    elif step.submission_type in FILE_TYPES:
        if not _is_url(file_url):
            raise ValidationFailed(f"This step needs an uploaded {step.submission_type}")
    elif not (_is_url(link_url) or _is_url(file_url)):
        raise ValidationFailed("This step needs a link or an uploaded file")


class TaskManager:
    # Mentor side

    @staticmethod
    def get_owned_task(mentor_id, task_id):
        task = db.session.get(Task, task_id)
        if not task:
            raise TaskNotFound()
        if task.mentor_id != mentor_id:
            raise Forbidden("You can only manage your own tasks")
        return task

    @staticmethod
    def create_task(mentor_id, data):
        """Create a task and hand it to every student the mentor currently has."""
        title = sanitize_text(data.get("title"))
        validate_required("Title", title)
        validate_length("Title", title, 255)

        task = Task(
            mentor_id=mentor_id,
            title=title,
            description=sanitize_text(data.get("description")),
            due_date=_parse_due_date(data.get("due_date")),
            points=_validate_points(data.get("points")),
            is_active=True,
        )
        task.steps = _build_steps(data.get("steps"))
        for student_id in MentorshipManager.student_ids_for(mentor_id):
            task.assignments.append(TaskAssignment(student_id=student_id, assigned_by=mentor_id))

        db.session.add(task)
        db.session.commit()
        logger.info("Mentor %s created task %s for %s students", mentor_id, task.id, len(task.assignments))
        return task

    @staticmethod
    def list_tasks(mentor_id):
        return Task.query.filter_by(mentor_id=mentor_id).order_by(Task.created_at.desc(), Task.id.desc()).all()

    @staticmethod
    def assign_students(mentor_id, task_id, student_ids):
        """Add mentees who joined after the task was created. Returns how many were added."""
        task = TaskManager.get_owned_task(mentor_id, task_id)
        if not isinstance(student_ids, list):
            raise ValidationFailed("studentIds must be a list")

        assigned = {assignment.student_id for assignment in task.assignments}
        added = 0
        for student_id in student_ids:
            if student_id in assigned:
                continue
            if not MentorshipManager.mentors_student(mentor_id, student_id):
                raise Forbidden("You can only assign tasks to your own students")
            task.assignments.append(TaskAssignment(student_id=student_id, assigned_by=mentor_id))
            assigned.add(student_id)
            added += 1

        db.session.commit()
        return added

    @staticmethod
    def set_active(mentor_id, task_id, is_active):
        if not isinstance(is_active, bool):
            raise ValidationFailed("is_active must be true or false")
        task = TaskManager.get_owned_task(mentor_id, task_id)
        task.is_active = is_active
        db.session.commit()
        return task

    @staticmethod
    def delete_task(mentor_id, task_id):
        task = TaskManager.get_owned_task(mentor_id, task_id)
        db.session.delete(task)
        db.session.commit()
        logger.info("Deleted task %s", task_id)

    @staticmethod
    def submissions(mentor_id, task_id):
        task = TaskManager.get_owned_task(mentor_id, task_id)
        assignments = sorted(task.assignments, key=lambda assignment: assignment.assigned_at)
        return task, assignments

    # Student side

    @staticmethod
    def my_tasks(student_id):
        return (
            TaskAssignment.query
            .join(Task, Task.id == TaskAssignment.task_id)
            .filter(TaskAssignment.student_id == student_id, Task.is_active.is_(True))
            .order_by(TaskAssignment.assigned_at.desc(), TaskAssignment.id.desc())
            .all()
        )

    @staticmethod
    def get_assignment(student_id, assignment_id, lock=False):
        query = TaskAssignment.query.filter_by(id=assignment_id, student_id=student_id)
        if lock:
            query = query.populate_existing().with_for_update()
        assignment = query.first()
        if not assignment:
            raise AssignmentNotFound()
        return assignment

    @staticmethod
    def _open_assignment(student_id, assignment_id):
        assignment = TaskManager.get_assignment(student_id, assignment_id, lock=True)
        if assignment.status == "completed":
            raise Conflict("This task has already been submitted")
        if not assignment.task.is_active:
            raise Conflict("This task is no longer active")
        return assignment

    @staticmethod
    def _step_of(assignment, step_id):
        for step in assignment.task.steps:
            if step.id == step_id:
                return step
        raise NotFound("Step not found")

    @staticmethod
    def complete_step(student_id, assignment_id, step_id, text_content=None, link_url=None, file_url=None):
        assignment = TaskManager._open_assignment(student_id, assignment_id)
        step = TaskManager._step_of(assignment, step_id)
        _validate_submission(step, text_content, link_url, file_url)

        now = datetime.utcnow()
        completion = TaskStepCompletion.query.filter_by(assignment_id=assignment.id, step_id=step.id).first()
        if completion is None:
            completion = TaskStepCompletion(step_id=step.id)
            assignment.completions.append(completion)
        completion.text_content = sanitize_text(text_content) if isinstance(text_content, str) else None
        completion.link_url = link_url.strip() if _is_url(link_url) else None
        completion.file_url = file_url.strip() if _is_url(file_url) else None
        if not completion.is_completed:
            completion.is_completed = True
            completion.completed_at = now

        if assignment.status == "assigned":
            assignment.status = "in_progress"
            assignment.started_at = now

        try:
            db.session.commit()
        except IntegrityError:
            # The same step was saved from another tab first
            db.session.rollback()
            raise Conflict("This step was just saved elsewhere, reload and try again")
        return completion

    @staticmethod
    def reopen_step(student_id, assignment_id, step_id):
        """Unmark a step; only possible until the task is submitted."""
        assignment = TaskManager._open_assignment(student_id, assignment_id)
        step = TaskManager._step_of(assignment, step_id)
        completion = TaskStepCompletion.query.filter_by(assignment_id=assignment.id, step_id=step.id).first()
        if completion is None or not completion.is_completed:
            raise NotFound("Step has not been completed")
        completion.is_completed = False
        completion.completed_at = None
        db.session.commit()
        return completion

    @staticmethod
    def submit(student_id, assignment_id):
        """Final submission. Returns (assignment, points_awarded)."""
        assignment = TaskManager._open_assignment(student_id, assignment_id)
        task = assignment.task

        missing = task.required_step_ids - assignment.completed_step_ids
        if missing:
            raise ValidationFailed("Complete all required steps before submitting")

        now = datetime.utcnow()
        assignment.status = "completed"
        assignment.completed_at = now
        if assignment.started_at is None:
            assignment.started_at = now

        points = award_points(student_id, "task_submission", reference_id=task.id, reference_type="task",
                              description=f"Completed task: {task.title}", points=task.points)
        db.session.commit()
        logger.info("Student %s submitted task %s for %s points", student_id, task.id, points)
        return assignment, points
