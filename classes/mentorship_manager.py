import logging

from models import db, MentorAssignment, User
from utils.errors import NotFound, ValidationFailed

logger = logging.getLogger("services")


def _user_with_role(user_id, role):
    user = db.session.get(User, user_id)
    if not user or user.role != role:
        raise NotFound(f"{role.capitalize()} not found")
    return user


class MentorshipManager:
    @staticmethod
    def assign(mentor_id, student_id):
        """A student has one mentor; assigning again moves them to the new one."""
        if mentor_id is None or student_id is None:
            raise ValidationFailed("mentorId and studentId are required")
        _user_with_role(mentor_id, "mentor")
        _user_with_role(student_id, "student")

        assignment = MentorAssignment.query.filter_by(student_id=student_id).first()
        if assignment:
            assignment.mentor_id = mentor_id
            assignment.status = "active"
        else:
            assignment = MentorAssignment(mentor_id=mentor_id, student_id=student_id, status="active")
            db.session.add(assignment)

        db.session.commit()
        logger.info("Student %s assigned to mentor %s", student_id, mentor_id)
        return assignment

    @staticmethod
    def unassign(student_id):
        assignment = MentorAssignment.query.filter_by(student_id=student_id).first()
        if not assignment:
            raise NotFound("Student has no mentor")
        db.session.delete(assignment)
        db.session.commit()
        logger.info("Student %s unassigned from mentor %s", student_id, assignment.mentor_id)

    @staticmethod
    def list_assignments():
        return MentorAssignment.query.order_by(MentorAssignment.assigned_at.desc()).all()

    @staticmethod
    def student_ids_for(mentor_id):
        rows = MentorAssignment.query.filter_by(mentor_id=mentor_id, status="active").all()
        return [row.student_id for row in rows]

    @staticmethod
    def mentors_student(mentor_id, student_id):
        return MentorAssignment.query.filter_by(
            mentor_id=mentor_id, student_id=student_id, status="active").first() is not None
