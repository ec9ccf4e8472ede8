import logging

from flask import Blueprint, jsonify, request

from classes.mentorship_manager import MentorshipManager
from classes.validators import validate_role
from models import db, User
from utils.errors import NotFound, ValidationFailed
from utils.points_service import list_points_config, update_points_config
from utils.responses import handle_errors
from utils.utils import login_required, role_required, current_user_id

logger = logging.getLogger("routes")

# Platform administration blueprint
admin_bp = Blueprint("admin", __name__)

@admin_bp.route("/users", methods=["GET"])
@login_required
@role_required("admin")
@handle_errors("Failed to load users")
def list_users():
    role = request.args.get("role")
    query = User.query
    if role:
        query = query.filter_by(role=role)
    users = query.order_by(User.date_created.desc()).all()
    return jsonify({"users": [user.to_dict() for user in users]}), 200

# Promote or demote an account; self-registration only creates students
@admin_bp.route("/users/<int:user_id>/role", methods=["PUT"])
@login_required
@role_required("admin")
@handle_errors("Failed to update role")
def update_user_role(user_id):
    data = request.get_json() or {}
    role = data.get("role")
    validate_role(role)
    if user_id == current_user_id():
        raise ValidationFailed("You cannot change your own role")

    user = db.session.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    user.role = role
    db.session.commit()
    logger.info("User %s role set to %s", user_id, role)
    return jsonify({"message": "Role updated", "user": user.to_dict()}), 200

# Mentor assignments
# --------------------------------------------------------------------------------
@admin_bp.route("/mentor-assignments", methods=["GET"])
@login_required
@role_required("admin")
@handle_errors("Failed to load mentor assignments")
def list_mentor_assignments():
    assignments = MentorshipManager.list_assignments()
    return jsonify({"assignments": [assignment.to_dict() for assignment in assignments]}), 200

@admin_bp.route("/mentor-assignments", methods=["POST"])
@login_required
@role_required("admin")
@handle_errors("Failed to assign mentor")
def assign_mentor():
    data = request.get_json() or {}
    assignment = MentorshipManager.assign(data.get("mentorId"), data.get("studentId"))
    return jsonify({"message": "Mentor assigned", "assignment": assignment.to_dict()}), 200

@admin_bp.route("/mentor-assignments/<int:student_id>", methods=["DELETE"])
@login_required
@role_required("admin")
@handle_errors("Failed to unassign mentor")
def unassign_mentor(student_id):
    MentorshipManager.unassign(student_id)
    return jsonify({"message": "Mentor unassigned"}), 200

# Points configuration
# --------------------------------------------------------------------------------
@admin_bp.route("/points-config", methods=["GET"])
@login_required
@role_required("admin")
@handle_errors("Failed to load points configuration")
def get_points_config():
    configs = list_points_config()
    db.session.commit()
    return jsonify({"config": [config.to_dict() for config in configs]}), 200

@admin_bp.route("/points-config/<action_type>", methods=["PUT"])
@login_required
@role_required("admin")
@handle_errors("Failed to update points configuration")
def put_points_config(action_type):
    data = request.get_json() or {}
    config = update_points_config(action_type, points=data.get("points"), is_active=data.get("is_active"))
    db.session.commit()
    return jsonify({"message": "Points configuration updated", "config": config.to_dict()}), 200
