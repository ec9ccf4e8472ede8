from flask import Blueprint, jsonify, request

from classes.mentorship_manager import MentorshipManager
from models import db, User
from utils.errors import Forbidden, NotFound
from utils.points_service import adjust_points_manual, points_history
from utils.responses import handle_errors
from utils.utils import login_required, role_required, current_user_id, current_user_role

# Points history and manual adjustments blueprint
points_bp = Blueprint("points", __name__)

MAX_HISTORY_LIMIT = 200

@points_bp.route("/history", methods=["GET"])
@login_required
@handle_errors("Failed to load points history")
def get_my_history():
    limit = max(1, min(request.args.get("limit", 100, type=int), MAX_HISTORY_LIMIT))
    rows = points_history(current_user_id(), limit)
    return jsonify({"history": [row.to_dict() for row in rows]}), 200

# Mentors adjust their own students; admins anyone
@points_bp.route("/users/<int:user_id>/adjust", methods=["POST"])
@login_required
@role_required("mentor", "admin")
@handle_errors("Failed to adjust points")
def adjust_points(user_id):
    data = request.get_json() or {}
    actor_id = current_user_id()

    if not db.session.get(User, user_id):
        raise NotFound("User not found")
    if current_user_role() == "mentor" and not MentorshipManager.mentors_student(actor_id, user_id):
        raise Forbidden("You can only adjust points for your own students")

    points = adjust_points_manual(
        user_id,
        data.get("points"),
        reference_id=actor_id,
        reference_type=f"{current_user_role()}_adjustment",
        description=data.get("description"),
    )
    db.session.commit()
    return jsonify({"message": "Points adjusted", "points": points}), 200

@points_bp.route("/users/<int:user_id>/history", methods=["GET"])
@login_required
@role_required("mentor", "admin")
@handle_errors("Failed to load points history")
def get_user_history(user_id):
    if current_user_role() == "mentor" and not MentorshipManager.mentors_student(current_user_id(), user_id):
        raise Forbidden("You can only view points for your own students")
    rows = points_history(user_id)
    return jsonify({"history": [row.to_dict() for row in rows]}), 200
