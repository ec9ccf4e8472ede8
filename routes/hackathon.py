from flask import Blueprint, jsonify, request

from classes.team_manager import TeamManager
from utils.responses import handle_errors
from utils.utils import login_required, role_required, current_user_id

# Hackathon teams blueprint
hackathon_bp = Blueprint("hackathon", __name__)

@hackathon_bp.route("/teams/me", methods=["GET"])
@login_required
@handle_errors("Failed to load team")
def get_my_team():
    team = TeamManager.get_my_team(current_user_id())
    return jsonify({"team": team.to_dict() if team else None}), 200

# Create a team; the creator becomes its leader
@hackathon_bp.route("/teams", methods=["POST"])
@login_required
@handle_errors("Failed to create team")
def create_team():
    data = request.get_json() or {}
    team = TeamManager.create_team(current_user_id(), data.get("teamName"))
    return jsonify({"message": "Team created", "team": team.to_dict()}), 201

@hackathon_bp.route("/teams/join", methods=["POST"])
@login_required
@handle_errors("Failed to join team")
def join_team():
    data = request.get_json() or {}
    team = TeamManager.join_team(current_user_id(), data.get("teamCode"))
    return jsonify({"message": "Joined team", "team": team.to_dict()}), 200

@hackathon_bp.route("/teams/leave", methods=["POST"])
@login_required
@handle_errors("Failed to leave team")
def leave_team():
    disbanded = TeamManager.leave_team(current_user_id())
    message = "Team disbanded" if disbanded else "Left team"
    return jsonify({"message": message, "disbanded": disbanded}), 200

# Mentor overview of every team
@hackathon_bp.route("/teams", methods=["GET"])
@login_required
@role_required("mentor", "admin")
@handle_errors("Failed to load teams")
def list_teams():
    teams = TeamManager.list_teams()
    return jsonify({"teams": [team.to_dict() for team in teams]}), 200

@hackathon_bp.route("/teams/<int:team_id>/theme", methods=["PUT"])
@login_required
@role_required("mentor", "admin")
@handle_errors("Failed to update theme")
def set_team_theme(team_id):
    data = request.get_json() or {}
    team = TeamManager.set_theme(team_id, data.get("theme"))
    return jsonify({"message": "Theme updated", "team": team.to_dict()}), 200
