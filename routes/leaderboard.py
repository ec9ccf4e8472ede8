from flask import Blueprint, jsonify, request

from utils.leaderboard_service import global_leaderboard, user_stats
from utils.responses import handle_errors
from utils.utils import login_required, current_user_id

# Platform-wide leaderboard blueprint
leaderboard_bp = Blueprint("leaderboard", __name__)

MAX_LEADERBOARD_LIMIT = 100

@leaderboard_bp.route("", methods=["GET"])
@login_required
@handle_errors("Failed to load leaderboard")
def get_global_leaderboard():
    limit = request.args.get("limit", 50, type=int)
    limit = max(1, min(limit, MAX_LEADERBOARD_LIMIT))
    return jsonify({"leaderboard": global_leaderboard(limit)}), 200

# Caller's own totals and rank tier
@leaderboard_bp.route("/me", methods=["GET"])
@login_required
@handle_errors("Failed to load stats")
def get_my_stats():
    return jsonify({"stats": user_stats(current_user_id())}), 200
