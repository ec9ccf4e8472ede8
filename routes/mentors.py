from flask import Blueprint, jsonify, request

from classes.session_controller import SessionController
from classes.session_manager import SessionManager
from utils.responses import handle_errors
from utils.utils import login_required, role_required, current_user_id

# Mentors' blueprint: live session hosting
mentor_bp = Blueprint("mentor", __name__)

#__________________________________________________________________________________________ * Lobby *__________________________________________________

# Create a live session for one of the mentor's quizzes
@mentor_bp.route("/quizzes/<int:quiz_id>/sessions", methods=["POST"])
@login_required
@role_required("mentor", "admin")
@handle_errors("Failed to create session")
def create_live_session(quiz_id):
    data = request.get_json(silent=True) or {}
    session = SessionManager.create_live_session(current_user_id(), quiz_id, data.get("settings"))
    return jsonify({"success": True, "session": session.to_dict(), "sessionCode": session.session_code}), 201

@mentor_bp.route("/sessions/code/<string:session_code>", methods=["GET"])
@login_required
@role_required("mentor", "admin")
@handle_errors("Failed to load session")
def get_session_by_code(session_code):
    session = SessionManager.get_session_by_code(session_code)
    return jsonify({"success": True, "session": session.to_dict(),
                    "quiz": session.quiz.to_dict()}), 200

@mentor_bp.route("/sessions/<int:session_id>/start", methods=["POST"])
@login_required
@role_required("mentor", "admin")
@handle_errors("Failed to start quiz")
def start_quiz_session(session_id):
    session = SessionManager.start_session(current_user_id(), session_id)
    return jsonify({"success": True, "session": session.to_dict()}), 200

@mentor_bp.route("/sessions/<int:session_id>/participants/count", methods=["GET"])
@login_required
@role_required("mentor", "admin")
@handle_errors("Failed to get participant count")
def get_participant_count(session_id):
    return jsonify({"count": SessionManager.participant_count(session_id)}), 200

#__________________________________________________________________________________________ * Live control *__________________________________________________

@mentor_bp.route("/sessions/<int:session_id>/current-question", methods=["GET"])
@login_required
@role_required("mentor", "admin")
@handle_errors("Failed to get current question")
def get_current_question(session_id):
    return jsonify(SessionController.get_current_question(current_user_id(), session_id)), 200

@mentor_bp.route("/sessions/<int:session_id>/advance", methods=["POST"])
@login_required
@role_required("mentor", "admin")
@handle_errors("Failed to advance question")
def advance_question(session_id):
    return jsonify(SessionController.advance_question(current_user_id(), session_id)), 200

@mentor_bp.route("/sessions/<int:session_id>/end", methods=["POST"])
@login_required
@role_required("mentor", "admin")
@handle_errors("Failed to end session")
def end_session(session_id):
    return jsonify(SessionController.end_session(current_user_id(), session_id)), 200

@mentor_bp.route("/sessions/<int:session_id>/leaderboard", methods=["GET"])
@login_required
@role_required("mentor", "admin")
@handle_errors("Failed to get leaderboard")
def get_leaderboard(session_id):
    return jsonify({"leaderboard": SessionController.get_leaderboard(session_id)}), 200

@mentor_bp.route("/sessions/<int:session_id>/questions/<int:question_index>/stats", methods=["GET"])
@login_required
@role_required("mentor", "admin")
@handle_errors("Failed to get answer stats")
def get_answer_stats(session_id, question_index):
    return jsonify({"stats": SessionController.get_answer_stats(session_id, question_index)}), 200
