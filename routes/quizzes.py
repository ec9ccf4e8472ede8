from flask import Blueprint, jsonify, request

from classes.quiz_manager import QuizManager
from utils.responses import handle_errors
from utils.utils import login_required, role_required, current_user_id

# Quiz authoring blueprint
quiz_bp = Blueprint("quizzes", __name__)

# Fetch the mentor's quizzes
@quiz_bp.route("", methods=["GET"])
@login_required
@role_required("mentor", "admin")
@handle_errors("Failed to load quizzes")
def list_quizzes():
    quizzes = QuizManager.list_quizzes(current_user_id())
    return jsonify({"quizzes": [quiz.to_dict() for quiz in quizzes]}), 200

# Save a draft (creates it, or updates the draft with the same title)
# --------------------------------------------------------------------------------
@quiz_bp.route("", methods=["POST"])
@login_required
@role_required("mentor", "admin")
@handle_errors("Failed to save draft")
def save_draft():
    data = request.get_json() or {}
    quiz = QuizManager.save_draft(
        current_user_id(),
        data.get("title"),
        data.get("description"),
        data.get("questions"),
    )
    return jsonify({"message": "Quiz saved as draft", "quiz": quiz.to_dict()}), 201

@quiz_bp.route("/<int:quiz_id>", methods=["GET"])
@login_required
@role_required("mentor", "admin")
@handle_errors("Failed to load quiz")
def get_quiz(quiz_id):
    quiz = QuizManager.get_owned_quiz(current_user_id(), quiz_id)
    return jsonify({"quiz": quiz.to_dict()}), 200

# EDIT a quiz
# --------------------------------------------------------------------------------
@quiz_bp.route("/<int:quiz_id>", methods=["PUT"])
@login_required
@role_required("mentor", "admin")
@handle_errors("Failed to update quiz")
def update_quiz(quiz_id):
    data = request.get_json() or {}
    quiz = QuizManager.update_quiz(current_user_id(), quiz_id, data)
    return jsonify({"message": "Quiz updated successfully", "quiz": quiz.to_dict()}), 200

# DELETE a quiz
# --------------------------------------------------------------------------------
@quiz_bp.route("/<int:quiz_id>", methods=["DELETE"])
@login_required
@role_required("mentor", "admin")
@handle_errors("Failed to delete quiz")
def delete_quiz(quiz_id):
    QuizManager.delete_quiz(current_user_id(), quiz_id)
    return jsonify({"message": "Quiz deleted successfully"}), 200

# Publish or republish with a new join code
# --------------------------------------------------------------------------------
@quiz_bp.route("/<int:quiz_id>/publish", methods=["POST"])
@login_required
@role_required("mentor", "admin")
@handle_errors("Failed to publish quiz")
def publish_quiz(quiz_id):
    quiz = QuizManager.publish(current_user_id(), quiz_id)
    return jsonify({"message": "Quiz published", "quiz_code": quiz.quiz_code, "quiz": quiz.to_dict()}), 200

# Look up a published quiz by its join code (answers hidden)
@quiz_bp.route("/code/<string:quiz_code>", methods=["GET"])
@login_required
@handle_errors("Failed to load quiz")
def get_quiz_by_code(quiz_code):
    quiz = QuizManager.get_by_code(quiz_code)
    return jsonify({"quiz": quiz.to_dict(include_answers=False)}), 200
