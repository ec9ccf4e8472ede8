from flask import Blueprint, jsonify, request

from classes.answer_manager import AnswerManager
from classes.session_controller import SessionController
from classes.session_manager import SessionManager
from models.session_answers import SessionAnswer
from utils.errors import ParticipantNotFound, ValidationFailed
from utils.helpers import parse_option_index
from utils.responses import handle_errors
from utils.utils import login_required, current_user_id

# Students' blueprint: joining and playing live sessions
student_bp = Blueprint("student", __name__)

# Join a live session with its 6-character code
# --------------------------------------------------------------------------------
@student_bp.route("/sessions/join", methods=["POST"])
@login_required
@handle_errors("Failed to join session")
def join_session():
    data = request.get_json() or {}
    session_code = (data.get("sessionCode") or "").strip()
    if not session_code:
        raise ValidationFailed("Session code is required")

    session, participant, already_joined = SessionManager.join_session(current_user_id(), session_code)
    return jsonify({
        "success": True,
        "alreadyJoined": already_joined,
        "session": session.to_dict(),
        "participant": participant.to_dict(),
    }), 200

# Current question, without the answer until the student has responded
@student_bp.route("/sessions/<int:session_id>/question", methods=["GET"])
@login_required
@handle_errors("Failed to load question")
def get_current_question(session_id):
    return jsonify(AnswerManager.get_question_for_student(current_user_id(), session_id)), 200

# Submit an answer
# --------------------------------------------------------------------------------
@student_bp.route("/sessions/<int:session_id>/answers", methods=["POST"])
@login_required
@handle_errors("Failed to submit answer")
def submit_answer(session_id):
    data = request.get_json() or {}

    question_index = parse_option_index(data.get("questionIndex"))
    if question_index is None:
        raise ValidationFailed("Question index is required")

    result = AnswerManager.submit_answer(
        current_user_id(),
        session_id,
        question_index,
        data.get("selectedOptionIndex"),
        data.get("answerTimeMs", 0),
    )
    return jsonify(result), 200

@student_bp.route("/sessions/<int:session_id>/leaderboard", methods=["GET"])
@login_required
@handle_errors("Failed to get leaderboard")
def get_leaderboard(session_id):
    return jsonify({"leaderboard": SessionController.get_leaderboard(session_id)}), 200

# Personal results for a session
@student_bp.route("/sessions/<int:session_id>/results", methods=["GET"])
@login_required
@handle_errors("Failed to load results")
def get_results(session_id):
    user_id = current_user_id()
    session = SessionManager.get_session(session_id)
    participant = SessionManager.get_participant(session_id, user_id)
    if not participant:
        raise ParticipantNotFound()

    leaderboard = SessionController.get_leaderboard(session_id)
    rank = next((row["rank"] for row in leaderboard if row["id"] == participant.id), None)
    answers = (
        SessionAnswer.query
        .filter_by(participant_id=participant.id)
        .order_by(SessionAnswer.question_index)
        .all()
    )

    return jsonify({
        "session": session.to_dict(),
        "participant": participant.to_dict(),
        "rank": rank,
        "totalParticipants": len(leaderboard),
        "answers": [answer.to_dict() for answer in answers],
    }), 200
