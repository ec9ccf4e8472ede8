from flask import Blueprint, jsonify, request

from classes.discussion_manager import DiscussionManager
from utils.responses import handle_errors
from utils.utils import login_required, current_user_id

# Community discussions blueprint
discussion_bp = Blueprint("discussions", __name__)

# List discussions, pinned first, then by the requested sort
@discussion_bp.route("", methods=["GET"])
@login_required
@handle_errors("Failed to load discussions")
def list_discussions():
    discussions = DiscussionManager.list_discussions(
        user_id=current_user_id(),
        category=request.args.get("category"),
        search=request.args.get("search"),
        sort=request.args.get("sort", "new"),
    )
    return jsonify({"discussions": discussions}), 200

@discussion_bp.route("", methods=["POST"])
@login_required
@handle_errors("Failed to create discussion")
def create_discussion():
    data = request.get_json() or {}
    discussion = DiscussionManager.create_discussion(
        current_user_id(), data.get("title"), data.get("content"), data.get("category")
    )
    return jsonify({"discussion": DiscussionManager.serialize([discussion], current_user_id())[0]}), 201

# Single discussion with its comments
@discussion_bp.route("/<int:discussion_id>", methods=["GET"])
@login_required
@handle_errors("Failed to load discussion")
def get_discussion(discussion_id):
    discussion = DiscussionManager.get_discussion(discussion_id)
    serialized = DiscussionManager.serialize([discussion], current_user_id())[0]
    serialized["comments"] = [comment.to_dict() for comment in discussion.comments]
    return jsonify({"discussion": serialized}), 200

@discussion_bp.route("/<int:discussion_id>/comments", methods=["POST"])
@login_required
@handle_errors("Failed to add comment")
def add_comment(discussion_id):
    data = request.get_json() or {}
    comment = DiscussionManager.add_comment(current_user_id(), discussion_id, data.get("content"))
    return jsonify({"comment": comment.to_dict()}), 201

# Toggle an up/down vote
@discussion_bp.route("/<int:discussion_id>/vote", methods=["POST"])
@login_required
@handle_errors("Failed to vote")
def vote(discussion_id):
    data = request.get_json() or {}
    user_vote = DiscussionManager.vote(current_user_id(), discussion_id, data.get("voteType"))
    upvotes, downvotes = DiscussionManager.vote_tallies([discussion_id]).get(discussion_id, (0, 0))
    return jsonify({
        "user_vote": user_vote,
        "upvotes": upvotes,
        "downvotes": downvotes,
        "net_votes": upvotes - downvotes,
    }), 200
