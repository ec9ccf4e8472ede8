import logging

from sqlalchemy import case, func

from models import db, Discussion, DiscussionComment, DiscussionVote
from classes.validators import validate_required, validate_length
from utils.errors import DiscussionNotFound, Forbidden, ValidationFailed
from utils.helpers import sanitize_text
from utils.points_service import award_points

logger = logging.getLogger("services")

VOTE_DIRECTIONS = ("up", "down")
SORT_MODES = ("new", "top", "hot")


class DiscussionManager:
    @staticmethod
    def create_discussion(user_id, title, content, category=None):
        validate_required("Title", title)
        validate_required("Content", content)
        validate_length("Title", title, 255)

        discussion = Discussion(
            user_id=user_id,
            title=sanitize_text(title),
            content=sanitize_text(content),
            category=sanitize_text(category) or None,
        )
        db.session.add(discussion)
        db.session.flush()
        award_points(user_id, "discussion_create", reference_id=discussion.id, reference_type="discussion",
                     description=f"Started discussion: {discussion.title}")
        db.session.commit()
        return discussion

    @staticmethod
    def get_discussion(discussion_id):
        discussion = db.session.get(Discussion, discussion_id)
        if not discussion:
            raise DiscussionNotFound()
        return discussion

    @staticmethod
    def add_comment(user_id, discussion_id, content):
        validate_required("Comment", content)
        discussion = DiscussionManager.get_discussion(discussion_id)
        comment = DiscussionComment(discussion_id=discussion_id, user_id=user_id, content=sanitize_text(content))
        db.session.add(comment)
        db.session.flush()
        award_points(user_id, "discussion_comment", reference_id=comment.id, reference_type="discussion_comment",
                     description=f"Commented on: {discussion.title}")
        db.session.commit()
        return comment

    @staticmethod
    def vote(user_id, discussion_id, direction):
        """
        One vote row per user and discussion:
        no vote -> vote, same direction -> removed, opposite direction -> changed.
        Returns the caller's vote after the call (None when removed).
        """
        if direction not in VOTE_DIRECTIONS:
            raise ValidationFailed("Vote must be 'up' or 'down'")
        discussion = DiscussionManager.get_discussion(discussion_id)
        if discussion.user_id == user_id:
            raise Forbidden("Cannot vote on your own post")

        existing = DiscussionVote.query.filter_by(discussion_id=discussion_id, user_id=user_id).first()
        if existing and existing.vote_type == direction:
            db.session.delete(existing)
            result = None
        elif existing:
            existing.vote_type = direction
            result = direction
        else:
            db.session.add(DiscussionVote(discussion_id=discussion_id, user_id=user_id, vote_type=direction))
            result = direction

        db.session.commit()
        return result

    @staticmethod
    def vote_tallies(discussion_ids):
        """{discussion_id: (upvotes, downvotes)} computed from the vote rows."""
        if not discussion_ids:
            return {}
        rows = (
            db.session.query(
                DiscussionVote.discussion_id,
                func.sum(case((DiscussionVote.vote_type == "up", 1), else_=0)),
                func.sum(case((DiscussionVote.vote_type == "down", 1), else_=0)),
            )
            .filter(DiscussionVote.discussion_id.in_(discussion_ids))
            .group_by(DiscussionVote.discussion_id)
            .all()
        )
        return {discussion_id: (int(up or 0), int(down or 0)) for discussion_id, up, down in rows}

    @staticmethod
    def comment_counts(discussion_ids):
        if not discussion_ids:
            return {}
        rows = (
            db.session.query(DiscussionComment.discussion_id, func.count(DiscussionComment.id))
            .filter(DiscussionComment.discussion_id.in_(discussion_ids))
            .group_by(DiscussionComment.discussion_id)
            .all()
        )
        return dict(rows)

    @staticmethod
    def user_votes(user_id, discussion_ids):
        if not user_id or not discussion_ids:
            return {}
        rows = DiscussionVote.query.filter(
            DiscussionVote.user_id == user_id,
            DiscussionVote.discussion_id.in_(discussion_ids),
        ).all()
        return {vote.discussion_id: vote.vote_type for vote in rows}

    @staticmethod
    def serialize(discussions, user_id=None):
        ids = [discussion.id for discussion in discussions]
        tallies = DiscussionManager.vote_tallies(ids)
        comments = DiscussionManager.comment_counts(ids)
        votes = DiscussionManager.user_votes(user_id, ids)

        serialized = []
        for discussion in discussions:
            upvotes, downvotes = tallies.get(discussion.id, (0, 0))
            serialized.append({
                **discussion.to_dict(),
                "upvotes": upvotes,
                "downvotes": downvotes,
                "net_votes": upvotes - downvotes,
                "comment_count": comments.get(discussion.id, 0),
                "user_vote": votes.get(discussion.id),
            })
        return serialized

    @staticmethod
    def list_discussions(user_id=None, category=None, search=None, sort="new"):
        if sort not in SORT_MODES:
            raise ValidationFailed(f"Sort must be one of: {', '.join(SORT_MODES)}")

        query = Discussion.query
        if category:
            query = query.filter(Discussion.category == category)
        if search and search.strip():
            pattern = f"%{search.strip().lower()}%"
            query = query.filter(
                func.lower(Discussion.title).like(pattern) | func.lower(Discussion.content).like(pattern)
            )
        discussions = query.order_by(Discussion.is_pinned.desc(), Discussion.created_at.desc(),
                                     Discussion.id.desc()).all()

        serialized = DiscussionManager.serialize(discussions, user_id)
        if sort == "top":
            serialized.sort(key=lambda d: (not d["is_pinned"], -d["net_votes"]))
        elif sort == "hot":
            serialized.sort(key=lambda d: (not d["is_pinned"], -(d["net_votes"] + d["comment_count"] * 2)))
        return serialized
