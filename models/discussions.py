from models import db
from datetime import datetime
from sqlalchemy.orm import relationship

class Discussion(db.Model):
    __tablename__ = "discussions"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    title = db.Column(db.String(255), nullable=False)
    content = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(50), nullable=True)
    is_pinned = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    author = relationship("User")
    comments = relationship("DiscussionComment", back_populates="discussion",
                            cascade="all, delete-orphan", order_by="DiscussionComment.created_at")
    votes = relationship("DiscussionVote", back_populates="discussion", cascade="all, delete-orphan")

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "author_name": self.author.display_name if self.author else None,
            "title": self.title,
            "content": self.content,
            "category": self.category,
            "is_pinned": self.is_pinned,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

class DiscussionComment(db.Model):
    __tablename__ = "discussion_comments"

    id = db.Column(db.Integer, primary_key=True)
    discussion_id = db.Column(db.Integer, db.ForeignKey("discussions.id"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    discussion = relationship("Discussion", back_populates="comments")
    author = relationship("User")

    def to_dict(self):
        return {
            "id": self.id,
            "discussion_id": self.discussion_id,
            "user_id": self.user_id,
            "author_name": self.author.display_name if self.author else None,
            "content": self.content,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

class DiscussionVote(db.Model):
    __tablename__ = "discussion_votes"

    id = db.Column(db.Integer, primary_key=True)
    discussion_id = db.Column(db.Integer, db.ForeignKey("discussions.id"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    vote_type = db.Column(db.String(4), nullable=False)  # 'up', 'down'
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    discussion = relationship("Discussion", back_populates="votes")

    __table_args__ = (
        db.UniqueConstraint("discussion_id", "user_id", name="unique_discussion_vote"),
    )
