from models import db
from datetime import datetime
from sqlalchemy.orm import relationship

class HackathonTeam(db.Model):
    __tablename__ = "hackathon_teams"

    id = db.Column(db.Integer, primary_key=True)
    team_name = db.Column(db.String(100), nullable=False)
    team_code = db.Column(db.String(6), nullable=False, unique=True)
    leader_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    max_members = db.Column(db.Integer, nullable=False, default=4)
    theme = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    members = relationship("HackathonTeamMember", back_populates="team",
                           cascade="all, delete-orphan", order_by="HackathonTeamMember.joined_at")

    @property
    def member_count(self):
        return len(self.members)

    def to_dict(self):
        return {
            "id": self.id,
            "team_name": self.team_name,
            "team_code": self.team_code,
            "leader_id": self.leader_id,
            "max_members": self.max_members,
            "theme": self.theme,
            "member_count": self.member_count,
            "members": [member.to_dict() for member in self.members],
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

class HackathonTeamMember(db.Model):
    __tablename__ = "hackathon_team_members"

    id = db.Column(db.Integer, primary_key=True)
    team_id = db.Column(db.Integer, db.ForeignKey("hackathon_teams.id"), nullable=False)
    # One team per user
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, unique=True)
    joined_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    team = relationship("HackathonTeam", back_populates="members")
    user = relationship("User")

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "full_name": self.user.full_name if self.user else None,
            "email": self.user.email if self.user else None,
            "joined_at": self.joined_at.isoformat() if self.joined_at else None,
        }
