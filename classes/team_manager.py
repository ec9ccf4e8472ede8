import logging

from flask import current_app
from sqlalchemy.exc import IntegrityError

from models import db, HackathonTeam, HackathonTeamMember
from classes.validators import validate_required, validate_length
from utils.codes import generate_unique_code, TEAM_CODE_LENGTH
from utils.errors import AlreadyInTeam, TeamNotFound, TeamFull, NotFound, ValidationFailed
from utils.helpers import sanitize_text

logger = logging.getLogger("services")


def _team_code_taken(code):
    return HackathonTeam.query.filter_by(team_code=code).first() is not None


class TeamManager:
    @staticmethod
    def membership(user_id):
        return HackathonTeamMember.query.filter_by(user_id=user_id).first()

    @staticmethod
    def get_my_team(user_id):
        membership = TeamManager.membership(user_id)
        return membership.team if membership else None

    @staticmethod
    def create_team(user_id, team_name):
        validate_required("Team name", team_name)
        team_name = sanitize_text(team_name)
        validate_length("Team name", team_name, 100)

        if TeamManager.membership(user_id):
            raise AlreadyInTeam()

        team = HackathonTeam(
            team_name=team_name,
            team_code=generate_unique_code(TEAM_CODE_LENGTH, _team_code_taken),
            leader_id=user_id,
            max_members=current_app.config.get("HACKATHON_MAX_TEAM_MEMBERS", 4),
        )
        team.members.append(HackathonTeamMember(user_id=user_id))
        db.session.add(team)
        try:
            db.session.commit()
        except IntegrityError:
            # Either the user joined a team meanwhile or the code was claimed
            db.session.rollback()
            if TeamManager.membership(user_id):
                raise AlreadyInTeam()
            raise

        logger.info("User %s created team %s (%s)", user_id, team.id, team.team_code)
        return team

    @staticmethod
    def join_team(user_id, team_code):
        if not team_code or len(team_code.strip()) != TEAM_CODE_LENGTH:
            raise ValidationFailed(f"Please enter a {TEAM_CODE_LENGTH}-character team code")
        if TeamManager.membership(user_id):
            raise AlreadyInTeam()

        # Lock the team row so concurrent joins see each other's membership
        team = (
            HackathonTeam.query
            .filter_by(team_code=team_code.strip().upper())
            .with_for_update()
            .first()
        )
        if not team:
            raise TeamNotFound()

        member_count = HackathonTeamMember.query.filter_by(team_id=team.id).count()
        if member_count >= team.max_members:
            raise TeamFull(f"This team has reached the maximum of {team.max_members} members")

        db.session.add(HackathonTeamMember(team_id=team.id, user_id=user_id))
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise AlreadyInTeam()

        logger.info("User %s joined team %s", user_id, team.id)
        return team

    @staticmethod
    def leave_team(user_id):
        """The leader leaving disbands the team. Returns True when the team was deleted."""
        membership = TeamManager.membership(user_id)
        if not membership:
            raise NotFound("You are not in a team")

        team = membership.team
        if team.leader_id == user_id:
            db.session.delete(team)
            disbanded = True
        else:
            db.session.delete(membership)
            disbanded = False

        db.session.commit()
        return disbanded

    @staticmethod
    def list_teams():
        """Every team, newest first, for the mentor overview."""
        return HackathonTeam.query.order_by(HackathonTeam.created_at.desc(), HackathonTeam.id.desc()).all()

    @staticmethod
    def set_theme(team_id, theme):
        team = db.session.get(HackathonTeam, team_id)
        if not team:
            raise TeamNotFound("Team not found")

        if theme is not None and not isinstance(theme, str):
            raise ValidationFailed("Theme must be text")
        theme = sanitize_text(theme) or None
        validate_length("Theme", theme, 255)
        team.theme = theme
        db.session.commit()
        logger.info("Team %s theme set to %r", team.id, theme)
        return team
