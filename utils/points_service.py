"""Points ledger for everything outside live-quiz scoring.

Each award or manual adjustment writes one ``points_history`` row and moves
the leaderboard aggregate in the same transaction. Like the leaderboard
helpers these never commit.
"""
import logging

from flask import current_app

from classes.validators import validate_length
from models import db, PointsConfig, PointsHistory
from utils.errors import NotFound, ValidationFailed
from utils.helpers import sanitize_text
from utils.leaderboard_service import increment_totals

logger = logging.getLogger("services")

ACTION_TYPES = (
    "task_submission",
    "discussion_create",
    "discussion_comment",
    "quiz_completion",
    "quiz_perfect_score",
    "resource_upload",
    "hackathon_participation",
    "feedback_submission",
    "daily_login",
    "profile_completion",
    "manual_points_add",
    "manual_points_subtract",
)
MANUAL_ACTIONS = ("manual_points_add", "manual_points_subtract")

# Leaderboard bucket credited alongside total_points
ACTION_COLUMNS = {
    "task_submission": "assignment_points",
}
DEFAULT_COLUMN = "bonus_points"


def ensure_points_config():
    """Insert a config row for every default action that has none yet."""
    existing = {action for (action,) in db.session.query(PointsConfig.action_type)}
    added = 0
    for action_type, (points, description) in current_app.config["DEFAULT_POINTS"].items():
        if action_type in existing:
            continue
        db.session.add(PointsConfig(action_type=action_type, points=points, description=description))
        added += 1
    if added:
        db.session.flush()
        logger.info("Seeded %s points config rows", added)

def _config_for(action_type):
    config = PointsConfig.query.filter_by(action_type=action_type).first()
    if config is None:
        ensure_points_config()
        config = PointsConfig.query.filter_by(action_type=action_type).first()
    return config

def _credit(user_id, action_type, points, reference_id, reference_type, description):
    db.session.add(PointsHistory(
        user_id=user_id,
        action_type=action_type,
        points=points,
        reference_id=str(reference_id) if reference_id is not None else None,
        reference_type=reference_type,
        description=description,
    ))
    column = ACTION_COLUMNS.get(action_type, DEFAULT_COLUMN)
    increment_totals(user_id, total_points=points, **{column: points})

def award_points(user_id, action_type, reference_id=None, reference_type=None, description=None, points=None):
    """
    Grant the configured points for ``action_type``; ``points`` overrides the
    configured amount. Disabled or unconfigured actions grant nothing.
    Returns the number of points awarded.
    """
    if action_type not in ACTION_TYPES or action_type in MANUAL_ACTIONS:
        raise ValidationFailed(f"Unknown action type: {action_type}")

    config = _config_for(action_type)
    if config is None or not config.is_active:
        return 0
    amount = config.points if points is None else points
    if amount <= 0:
        return 0

    _credit(user_id, action_type, amount, reference_id, reference_type, description)
    logger.info("Awarded %s points to user %s for %s", amount, user_id, action_type)
    return amount

def adjust_points_manual(user_id, points, reference_id=None, reference_type=None, description=None):
    """Positive values add, negative values subtract. Totals may go below zero."""
    if isinstance(points, bool) or not isinstance(points, int) or points == 0:
        raise ValidationFailed("Points must be a non-zero integer")

    if description is not None:
        if not isinstance(description, str):
            raise ValidationFailed("Description must be text")
        description = sanitize_text(description) or None
        validate_length("Description", description, 255)

    action_type = "manual_points_add" if points > 0 else "manual_points_subtract"
    if description is None:
        verb = "addition" if points > 0 else "subtraction"
        description = f"Manual {verb} of {abs(points)} points"

    _credit(user_id, action_type, points, reference_id, reference_type, description)
    logger.info("Adjusted user %s by %s points", user_id, points)
    return points

def points_history(user_id, limit=100):
    return (
        PointsHistory.query
        .filter_by(user_id=user_id)
        .order_by(PointsHistory.created_at.desc(), PointsHistory.id.desc())
        .limit(limit)
        .all()
    )

def list_points_config():
    ensure_points_config()
    return PointsConfig.query.order_by(PointsConfig.action_type).all()

def update_points_config(action_type, points=None, is_active=None):
    ensure_points_config()
    config = PointsConfig.query.filter_by(action_type=action_type).first()
    if config is None:
        raise NotFound("Points action not found")

    if points is not None:
        if isinstance(points, bool) or not isinstance(points, int) or points < 0:
            raise ValidationFailed("Points must be a non-negative integer")
        config.points = points
    if is_active is not None:
        if not isinstance(is_active, bool):
            raise ValidationFailed("is_active must be true or false")
        config.is_active = is_active
    return config
