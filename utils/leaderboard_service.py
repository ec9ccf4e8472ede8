"""Incremental updates to the cross-session leaderboard aggregate.

Every counter moves through a single ``UPDATE ... SET col = col + n`` so two
answers landing together cannot overwrite each other. None of these commit;
the caller owns the transaction.
"""
import logging
from datetime import datetime

from models import db, LeaderboardEntry, User
from utils.ranks import rank_summary

logger = logging.getLogger("services")


def increment_totals(user_id, **increments):
    values = {
        getattr(LeaderboardEntry, column): getattr(LeaderboardEntry, column) + amount
        for column, amount in increments.items()
    }
    values[LeaderboardEntry.last_activity] = datetime.utcnow()
    updated = LeaderboardEntry.query.filter_by(user_id=user_id).update(values, synchronize_session=False)
    if updated:
        return
    # First activity for this user
    entry = LeaderboardEntry(user_id=user_id, last_activity=datetime.utcnow())
    for column, amount in increments.items():
        setattr(entry, column, amount)
    db.session.add(entry)
    db.session.flush()
    logger.info("Created leaderboard entry for user %s", user_id)

def record_correct_answer(user_id, points):
    increment_totals(user_id, total_points=points, quiz_points=points, correct_answers=1, total_attempts=1)

def record_incorrect_answer(user_id):
    increment_totals(user_id, total_attempts=1)

def record_answer(user_id, is_correct, points):
    if is_correct and points > 0:
        record_correct_answer(user_id, points)
    elif not is_correct:
        record_incorrect_answer(user_id)

def record_quiz_completed(user_id):
    """Only bumps an existing entry; a user who never answered has nothing to complete."""
    LeaderboardEntry.query.filter_by(user_id=user_id).update({
        LeaderboardEntry.quizzes_completed: LeaderboardEntry.quizzes_completed + 1,
        LeaderboardEntry.last_activity: datetime.utcnow(),
    }, synchronize_session=False)

def global_leaderboard(limit=50):
    rows = (
        db.session.query(LeaderboardEntry, User)
        .join(User, User.id == LeaderboardEntry.user_id)
        .order_by(LeaderboardEntry.total_points.desc(), LeaderboardEntry.last_activity.asc(),
                  LeaderboardEntry.id.asc())
        .limit(limit)
        .all()
    )
    return [
        {
            **entry.to_dict(),
            "rank": position,
            "full_name": user.full_name,
            "username": user.username,
            "tier": rank_summary(entry.total_points),
        }
        for position, (entry, user) in enumerate(rows, start=1)
    ]

def user_stats(user_id):
    entry = LeaderboardEntry.query.filter_by(user_id=user_id).first()
    stats = entry.to_dict() if entry else {
        "user_id": user_id,
        "total_points": 0,
        "quiz_points": 0,
        "assignment_points": 0,
        "bonus_points": 0,
        "quizzes_completed": 0,
        "correct_answers": 0,
        "total_attempts": 0,
        "accuracy": 0.0,
        "last_activity": None,
    }
    stats["tier"] = rank_summary(stats["total_points"])
    return stats
