# validators.py
from utils.errors import ValidationFailed

ROLES = ("student", "mentor", "admin")

def validate_length(field_name, value, max_length):
    if value is not None and len(value) > max_length:
        raise ValidationFailed(f"{field_name} must be {max_length} characters or fewer.")

def validate_required(field_name, value):
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationFailed(f"{field_name} is required")

def validate_role(role):
    if role not in ROLES:
        raise ValidationFailed(f"Role must be one of: {', '.join(ROLES)}")

def validate_questions(questions):
    """Check the stored question shape: text, options and the correct option index."""
    if not isinstance(questions, list):
        raise ValidationFailed("Questions must be a list.")
    for position, question in enumerate(questions, start=1):
        if not isinstance(question, dict):
            raise ValidationFailed("Each question must be an object.")
        text = question.get("question") or question.get("questionText")
        if not text or not str(text).strip():
            raise ValidationFailed(f"Question {position} has no text.")
        options = question.get("options")
        if not isinstance(options, list) or len(options) < 2:
            raise ValidationFailed(f"Question {position} needs at least two options.")
        if any(not isinstance(option, str) or not option.strip() for option in options):
            raise ValidationFailed(f"Question {position} has an empty option.")
        correct = question.get("correctOptionIndex")
        if not isinstance(correct, int) or isinstance(correct, bool) or not 0 <= correct < len(options):
            raise ValidationFailed(f"Question {position} has an invalid correct option.")

SESSION_INT_SETTINGS = {
    "questionTimer": 1,
    "pointsPerQuestion": 1,
    "maxSpeedBonus": 0,
}
SESSION_FLAG_SETTINGS = (
    "showAnswerDistribution",
    "showLeaderboard",
    "allowLateJoin",
    "speedBonus",
    "streakMultiplier",
)

def validate_session_settings(settings):
    """Client overrides for a live session; returns them untouched when valid."""
    if settings is None:
        return {}
    if not isinstance(settings, dict):
        raise ValidationFailed("Settings must be an object")

    for key, value in settings.items():
        if key in SESSION_INT_SETTINGS:
            minimum = SESSION_INT_SETTINGS[key]
            if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
                raise ValidationFailed(f"{key} must be an integer of at least {minimum}")
        elif key in SESSION_FLAG_SETTINGS:
            if not isinstance(value, bool):
                raise ValidationFailed(f"{key} must be true or false")
        else:
            raise ValidationFailed(f"Unknown session setting: {key}")
    return settings
