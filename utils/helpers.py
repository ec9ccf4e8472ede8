import bleach


def normalize_question(question, index=None):
    """
    Convert a stored question into the shape the dashboards read.
    Questions are stored with a ``question`` field; consumers expect ``questionText``.
    """
    if not question:
        return None
    normalized = dict(question)
    normalized["questionText"] = question.get("question") or question.get("questionText")
    normalized["options"] = question.get("options") or []
    normalized["correctOptionIndex"] = question.get("correctOptionIndex")
    if not normalized.get("id") and index is not None:
        normalized["id"] = f"q_{index}"
    return normalized

def to_stored_question(question, index):
    """Inverse of normalize_question, used when saving authored questions."""
    return {
        "id": question.get("id") or f"q_{index}",
        "question": (question.get("question") or question.get("questionText") or "").strip(),
        "options": [option.strip() for option in question.get("options", [])],
        "correctOptionIndex": question.get("correctOptionIndex"),
    }

def parse_option_index(value):
    """Parse a selected option stored as text back into an int, None when unparseable."""
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None

def sanitize_text(value):
    """Strip any markup from user supplied text."""
    if value is None:
        return None
    return bleach.clean(value, tags=[], strip=True).strip()
