import secrets

CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"

QUIZ_CODE_LENGTH = 8
SESSION_CODE_LENGTH = 6
TEAM_CODE_LENGTH = 6


def generate_code(length):
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))

def generate_unique_code(length, is_taken, max_tries=20):
    """
    Generate a code and regenerate while ``is_taken(code)`` reports a collision.
    The column carries a unique constraint as well, so callers still handle the
    rare insert conflict.
    """
    for _ in range(max_tries):
        code = generate_code(length)
        if not is_taken(code):
            return code
    raise RuntimeError(f"Could not generate a unique {length}-character code")
