import logging
from functools import wraps

from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from models import db
from utils.errors import LiveQuizError, BackendFailure

logger = logging.getLogger("routes")


def error_response(error):
    return jsonify(error.to_dict()), error.status_code

def handle_errors(failure_message):
    """
    Turn service errors into the flat ``{"error": message}`` body.
    Store and unexpected failures are rolled back and logged; the caller only sees ``failure_message``.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except LiveQuizError as e:
                db.session.rollback()
                return error_response(e)
            except SQLAlchemyError:
                db.session.rollback()
                logger.exception("%s (%s)", failure_message, f.__name__)
                return error_response(BackendFailure(failure_message))
            except HTTPException:
                raise
            except Exception:
                db.session.rollback()
                logger.exception("Unexpected error: %s (%s)", failure_message, f.__name__)
                return error_response(BackendFailure(failure_message))
        return decorated_function
    return decorator
