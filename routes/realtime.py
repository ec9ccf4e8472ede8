import json
import logging

from flask import Blueprint, Response, current_app, stream_with_context

from classes.session_manager import SessionManager
from utils.errors import Forbidden
from utils.realtime import get_notifier, redact_for_participant
from utils.responses import handle_errors
from utils.utils import login_required, current_user_id

logger = logging.getLogger("realtime")

# Server-sent change events for the live dashboards
realtime_bp = Blueprint("realtime", __name__)

def _format_event(change):
    return f"event: change\ndata: {json.dumps(change, default=str)}\n\n"

def _viewer_filter(session, user_id):
    """The host sees every change; joined participants get answer rows redacted."""
    if session.host_id == user_id:
        return None
    if SessionManager.get_participant(session.id, user_id) is None:
        raise Forbidden("Only the host and participants can follow this session")
    return redact_for_participant

@realtime_bp.route("/sessions/<int:session_id>/stream", methods=["GET"])
@login_required
@handle_errors("Failed to open stream")
def stream_session_changes(session_id):
    session = SessionManager.get_session(session_id)
    redact = _viewer_filter(session, current_user_id())

    notifier = get_notifier()
    keepalive = current_app.config.get("REALTIME_KEEPALIVE_SECONDS", 15)
    subscription = notifier.subscribe(session_id)

    def generate():
        try:
            yield ": connected\n\n"
            while True:
                change = subscription.get(timeout=keepalive)
                if change is None:
                    yield ": keepalive\n\n"
                    continue
                yield _format_event(redact(change) if redact else change)
        finally:
            subscription.close()
            logger.info("Stream for session %s closed", session_id)

    response = Response(stream_with_context(generate()), mimetype="text/event-stream")
    response.headers["Cache-Control"] = "no-cache"
    response.headers["X-Accel-Buffering"] = "no"
    return response
