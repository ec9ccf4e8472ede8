import json

from models import db
from classes.answer_manager import AnswerManager
from classes.session_manager import SessionManager
from tests.conftest import auth_headers
from utils.realtime import ChangeNotifier, get_notifier, redact_for_participant


def _drain(subscription):
    changes = []
    while True:
        change = subscription.get(timeout=0)
        if change is None:
            return changes
        changes.append(change)


def test_publish_reaches_only_the_channel_subscribers():
    notifier = ChangeNotifier()
    first = notifier.subscribe(1)
    second = notifier.subscribe(2)

    delivered = notifier.publish(1, {"type": "UPDATE"})

    assert delivered == 1
    assert first.get(timeout=0) == {"type": "UPDATE"}
    assert second.get(timeout=0) is None


def test_closed_subscription_is_removed():
    notifier = ChangeNotifier()
    with notifier.subscribe("7"):
        assert notifier.subscriber_count(7) == 1
    assert notifier.subscriber_count(7) == 0
    assert notifier.publish(7, {}) == 0


def test_committed_changes_are_published(mentor, student, live_session):
    subscription = get_notifier().subscribe(live_session.id)

    SessionManager.join_session(student.id, live_session.session_code)
    SessionManager.start_session(mentor.id, live_session.id)
    AnswerManager.submit_answer(student.id, live_session.id, 0, 1, 1000)

    changes = [(change["table"], change["type"]) for change in _drain(subscription)]
    assert ("session_participants", "INSERT") in changes
    assert ("quiz_sessions", "UPDATE") in changes
    assert ("session_answers", "INSERT") in changes
    subscription.close()


def test_rolled_back_changes_are_not_published(student, live_session):
    subscription = get_notifier().subscribe(live_session.id)

    live_session.current_question_index = 2
    db.session.flush()
    db.session.rollback()

    assert _drain(subscription) == []
    subscription.close()


def _open_stream(client, session_id, user):
    return client.get(f"/api/realtime/sessions/{session_id}/stream",
                      headers=auth_headers(user), buffered=False)


def _next_change(chunks, table, attempts=5):
    for _ in range(attempts):
        chunk = next(chunks).decode()
        if chunk.startswith("event: change") and f'"table": "{table}"' in chunk:
            return json.loads(chunk.split("data: ", 1)[1])
    raise AssertionError(f"no {table} change arrived")


def test_stream_frames_changes_for_the_host(client, mentor, student, started_session):
    response = _open_stream(client, started_session.id, mentor)
    assert response.status_code == 200
    assert response.mimetype == "text/event-stream"
    assert response.headers["Cache-Control"] == "no-cache"

    chunks = response.iter_encoded()
    assert next(chunks).decode() == ": connected\n\n"

    AnswerManager.submit_answer(student.id, started_session.id, 0, 1, 1000)

    change = _next_change(chunks, "session_answers")
    assert change["type"] == "INSERT"
    assert change["session_id"] == started_session.id
    assert change["record"]["selected_option_id"] == "1"
    assert change["record"]["is_correct"] is True
    response.close()
    assert get_notifier().subscriber_count(started_session.id) == 0


def test_stream_hides_answer_rows_from_participants(client, student, other_student, started_session):
    SessionManager.join_session(other_student.id, started_session.session_code)
    response = _open_stream(client, started_session.id, other_student)
    assert response.status_code == 200

    chunks = response.iter_encoded()
    assert next(chunks).decode() == ": connected\n\n"

    AnswerManager.submit_answer(student.id, started_session.id, 0, 1, 1000)

    change = _next_change(chunks, "session_answers")
    assert change == {
        "table": "session_answers",
        "type": "INSERT",
        "session_id": started_session.id,
        "question_index": 0,
    }
    response.close()


def test_stream_sends_keepalive_comments(client, mentor, live_session):
    response = _open_stream(client, live_session.id, mentor)
    chunks = response.iter_encoded()
    assert next(chunks).decode() == ": connected\n\n"
    assert next(chunks).decode() == ": keepalive\n\n"
    response.close()


def test_stream_rejects_outsiders(client, other_student, started_session):
    response = _open_stream(client, started_session.id, other_student)
    assert response.status_code == 403
    assert "error" in response.get_json()
    assert get_notifier().subscriber_count(started_session.id) == 0


def test_stream_for_unknown_session(client, mentor):
    response = _open_stream(client, 999, mentor)
    assert response.status_code == 404


def test_redaction_keeps_other_tables_whole():
    change = {"table": "quiz_sessions", "type": "UPDATE", "session_id": 3, "record": {"status": "active"}}
    assert redact_for_participant(change) is change
