"""In-process change notifier for the live quiz dashboards.

Row changes to the live-quiz tables are captured from the SQLAlchemy session
during flush and published per quiz session once the transaction commits. A
rollback discards them, so subscribers never see changes that did not land.
Browsers consume the events through the SSE stream in ``routes/realtime.py``.
"""
import logging
import queue
import threading
from collections import defaultdict

from flask import current_app, has_app_context
from sqlalchemy import event
from sqlalchemy.orm import Session

logger = logging.getLogger("realtime")

TRACKED_TABLES = ("quiz_sessions", "session_answers", "session_participants")
# Rows only the host may see in full; participants get a notice without the record
HOST_ONLY_TABLES = ("session_answers",)
_PENDING_KEY = "pending_change_events"
_EXTENSION_KEY = "change_notifier"


class Subscription:
    def __init__(self, notifier, channel, max_queue=1000):
        self.notifier = notifier
        self.channel = channel
        self.queue = queue.Queue(maxsize=max_queue)
        self.closed = False

    def deliver(self, change):
        try:
            self.queue.put_nowait(change)
        except queue.Full:
            # A stalled client loses events; it re-fetches on the next one it gets
            logger.warning("Dropping change event for slow subscriber on %s", self.channel)

    def get(self, timeout=None):
        """Next event, or None when nothing arrived within ``timeout`` seconds."""
        try:
            return self.queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def close(self):
        if not self.closed:
            self.closed = True
            self.notifier.unsubscribe(self)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class ChangeNotifier:
    """Fan-out of row change events to subscribers grouped by channel."""

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers = defaultdict(set)

    def subscribe(self, channel):
        subscription = Subscription(self, str(channel))
        with self._lock:
            self._subscribers[subscription.channel].add(subscription)
        logger.info("Subscriber added to channel %s", subscription.channel)
        return subscription

    def unsubscribe(self, subscription):
        with self._lock:
            subscribers = self._subscribers.get(subscription.channel)
            if subscribers is not None:
                subscribers.discard(subscription)
                if not subscribers:
                    del self._subscribers[subscription.channel]

    def subscriber_count(self, channel):
        with self._lock:
            return len(self._subscribers.get(str(channel), ()))

    def publish(self, channel, change):
        with self._lock:
            subscribers = list(self._subscribers.get(str(channel), ()))
        for subscription in subscribers:
            subscription.deliver(change)
        return len(subscribers)


def get_notifier():
    return current_app.extensions[_EXTENSION_KEY]


def _change_for(instance, change_type):
    table = getattr(instance, "__tablename__", None)
    if table not in TRACKED_TABLES:
        return None
    session_id = instance.id if table == "quiz_sessions" else instance.session_id
    return {
        "table": table,
        "type": change_type,
        "session_id": session_id,
        "record": instance.to_dict(),
    }


def redact_for_participant(change):
    if change.get("table") not in HOST_ONLY_TABLES:
        return change
    record = change.get("record") or {}
    return {
        "table": change["table"],
        "type": change["type"],
        "session_id": change["session_id"],
        "question_index": record.get("question_index"),
    }


def _collect_changes(session, flush_context):
    pending = session.info.setdefault(_PENDING_KEY, [])
    for instance in session.new:
        change = _change_for(instance, "INSERT")
        if change:
            pending.append(change)
    for instance in session.dirty:
        if not session.is_modified(instance, include_collections=False):
            continue
        change = _change_for(instance, "UPDATE")
        if change:
            pending.append(change)


def _publish_changes(session):
    pending = session.info.pop(_PENDING_KEY, None)
    if not pending or not has_app_context():
        return
    notifier = current_app.extensions.get(_EXTENSION_KEY)
    if notifier is None:
        return
    for change in pending:
        notifier.publish(change["session_id"], change)


def _discard_changes(session):
    session.info.pop(_PENDING_KEY, None)


def init_change_notifier(app, notifier=None):
    """Attach a notifier to the app and hook the session events once per process."""
    app.extensions[_EXTENSION_KEY] = notifier or ChangeNotifier()
    if not event.contains(Session, "after_flush", _collect_changes):
        event.listen(Session, "after_flush", _collect_changes)
        event.listen(Session, "after_commit", _publish_changes)
        event.listen(Session, "after_rollback", _discard_changes)
    return app.extensions[_EXTENSION_KEY]
