"""
Row-level change feed for the persisted tables.

Inserts, updates and deletes are captured when the session flushes and are
handed to subscribers only after the transaction commits. Changes from a
rolled back transaction are dropped. Subscribers receive a Change and are
called in the committing request's app context; they must not use
db.session (the session has no active transaction inside after_commit).
"""

import logging
from collections import defaultdict, namedtuple

from sqlalchemy import event, inspect
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

EVENTS = ("insert", "update", "delete")
PENDING_KEY = "pending_changes"

Change = namedtuple("Change", ["table", "event", "row"])


def _row_snapshot(obj):
    mapper = inspect(obj).mapper
    return {column.key: getattr(obj, column.key) for column in mapper.column_attrs}


class ChangeFeed:
    def __init__(self):
        self._subscribers = defaultdict(list)
        self._registered = False

    def init_app(self, app):
        """Attach the session listeners (once per process)"""
        if self._registered:
            return
        event.listen(Session, "after_flush", self._capture)
        event.listen(Session, "after_commit", self._dispatch)
        event.listen(Session, "after_rollback", self._discard)
        self._registered = True
        app.logger.debug("Change feed listeners registered")

    def subscribe(self, table, callback, event_type="*", name=None):
        """
        Subscribe to changes on a table; returns an unsubscribe callable.

        A named subscription replaces an earlier one with the same name on
        the same table.
        """
        if event_type != "*" and event_type not in EVENTS:
            raise ValueError(f"Unknown change event: {event_type}")

        if name is not None:
            self._subscribers[table] = [
                existing for existing in self._subscribers[table] if existing[2] != name
            ]

        entry = (event_type, callback, name)
        self._subscribers[table].append(entry)

        def unsubscribe():
            try:
                self._subscribers[table].remove(entry)
            except ValueError:
                pass

        return unsubscribe

    # Session hooks

    def _capture(self, session, flush_context):
        pending = session.info.setdefault(PENDING_KEY, [])

        for obj in session.new:
            pending.append(Change(obj.__tablename__, "insert", _row_snapshot(obj)))
        for obj in session.dirty:
            if session.is_modified(obj, include_collections=False):
                pending.append(Change(obj.__tablename__, "update", _row_snapshot(obj)))
        for obj in session.deleted:
            pending.append(Change(obj.__tablename__, "delete", _row_snapshot(obj)))

    def _discard(self, session):
        session.info.pop(PENDING_KEY, None)

    def _dispatch(self, session):
        changes = session.info.pop(PENDING_KEY, [])
        for change in changes:
            for event_type, callback, _ in list(self._subscribers.get(change.table, [])):
                if event_type not in ("*", change.event):
                    continue
                try:
                    callback(change)
                except Exception as e:
                    # The write is already committed at this point
                    logger.error(
                        f"Change feed subscriber failed for {change.table}/{change.event}: {e}"
                    )


change_feed = ChangeFeed()
