"""
SocketIO Event Handlers for live results

Clients on the /results namespace subscribe to the results room and get a
full snapshot of announced results on subscribe and again after every
committed change to the results table. Snapshots replace, never patch, the
client's copy, so missed or reordered messages converge on the next one.
"""

import logging

from flask import request
from flask_login import current_user
from flask_socketio import emit, join_room, leave_room

from party_picks import db, socketio
from party_picks.services import results as results_service
from party_picks.utils.cache_utils import prime_query
from party_picks.utils.change_feed import change_feed
from party_picks.utils.timezone_utils import get_utc_time

logger = logging.getLogger(__name__)

NAMESPACE = "/results"
RESULTS_ROOM = "results"

# Track connected clients and whether they joined the results room
connected_clients = {}

# In-process results subscribers
_local_subscribers = []


def build_snapshot(records):
    return {
        "results": {record.category: record.selection for record in records},
        "announced": [record.to_dict() for record in records],
        "generated_at": get_utc_time().isoformat(),
    }


def current_snapshot():
    """Snapshot read on its own connection, outside any session transaction"""
    with db.engine.connect() as connection:
        records = results_service.load_results_snapshot(connection)
    return build_snapshot(records)


@socketio.on("connect", namespace=NAMESPACE)
def on_connect(auth=None):
    user_id = current_user.id if current_user.is_authenticated else None
    connected_clients[request.sid] = {"user_id": user_id, "subscribed": False}
    logger.info(f"Client connected to {NAMESPACE}: {request.sid} (user: {user_id})")


@socketio.on("disconnect", namespace=NAMESPACE)
def on_disconnect(*args):
    client = connected_clients.pop(request.sid, None)
    if client and client["subscribed"]:
        leave_room(RESULTS_ROOM)
    logger.info(f"Client disconnected from {NAMESPACE}: {request.sid}")


@socketio.on("subscribe_results", namespace=NAMESPACE)
def on_subscribe_results(data=None):
    """Join the results room and receive the current snapshot"""
    client = connected_clients.setdefault(
        request.sid, {"user_id": None, "subscribed": False}
    )

    if not client["subscribed"]:
        join_room(RESULTS_ROOM)
        client["subscribed"] = True
        logger.debug(f"Client {request.sid} subscribed to results")

    try:
        emit("results_snapshot", current_snapshot())
    except Exception as e:
        logger.error(f"Error sending results snapshot to {request.sid}: {e}")
        emit("results_error", {"error": "Results temporarily unavailable"})


@socketio.on("unsubscribe_results", namespace=NAMESPACE)
def on_unsubscribe_results(data=None):
    client = connected_clients.get(request.sid)
    if client and client["subscribed"]:
        leave_room(RESULTS_ROOM)
        client["subscribed"] = False
        logger.debug(f"Client {request.sid} unsubscribed from results")


def subscribe_to_results(callback):
    """
    Call callback(snapshot) after every committed results change.

    Returns a function that removes the subscription.
    """
    _local_subscribers.append(callback)

    def unsubscribe():
        try:
            _local_subscribers.remove(callback)
        except ValueError:
            pass

    return unsubscribe


def broadcast_results_snapshot(change=None):
    """Push a fresh snapshot to every subscriber"""
    with db.engine.connect() as connection:
        records = results_service.load_results_snapshot(connection)

    prime_query(
        results_service.load_results_map,
        {record.category: record.selection for record in records},
    )
    snapshot = build_snapshot(records)

    socketio.emit("results_snapshot", snapshot, to=RESULTS_ROOM, namespace=NAMESPACE)

    for callback in list(_local_subscribers):
        try:
            callback(snapshot)
        except Exception as e:
            logger.error(f"Results subscriber failed: {e}")

    if change is not None:
        logger.debug(
            f"Broadcasted results snapshot after {change.event} on {change.row.get('category')}"
        )
    return snapshot


def init_live_sync(app):
    """Broadcast on every committed change to the results table"""
    change_feed.subscribe("results", broadcast_results_snapshot, name="live_sync")
    app.logger.debug("Live results sync enabled")
