"""Socket.IO handlers for the shared whiteboard.

Clients join rooms by key and every drawing or control event sent to a room
is relayed to the other members of that room. The relay does not look
inside drawing payloads and keeps no board history.

Malformed events (no usable ``roomId``) are dropped without a reply so one
misbehaving client never disturbs the rest of the room.
"""

import logging
import time
from typing import Any, Optional

from flask import request
from flask_socketio import emit

from server.models.room_registry import RoomRegistry

logger = logging.getLogger(__name__)


def _room_key(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


def _room_from_payload(data: Any) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    return _room_key(data.get("roomId"))


def server_time_ms() -> int:
    return int(time.time() * 1000)


def relay(registry: RoomRegistry, room_id: str, event: str, *args) -> int:
    """Emit ``event`` to every member of ``room_id`` except the caller.

    Returns the number of recipients.
    """
    recipients = registry.recipients(room_id, exclude=request.sid)
    for sid in recipients:
        emit(event, *args, to=sid)
    return len(recipients)


def register_handlers(socketio, registry: RoomRegistry):
    """Register whiteboard Socket.IO event handlers."""

    @socketio.on("connect")
    def handle_connect(auth=None):
        logger.info("client_connected sid=%s", request.sid)

    @socketio.on("disconnect")
    def handle_disconnect(*_args):
        try:
            rooms = registry.disconnect(request.sid)
            logger.info("client_disconnected sid=%s rooms=%s", request.sid, rooms)
        except Exception as e:
            logger.error("disconnect_handler_error sid=%s error=%s", request.sid, e, exc_info=True)

    @socketio.on("join-room")
    def handle_join_room(room_id=None):
        """Join a board room.

        Expected data: "classA"
        """
        try:
            room = _room_key(room_id)
            if room is None:
                logger.debug("join_room_dropped sid=%s payload=%r", request.sid, room_id)
                return
            registry.join(request.sid, room)
            logger.info("client_joined_room sid=%s room=%s", request.sid, room)
            emit("joined", room)
        except Exception as e:
            logger.error("join_room_failed sid=%s error=%s", request.sid, e, exc_info=True)

    @socketio.on("leave-room")
    def handle_leave_room(room_id=None):
        """Leave a board room.

        Expected data: "classA"
        """
        try:
            room = _room_key(room_id)
            if room is None:
                logger.debug("leave_room_dropped sid=%s payload=%r", request.sid, room_id)
                return
            registry.leave(request.sid, room)
            logger.info("client_left_room sid=%s room=%s", request.sid, room)
            emit("left", room)
        except Exception as e:
            logger.error("leave_room_failed sid=%s error=%s", request.sid, e, exc_info=True)

    @socketio.on("draw-line")
    def handle_draw_line(data=None):
        """Relay a line segment to the rest of the room.

        Expected data: {
            "roomId": "classA",
            "line": {"x1": 0, "y1": 0, "x2": 10, "y2": 10}
        }
        """
        try:
            room = _room_from_payload(data)
            if room is None:
                logger.debug("draw_line_dropped sid=%s", request.sid)
                return
            relay(registry, room, "draw-line", {"line": data.get("line")})
        except Exception as e:
            logger.error("draw_line_failed sid=%s error=%s", request.sid, e, exc_info=True)

    @socketio.on("clear-board")
    def handle_clear_board(data=None):
        """Tell the rest of the room to wipe the board.

        Expected data: {"roomId": "classA"}
        """
        try:
            room = _room_from_payload(data)
            if room is None:
                logger.debug("clear_board_dropped sid=%s", request.sid)
                return
            count = relay(registry, room, "clear-board")
            logger.info("board_cleared sid=%s room=%s recipients=%d", request.sid, room, count)
        except Exception as e:
            logger.error("clear_board_failed sid=%s error=%s", request.sid, e, exc_info=True)

    @socketio.on("ping-check")
    def handle_ping_check(*_args):
        """Latency check, answered to the caller only."""
        emit("pong-check", server_time_ms())
