"""Socket.IO event handlers for the classroom board server.

These handlers only manage room membership and relay events between
connections; nothing sent over the socket is persisted.
"""

from server.socket_handlers import whiteboard_handlers

__all__ = ['whiteboard_handlers']
