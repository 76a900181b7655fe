"""Socket.IO transport for the hub.

One ``AsyncServer`` carries every realtime feature (presence, chat, feed,
payments, loans, call signaling); handlers only translate between the wire
and the hub's typed events.
"""

from community_hub.adapters.realtime.emitter import SocketIOEmitter
from community_hub.adapters.realtime.handlers import SocketIOHubHandlers
from community_hub.adapters.realtime.server import create_socketio_server

__all__ = ["SocketIOEmitter", "SocketIOHubHandlers", "create_socketio_server"]
