"""
sockbuf - connection-aware listener and emit helpers for Socket.IO clients.

Application code can bind listeners and send messages whether or not the
socket is currently connected.  Calls made while offline are queued and
replayed in priority order when the connection comes back.  Each module is
implemented in its own file to keep responsibilities clear:

    buffer.py      → pending-operation buffer (enqueue, drain, flush)
    registry.py    → bound event names, routes calls to socket or buffer
    connection.py  → owns the transport handle, wires lifecycle signals
    transport.py   → handle contract and the python-socketio adapter
    errors.py      → exception types
"""

from .buffer import DEFAULT_PRIORITY, Operation, OperationKind, PendingBuffer  # noqa: F401
from .connection import ConnectionConfig, ConnectionManager  # noqa: F401
from .errors import ConfigurationError, TransportError  # noqa: F401
from .registry import EventRegistry  # noqa: F401
from .transport import SocketIOTransport, TransportConfig, socketio_transport  # noqa: F401

__all__ = [
    "DEFAULT_PRIORITY",
    "Operation",
    "OperationKind",
    "PendingBuffer",
    "EventRegistry",
    "ConnectionConfig",
    "ConnectionManager",
    "ConfigurationError",
    "TransportError",
    "SocketIOTransport",
    "TransportConfig",
    "socketio_transport",
]

__version__ = "0.1.0"
