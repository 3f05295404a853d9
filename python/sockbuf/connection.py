"""Connection manager tying the transport lifecycle to the pending buffer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Set

from .buffer import DEFAULT_PRIORITY, OperationKind, PendingBuffer
from .errors import ConfigurationError
from .registry import EventRegistry, Handler
from .transport import TransportFactory, socketio_transport


logger = logging.getLogger(__name__)


@dataclass
class ConnectionConfig:
    default_priority: int = DEFAULT_PRIORITY
    discard_on_disconnect: bool = True
    queue_clear_when_connected: bool = True
    drain_signals: Sequence[str] = ("connect", "reconnect", "ping")
    disconnect_signal: str = "disconnect"


class ConnectionManager:
    """Owns one transport handle plus the buffer and registry that serve it.

    Listener and emit calls work regardless of connection state: while the
    socket is offline they are queued and replayed, by priority, on the next
    ``connect``/``reconnect``/``ping`` signal.  A ``disconnect`` signal drops
    every binding and (by default) discards whatever is still queued.
    """

    def __init__(
        self,
        config: Optional[ConnectionConfig] = None,
        *,
        transport_factory: Optional[TransportFactory] = None,
        buffer: Optional[PendingBuffer] = None,
    ) -> None:
        self.config = config or ConnectionConfig()
        self.transport_factory: TransportFactory = transport_factory or socketio_transport
        self.buffer = buffer if buffer is not None else PendingBuffer()
        self._client: Any = None
        self.registry = EventRegistry(
            self.buffer,
            self.get_client,
            emit=self.emit,
            queue_clear_when_connected=self.config.queue_clear_when_connected,
        )

    #
    # Connection lifecycle
    #
    def connect(self, uri: Optional[str], options: Optional[Mapping[str, Any]] = None) -> Any:
        if not uri:
            raise ConfigurationError("connect requires a uri")
        client = self._client
        if client is not None and client.connected:
            return client
        if client is not None:
            self._retire(client)
        client = self.transport_factory(uri, dict(options or {}))
        self._client = client
        for signal in self.config.drain_signals:
            client.on(signal, self._handle_drain_signal)
        client.on(self.config.disconnect_signal, self._handle_disconnect)
        opener = getattr(client, "open", None)
        if callable(opener):
            opener()
        return client

    def disconnect(self) -> bool:
        client = self._client
        if client is None:
            return False
        try:
            closer = getattr(client, "disconnect", None)
            if callable(closer):
                closer()
        finally:
            self._client = None
        return True

    def _retire(self, client: Any) -> None:
        """Silence a handle that never came up before replacing it."""
        logger.debug("replacing stale transport handle %s", getattr(client, "id", None))
        for signal in self.config.drain_signals:
            client.off(signal, self._handle_drain_signal)
        client.off(self.config.disconnect_signal, self._handle_disconnect)
        closer = getattr(client, "disconnect", None)
        if callable(closer):
            closer()

    def drain(self) -> bool:
        """Replay queued operations if the socket is live."""
        with self.registry.lock:
            if not self.is_connected():
                return False
            return self.registry.drain()

    def _handle_drain_signal(self, *args: Any) -> None:
        logger.debug("socket %s live, %d operation(s) pending", getattr(self._client, "id", None), len(self.buffer))
        self.drain()

    def _handle_disconnect(self, reason: Any = None, *args: Any) -> None:
        logger.info("socket disconnected: %s", reason)
        self.registry.detach_all()
        if self.config.discard_on_disconnect:
            self.buffer.flush()

    #
    # Accessors
    #
    def get_client(self) -> Any:
        return self._client

    def is_connected(self) -> bool:
        client = self._client
        return bool(client is not None and client.connected)

    @property
    def pending(self) -> int:
        return len(self.buffer)

    def list_events(self) -> Set[str]:
        return self.registry.list_events()

    #
    # Socket operations
    #
    def _priority(self, priority: Optional[int]) -> int:
        return self.config.default_priority if priority is None else priority

    def emit(self, event: str, data: Any = None, priority: Optional[int] = None) -> bool:
        with self.registry.lock:
            client = self._client
            if client is not None and client.connected:
                logger.debug("emit %s on %s", event, getattr(client, "id", None))
                client.emit(event, data)
                return True
            logger.debug("emit %s deferred", event)
            self.buffer.enqueue(OperationKind.EMIT, {"event": event, "data": data}, self._priority(priority))
            return False

    def on(self, event: str, handler: Handler, priority: Optional[int] = None) -> bool:
        return self.registry.bind(event, handler, self._priority(priority))

    def once(self, event: str, handler: Handler, priority: Optional[int] = None) -> bool:
        return self.registry.bind_once(event, handler, self._priority(priority))

    def off(self, event: str, priority: Optional[int] = None) -> bool:
        return self.registry.unbind(event, self._priority(priority))

    def clear_all(self, priority: Optional[int] = None) -> bool:
        return self.registry.clear_all(self._priority(priority))
