"""Event registry keeping listener intent in sync with the live socket."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Set

from .buffer import DEFAULT_PRIORITY, Operation, OperationKind, PendingBuffer


logger = logging.getLogger(__name__)

Handler = Callable[..., Any]
ClientGetter = Callable[[], Any]
Emitter = Callable[[str, Any, int], Any]


def _client_id(client: Any) -> str:
    return str(getattr(client, "id", None) or "-")


class EventRegistry:
    """Tracks the event names bound on the transport.

    Calls made while the socket is offline are parked in the pending buffer
    and the registry is left untouched until they are replayed.  Only the
    handlers attached through the registry are ever detached by it, so
    listeners installed by other parties on the same event name survive
    ``unbind`` and ``clear_all``.

    ``lock`` serialises the connected check with the bind/enqueue that
    follows it, and is held for a whole drain.
    """

    def __init__(
        self,
        buffer: PendingBuffer,
        get_client: ClientGetter,
        *,
        emit: Optional[Emitter] = None,
        queue_clear_when_connected: bool = True,
    ) -> None:
        self.buffer = buffer
        self._get_client = get_client
        self._emit = emit
        self.queue_clear_when_connected = queue_clear_when_connected
        self.lock = threading.RLock()
        self._bindings: Dict[str, List[Handler]] = {}

    def _live_client(self) -> Any:
        client = self._get_client()
        if client is not None and getattr(client, "connected", False):
            return client
        return None

    def _attach(self, event: str, handler: Handler) -> None:
        self._bindings.setdefault(event, []).append(handler)

    def _forget(self, event: str, handler: Handler) -> None:
        with self.lock:
            handlers = self._bindings.get(event)
            if not handlers or handler not in handlers:
                return
            handlers.remove(handler)
            if not handlers:
                del self._bindings[event]

    def bind(self, event: str, handler: Handler, priority: int = DEFAULT_PRIORITY) -> bool:
        with self.lock:
            client = self._live_client()
            if client is None:
                logger.debug("bind %s deferred", event)
                self.buffer.enqueue(OperationKind.BIND, {"event": event, "handler": handler}, priority)
                return False
            logger.debug("bind %s on %s", event, _client_id(client))
            client.on(event, handler)
            self._attach(event, handler)
            return True

    def bind_once(self, event: str, handler: Handler, priority: int = DEFAULT_PRIORITY) -> bool:
        with self.lock:
            client = self._live_client()
            if client is None:
                logger.debug("bind_once %s deferred", event)
                self.buffer.enqueue(OperationKind.BIND_ONCE, {"event": event, "handler": handler}, priority)
                return False
            logger.debug("bind_once %s on %s", event, _client_id(client))

            def fire_once(*args: Any) -> Any:
                self._forget(event, fire_once)
                return handler(*args)

            client.once(event, fire_once)
            self._attach(event, fire_once)
            return True

    def unbind(self, event: str, priority: int = DEFAULT_PRIORITY) -> bool:
        with self.lock:
            client = self._live_client()
            if client is None:
                logger.debug("unbind %s deferred", event)
                self.buffer.enqueue(OperationKind.UNBIND, {"event": event}, priority)
                return False
            logger.debug("unbind %s on %s", event, _client_id(client))
            for handler in self._bindings.pop(event, ()):
                client.off(event, handler)
            return True

    def clear_all(self, priority: int = DEFAULT_PRIORITY, *, requeue: bool = True) -> bool:
        """Unbind every registered event.

        A CLEAR_ALL entry is queued as well, even when the socket is live,
        unless ``queue_clear_when_connected`` is off.  ``requeue=False`` skips
        that entry for a live socket; replay uses it.

        Returns True when bindings were detached from a live socket now, and
        False when the socket was offline and the clear only went to the
        queue, matching the other registry calls.
        """

        with self.lock:
            client = self._live_client()
            if client is not None:
                logger.debug("clear %d event(s) on %s", len(self._bindings), _client_id(client))
                self._detach(client)
                if not requeue or not self.queue_clear_when_connected:
                    return True
            logger.debug("clear queued")
            self.buffer.enqueue(OperationKind.CLEAR_ALL, None, priority)
            return client is not None

    def detach_all(self) -> None:
        """Drop every binding without consulting the connection state."""
        with self.lock:
            self._detach(self._get_client())

    def _detach(self, client: Any) -> None:
        bindings, self._bindings = self._bindings, {}
        if client is None:
            return
        for event, handlers in bindings.items():
            for handler in handlers:
                client.off(event, handler)

    def drain(self) -> bool:
        """Replay every queued operation through this registry."""
        with self.lock:
            return self.buffer.drain(self.replay)

    def list_events(self) -> Set[str]:
        with self.lock:
            return set(self._bindings)

    def __contains__(self, event: object) -> bool:
        with self.lock:
            return event in self._bindings

    def replay(self, operation: Operation) -> Any:
        payload = operation.payload
        kind = operation.kind
        logger.debug("replay %s %s", kind.value, operation.event or "-")
        if kind is OperationKind.BIND:
            return self.bind(payload["event"], payload["handler"], operation.priority)
        if kind is OperationKind.BIND_ONCE:
            return self.bind_once(payload["event"], payload["handler"], operation.priority)
        if kind is OperationKind.UNBIND:
            return self.unbind(payload["event"], operation.priority)
        if kind is OperationKind.CLEAR_ALL:
            return self.clear_all(operation.priority, requeue=False)
        if kind is OperationKind.EMIT:
            if self._emit is None:
                logger.warning("dropping queued emit %s: no emitter attached", operation.event)
                return False
            return self._emit(payload["event"], payload.get("data"), operation.priority)
        return False
