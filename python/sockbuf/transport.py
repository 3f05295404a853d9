"""
Transport layer for sockbuf.

Responsibilities:
    * Define the handle shape the connection manager talks to.
    * Adapt ``socketio.Client`` (python-socketio) to that shape.

A transport handle exposes ``connected``, ``id``, ``on(name, handler)``,
``once(name, handler)``, ``off(name, handler=None)``, ``emit(name, data)``
and ``disconnect()``.  ``off`` with a handler removes only that listener
(or the ``once`` wrapper around it); without one it removes every listener
for the name.  It raises the lifecycle signals ``connect``,
``disconnect`` (with a reason) and optionally ``reconnect``/``ping``.
Handles may also provide ``open()``; the manager calls it once its lifecycle
listeners are attached so that the first ``connect`` cannot be missed.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Dict, List, Mapping, Optional

import socketio
from socketio import exceptions as sio_exceptions

from .errors import ConfigurationError, TransportError


logger = logging.getLogger(__name__)

Listener = Callable[..., Any]
TransportFactory = Callable[[str, Mapping[str, Any]], Any]


@dataclass
class TransportConfig:
    namespace: str = "/"
    reconnection: bool = True
    reconnection_attempts: int = 0
    reconnection_delay: float = 1.0
    reconnection_delay_max: float = 5.0
    randomization_factor: float = 0.5
    transports: Optional[List[str]] = None
    socketio_path: str = "socket.io"
    wait_timeout: float = 1.0
    retry: bool = False
    headers: Dict[str, str] = field(default_factory=dict)
    auth: Optional[Any] = None
    ssl_verify: bool = True

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, Any]]) -> "TransportConfig":
        options = dict(options or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ConfigurationError(f"unknown transport option(s): {', '.join(unknown)}")
        return cls(**options)


class SocketIOTransport:
    """Socket.IO client handle with multi-listener ``on``/``once``/``off``."""

    def __init__(
        self,
        uri: str,
        config: Optional[TransportConfig] = None,
        *,
        client: Optional[socketio.Client] = None,
    ) -> None:
        self.uri = uri
        self.config = config or TransportConfig()
        self._client = client or socketio.Client(
            reconnection=self.config.reconnection,
            reconnection_attempts=self.config.reconnection_attempts,
            reconnection_delay=self.config.reconnection_delay,
            reconnection_delay_max=self.config.reconnection_delay_max,
            randomization_factor=self.config.randomization_factor,
            ssl_verify=self.config.ssl_verify,
        )
        self._listeners: Dict[str, List[Listener]] = {}
        self._lock = threading.Lock()

    #
    # Handle surface
    #
    @property
    def connected(self) -> bool:
        # socketio.Client raises "connect" before flipping its own flag.
        client = self._client
        return bool(client.connected or self.config.namespace in client.namespaces)

    @property
    def id(self) -> Optional[str]:
        return self._client.get_sid(self.config.namespace) or self._client.sid

    @property
    def client(self) -> socketio.Client:
        return self._client

    def open(self) -> None:
        """Start the connection using the stored uri and config."""
        cfg = self.config
        try:
            self._client.connect(
                self.uri,
                headers=dict(cfg.headers),
                auth=cfg.auth,
                transports=cfg.transports,
                namespaces=[cfg.namespace],
                socketio_path=cfg.socketio_path,
                wait_timeout=cfg.wait_timeout,
                retry=cfg.retry,
            )
        except sio_exceptions.ConnectionError as exc:
            raise TransportError(f"connect failed: {exc}") from exc

    def on(self, name: str, handler: Listener) -> None:
        with self._lock:
            listeners = self._listeners.get(name)
            if listeners is None:
                listeners = self._listeners[name] = []
                self._client.on(name, self._make_dispatcher(name), namespace=self.config.namespace)
            listeners.append(handler)

    def once(self, name: str, handler: Listener) -> None:
        def fire_once(*args: Any) -> Any:
            self._remove_listener(name, fire_once)
            return handler(*args)

        fire_once.listener = handler  # type: ignore[attr-defined]
        self.on(name, fire_once)

    def off(self, name: str, handler: Optional[Listener] = None) -> None:
        if handler is not None:
            self._remove_listener(name, handler)
            return
        with self._lock:
            self._listeners.pop(name, None)
            self._client.handlers.get(self.config.namespace, {}).pop(name, None)

    def emit(self, name: str, data: Any = None) -> None:
        try:
            self._client.emit(name, data, namespace=self.config.namespace)
        except sio_exceptions.SocketIOError as exc:
            raise TransportError(f"emit {name} failed: {exc}") from exc

    def disconnect(self) -> None:
        self._client.disconnect()

    def listener_count(self, name: str) -> int:
        with self._lock:
            return len(self._listeners.get(name, ()))

    #
    # Internal helpers
    #
    def _make_dispatcher(self, name: str) -> Listener:
        def dispatch(*args: Any) -> Any:
            with self._lock:
                listeners = list(self._listeners.get(name, ()))
            result = None
            for listener in listeners:
                result = listener(*args)
            return result

        return dispatch

    def _remove_listener(self, name: str, handler: Listener) -> None:
        with self._lock:
            listeners = self._listeners.get(name)
            if not listeners:
                return
            for index, listener in enumerate(listeners):
                if listener is handler or getattr(listener, "listener", None) is handler:
                    del listeners[index]
                    break
            else:
                return
            if not listeners:
                self._listeners.pop(name, None)
                self._client.handlers.get(self.config.namespace, {}).pop(name, None)


def socketio_transport(uri: str, options: Optional[Mapping[str, Any]] = None) -> SocketIOTransport:
    """Default transport factory."""
    return SocketIOTransport(uri, TransportConfig.from_options(options))
