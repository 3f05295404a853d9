"""Shell context shared by every command."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from sockbuf import ConnectionConfig, ConnectionManager

LOGGER = logging.getLogger("sockbuf_cli.context")


@dataclass
class ShellContext:
    """Holds the connection manager and output preferences."""

    uri: Optional[str] = None
    json_output: bool = False
    options: Dict[str, Any] = field(default_factory=dict)
    connection_config: ConnectionConfig = field(default_factory=ConnectionConfig)
    manager_factory: Callable[[ConnectionConfig], ConnectionManager] = ConnectionManager
    received: List[Dict[str, Any]] = field(default_factory=list)
    _manager: Optional[ConnectionManager] = field(default=None, init=False, repr=False)

    @property
    def manager(self) -> ConnectionManager:
        if self._manager is None:
            self._manager = self.manager_factory(self.connection_config)
        return self._manager

    @property
    def has_manager(self) -> bool:
        return self._manager is not None

    def connect(self, uri: Optional[str] = None) -> Any:
        if uri:
            self.uri = uri
        LOGGER.debug("connecting to %s", self.uri)
        return self.manager.connect(self.uri, self.options)

    def disconnect(self) -> bool:
        if self._manager is None:
            return False
        return self._manager.disconnect()

    def make_printer(self, event: str) -> Callable[..., None]:
        """Build a listener that records and prints every payload for ``event``."""

        def handler(*args: Any) -> None:
            payload = args[0] if len(args) == 1 else list(args)
            self.received.append({"event": event, "data": payload})
            if self.json_output:
                print(json.dumps({"event": event, "data": payload}, default=str))
            else:
                print(f"[{event}] {payload!r}")

        return handler
