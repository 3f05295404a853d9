"""Pending-operation buffer.

Operations issued while the socket is offline are parked here and replayed
once a connection is available.  Entries are kept in arrival order; ordering
by priority only happens when the buffer is drained.
"""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, List, Mapping, Optional


logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 2


class OperationKind(str, enum.Enum):
    BIND = "bind"
    BIND_ONCE = "bind_once"
    UNBIND = "unbind"
    CLEAR_ALL = "clear_all"
    EMIT = "emit"


def _freeze(payload: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(payload or {}))


@dataclass(frozen=True)
class Operation:
    """A deferred socket call."""

    kind: OperationKind
    payload: Mapping[str, Any] = field(default_factory=dict)
    priority: int = DEFAULT_PRIORITY

    @property
    def event(self) -> Optional[str]:
        return self.payload.get("event")


Visitor = Callable[[Operation], Any]


class PendingBuffer:
    """Unordered store of deferred operations with priority-ordered drains."""

    def __init__(self) -> None:
        self._entries: List[Operation] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __bool__(self) -> bool:
        return len(self) > 0

    def enqueue(
        self,
        kind: OperationKind,
        payload: Optional[Mapping[str, Any]] = None,
        priority: int = DEFAULT_PRIORITY,
    ) -> Operation:
        operation = Operation(kind=OperationKind(kind), payload=_freeze(payload), priority=int(priority))
        with self._lock:
            self._entries.append(operation)
        logger.debug("queued %s %s (priority %d)", operation.kind.value, operation.event or "-", operation.priority)
        return operation

    def snapshot(self) -> List[Operation]:
        """Return the entries in drain order without removing them."""
        with self._lock:
            return sorted(self._entries, key=lambda op: op.priority)

    def drain(self, visitor: Visitor) -> bool:
        """Remove every entry and hand them to ``visitor`` by ascending priority.

        Entries leave the buffer before the visitor runs.  An entry whose
        visitor call raises is logged and dropped; it is not queued again.
        """

        with self._lock:
            if not self._entries:
                return False
            items = sorted(self._entries, key=lambda op: op.priority)
            self._entries.clear()
        logger.debug("draining %d queued operation(s)", len(items))
        for operation in items:
            try:
                visitor(operation)
            except Exception:
                logger.exception("replay of %s %s failed", operation.kind.value, operation.event or "-")
        return True

    def flush(self) -> int:
        with self._lock:
            dropped = len(self._entries)
            self._entries.clear()
        if dropped:
            logger.debug("discarded %d queued operation(s)", dropped)
        return dropped
