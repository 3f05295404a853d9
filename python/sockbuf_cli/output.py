"""Output helpers for sockbuf-cli."""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, Mapping, Optional

from sockbuf import Operation

from .context import ShellContext


def _json_dump(payload: Mapping[str, Any]) -> str:
    return json.dumps(payload, indent=2, sort_keys=True, default=str)


def emit_result(ctx: ShellContext, *, message: str, data: Optional[Mapping[str, Any]] = None) -> None:
    """Emit a successful command result."""
    if ctx.json_output:
        payload: Dict[str, Any] = {"status": "ok"}
        if data is not None:
            payload["result"] = data
        else:
            payload["message"] = message
        print(_json_dump(payload))
    else:
        print(message)


def emit_error(ctx: ShellContext, *, message: str, data: Optional[Mapping[str, Any]] = None) -> None:
    """Emit an error message respecting JSON mode."""
    payload: Dict[str, Any] = {"status": "error", "error": message}
    if data:
        payload["details"] = dict(data)
    if ctx.json_output:
        print(_json_dump(payload))
    else:
        print(f"error: {message}")


def describe_operation(operation: Operation) -> Dict[str, Any]:
    entry: Dict[str, Any] = {"kind": operation.kind.value, "priority": operation.priority}
    if operation.event is not None:
        entry["event"] = operation.event
    if "data" in operation.payload:
        entry["data"] = operation.payload["data"]
    return entry


def render_pending(operations: Iterable[Operation]) -> None:
    """Print queued operations in drain order."""
    rows = [describe_operation(op) for op in operations]
    if not rows:
        print("  pending: (none)")
        return
    print("  pending:")
    print("      Prio  Kind        Event")
    print("      ----  ----------  ----------------")
    for row in rows:
        print(f"      {row['priority']!s:>4}  {row['kind']:<10}  {row.get('event', '-')}")


__all__ = ["emit_result", "emit_error", "describe_operation", "render_pending"]
