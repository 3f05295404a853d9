"""Connection status and queue inspection commands."""

from __future__ import annotations

from typing import List

from .base import Command
from ..context import ShellContext
from ..output import describe_operation, emit_result, render_pending


class StatusCommand(Command):
    def __init__(self) -> None:
        super().__init__("status", "Show connection status", aliases=("info",))

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        manager = ctx.manager
        client = manager.get_client()
        connected = manager.is_connected()
        sid = getattr(client, "id", None) if client is not None else None
        data = {
            "status": "connected" if connected else "disconnected",
            "uri": ctx.uri,
            "id": sid,
            "events": sorted(manager.list_events()),
            "pending": manager.pending,
        }
        state = "connected" if connected else "disconnected"
        emit_result(ctx, message=f"Socket: {state} uri={ctx.uri or '-'} id={sid or '-'}", data=data)
        if not ctx.json_output:
            print(f"  events: {', '.join(data['events']) or '(none)'}")
            print(f"  pending: {manager.pending}")
        return 0


class PendingCommand(Command):
    def __init__(self) -> None:
        super().__init__("pending", "List queued operations in drain order", aliases=("queue",))

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        operations = ctx.manager.buffer.snapshot()
        if ctx.json_output:
            emit_result(ctx, message="", data={"pending": [describe_operation(op) for op in operations]})
            return 0
        render_pending(operations)
        return 0
