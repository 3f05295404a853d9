"""Connection lifecycle commands: connect, disconnect, exit."""

from __future__ import annotations

import argparse
from typing import List

from sockbuf import ConfigurationError, TransportError

from .base import Command
from ..context import ShellContext
from ..output import emit_error, emit_result


class ConnectCommand(Command):
    def __init__(self) -> None:
        super().__init__("connect", "Connect to a Socket.IO endpoint", aliases=("open",))
        self.parser = argparse.ArgumentParser(prog="connect", add_help=False)
        self.parser.add_argument("uri", nargs="?", help="Endpoint uri (defaults to --uri)")

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        args = self.parse_args(argv)
        if args is None:
            return 1
        try:
            client = ctx.connect(args.uri)
        except (ConfigurationError, TransportError) as exc:
            emit_error(ctx, message=f"connect failed: {exc}")
            return 2
        sid = getattr(client, "id", None)
        connected = bool(getattr(client, "connected", False))
        data = {"result": "connected" if connected else "connecting", "uri": ctx.uri, "id": sid}
        emit_result(ctx, message=f"Connected to {ctx.uri} id={sid or '-'}", data=data)
        return 0


class DisconnectCommand(Command):
    def __init__(self) -> None:
        super().__init__("disconnect", "Close the current connection", aliases=("close",))

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        closed = ctx.disconnect()
        message = "Disconnected" if closed else "Not connected"
        emit_result(ctx, message=message, data={"result": "disconnected" if closed else "noop"})
        return 0


class ExitCommand(Command):
    def __init__(self) -> None:
        super().__init__("exit", "Disconnect and leave the shell", aliases=("quit", "q"))

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        dropped = ctx.manager.pending if ctx.has_manager else 0
        ctx.disconnect()
        if dropped:
            emit_result(
                ctx,
                message=f"Dropping {dropped} queued operation(s)",
                data={"result": "exit", "dropped": dropped},
            )
        raise SystemExit(0)
