"""Listener commands: on, once, off, clear, list."""

from __future__ import annotations

from typing import List

from .base import Command, priority_parser
from ..context import ShellContext
from ..output import emit_result


def _outcome(applied: bool) -> str:
    return "applied" if applied else "queued"


class OnCommand(Command):
    def __init__(self) -> None:
        super().__init__("on", "Print every payload received for an event", aliases=("listen",))
        self.parser = priority_parser("on")
        self.parser.add_argument("event")

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        args = self.parse_args(argv)
        if args is None:
            return 1
        applied = ctx.manager.on(args.event, ctx.make_printer(args.event), args.priority)
        emit_result(
            ctx,
            message=f"on {args.event}: {_outcome(applied)}",
            data={"event": args.event, "result": _outcome(applied)},
        )
        return 0


class OnceCommand(Command):
    def __init__(self) -> None:
        super().__init__("once", "Print the next payload received for an event")
        self.parser = priority_parser("once")
        self.parser.add_argument("event")

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        args = self.parse_args(argv)
        if args is None:
            return 1
        applied = ctx.manager.once(args.event, ctx.make_printer(args.event), args.priority)
        emit_result(
            ctx,
            message=f"once {args.event}: {_outcome(applied)}",
            data={"event": args.event, "result": _outcome(applied)},
        )
        return 0


class OffCommand(Command):
    def __init__(self) -> None:
        super().__init__("off", "Stop listening for an event", aliases=("unlisten",))
        self.parser = priority_parser("off")
        self.parser.add_argument("event")

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        args = self.parse_args(argv)
        if args is None:
            return 1
        applied = ctx.manager.off(args.event, args.priority)
        emit_result(
            ctx,
            message=f"off {args.event}: {_outcome(applied)}",
            data={"event": args.event, "result": _outcome(applied)},
        )
        return 0


class ClearCommand(Command):
    def __init__(self) -> None:
        super().__init__("clear", "Remove every listener")
        self.parser = priority_parser("clear")

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        args = self.parse_args(argv)
        if args is None:
            return 1
        applied = ctx.manager.clear_all(args.priority)
        emit_result(ctx, message=f"clear: {_outcome(applied)}", data={"result": _outcome(applied)})
        return 0


class ListCommand(Command):
    def __init__(self) -> None:
        super().__init__("list", "Show events bound on the socket", aliases=("ls",))

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        events = sorted(ctx.manager.list_events())
        emit_result(ctx, message="\n".join(events) if events else "(no events)", data={"events": events})
        return 0
