"""Emit command."""

from __future__ import annotations

from typing import List

from sockbuf import TransportError

from .base import Command, priority_parser
from ..context import ShellContext
from ..output import emit_error, emit_result
from ..parser import parse_payload


class EmitCommand(Command):
    def __init__(self) -> None:
        super().__init__("emit", "Send an event (payload parsed as JSON when possible)", aliases=("send",))
        self.parser = priority_parser("emit")
        self.parser.add_argument("event")
        self.parser.add_argument("payload", nargs="?")

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        args = self.parse_args(argv)
        if args is None:
            return 1
        data = parse_payload(args.payload)
        try:
            sent = ctx.manager.emit(args.event, data, args.priority)
        except TransportError as exc:
            emit_error(ctx, message=str(exc))
            return 2
        outcome = "sent" if sent else "queued"
        emit_result(ctx, message=f"emit {args.event}: {outcome}", data={"event": args.event, "result": outcome})
        return 0
