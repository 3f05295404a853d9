"""Command base classes for sockbuf-cli."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..context import ShellContext


@dataclass
class Command:
    """A shell command; ``parser`` describes its arguments when it takes any."""

    name: str
    description: str
    aliases: Sequence[str] = field(default_factory=tuple)
    parser: Optional[argparse.ArgumentParser] = field(default=None, repr=False, compare=False)

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        raise NotImplementedError("Command must implement run()")

    @property
    def queueable(self) -> bool:
        """True when the command accepts ``-p/--priority`` and may be deferred."""
        if self.parser is None:
            return False
        return any("--priority" in action.option_strings for action in self.parser._actions)

    def usage(self) -> str:
        if self.parser is None:
            return self.name
        return self.parser.format_usage().replace("usage: ", "", 1).strip()

    def summary(self) -> str:
        line = f"{self.name:<12} {self.description}"
        if self.queueable:
            line += " [-p N]"
        if self.aliases:
            line += f" (aliases: {', '.join(self.aliases)})"
        return line

    def parse_args(self, argv: List[str]) -> Optional[argparse.Namespace]:
        if self.parser is None:
            return argparse.Namespace()
        try:
            return self.parser.parse_args(argv)
        except SystemExit:
            return None


def priority_parser(prog: str) -> argparse.ArgumentParser:
    """Argument parser pre-loaded with the shared ``-p/--priority`` flag."""
    parser = argparse.ArgumentParser(prog=prog, add_help=False)
    parser.add_argument("-p", "--priority", type=int, help="Queue priority (lower drains first)")
    return parser
