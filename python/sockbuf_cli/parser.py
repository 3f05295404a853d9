"""Command-line tokenising and payload decoding for sockbuf-cli."""

from __future__ import annotations

import json
import shlex
from typing import Any, List


class CommandSyntaxError(ValueError):
    """Raised when a shell line cannot be tokenised (e.g. an open quote)."""


def split_command(line: str) -> List[str]:
    if not line or not line.strip():
        return []
    lexer = shlex.shlex(line, posix=True)
    lexer.whitespace_split = True
    lexer.commenters = ""
    try:
        return list(lexer)
    except ValueError as exc:
        raise CommandSyntaxError(f"{exc} in {line.strip()!r}") from exc


def parse_payload(text: str | None) -> Any:
    """Decode an emit payload; anything that is not JSON is sent as a string."""
    if text is None:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text
