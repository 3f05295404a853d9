"""prompt_toolkit completer for sockbuf-cli."""

from __future__ import annotations

import shlex
from typing import Iterable, List

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from .commands import CommandRegistry
from .context import ShellContext

EVENT_COMMANDS = {"off", "unlisten"}


def _normalise_tokens(text: str) -> List[str]:
    if not text:
        return []
    try:
        tokens = shlex.split(text, posix=True)
        trailing = text[-1].isspace()
    except ValueError:
        tokens = text.strip().split()
        trailing = text.endswith((" ", "\t"))
    if trailing:
        tokens.append("")
    return tokens


class ShellCompleter(Completer):
    """Completes command names, and bound event names for ``off``."""

    def __init__(self, ctx: ShellContext, registry: CommandRegistry) -> None:
        self.ctx = ctx
        self.registry = registry

    def get_completions(self, document: Document, complete_event) -> Iterable[Completion]:
        tokens = _normalise_tokens(document.text_before_cursor)
        if len(tokens) <= 1:
            prefix = tokens[0] if tokens else ""
            candidates = self._command_names()
        elif tokens[0] in EVENT_COMMANDS and len(tokens) == 2:
            prefix = tokens[-1]
            candidates = sorted(self.ctx.manager.list_events())
        else:
            return
        for entry in self._format_candidates(candidates, prefix):
            yield Completion(entry, start_position=-len(prefix))

    def _command_names(self) -> List[str]:
        names: List[str] = []
        for command in self.registry.list_commands():
            names.append(command.name)
            names.extend(command.aliases)
        return sorted(set(names))

    @staticmethod
    def _format_candidates(candidates: Iterable[str], prefix: str = "") -> List[str]:
        needle = prefix.lower()
        return sorted(dict.fromkeys(c for c in candidates if c.lower().startswith(needle)))
