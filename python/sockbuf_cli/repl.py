"""Interactive REPL for sockbuf-cli."""

from __future__ import annotations

import logging
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.patch_stdout import patch_stdout

from .commands import CommandRegistry
from .completion import ShellCompleter
from .context import ShellContext
from .history import HistoryStore
from .parser import CommandSyntaxError, split_command

LOGGER = logging.getLogger("sockbuf_cli.repl")


class ShellREPL:
    """prompt_toolkit REPL over the command registry."""

    def __init__(
        self,
        ctx: ShellContext,
        registry: CommandRegistry,
        *,
        history_store: Optional[HistoryStore] = None,
    ) -> None:
        self.ctx = ctx
        self.registry = registry
        self.history_store = history_store

    def run(self) -> int:
        history = InMemoryHistory()
        if self.history_store:
            for entry in self.history_store.snapshot():
                history.append_string(entry)
        completer = ShellCompleter(self.ctx, self.registry)
        session = PromptSession("sockbuf> ", history=history, completer=completer)
        buffer: list[str] = []
        while True:
            try:
                # Listener output arrives on the socket thread while the prompt is up.
                with patch_stdout():
                    line = session.prompt()
            except (EOFError, KeyboardInterrupt):
                print()
                self.ctx.disconnect()
                return 0
            if self._handle_multiline(buffer, line):
                continue
            payload = " ".join(buffer) if buffer else line
            buffer.clear()
            self._record_history(payload)
            self.dispatch(payload)

    def dispatch(self, line: str) -> int:
        stripped = line.strip()
        if not stripped:
            return 0
        try:
            argv = split_command(stripped)
        except CommandSyntaxError as exc:
            print(f"Parse error: {exc}")
            return 1
        if not argv:
            return 0
        cmd_name, *cmd_args = argv
        command = self.registry.get(cmd_name)
        if not command:
            print(f"Unknown command: {cmd_name}")
            return 1
        try:
            return command.run(self.ctx, cmd_args)
        except SystemExit:
            raise
        except Exception as exc:
            LOGGER.exception("command failed")
            print(f"Command '{cmd_name}' failed: {exc}")
            return 1

    def _handle_multiline(self, buffer: list[str], line: str) -> bool:
        stripped = line.rstrip()
        if stripped.endswith("\\"):
            buffer.append(stripped[:-1])
            return True
        if buffer:
            buffer.append(stripped)
        return False

    def _record_history(self, entry: str) -> None:
        if self.history_store:
            self.history_store.append(entry)
