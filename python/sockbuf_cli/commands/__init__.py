"""Command registry for sockbuf-cli."""

from __future__ import annotations

import argparse
from typing import Dict, Iterable, List, Optional

from .base import Command
from .connect import ConnectCommand, DisconnectCommand, ExitCommand
from .emit import EmitCommand
from .listeners import ClearCommand, ListCommand, OffCommand, OnCommand, OnceCommand
from .status import PendingCommand, StatusCommand
from ..context import ShellContext


class CommandRegistry:
    """Stores the known commands and resolves aliases."""

    def __init__(self) -> None:
        self._commands: Dict[str, Command] = {}
        self._ordered: List[Command] = []

    def register(self, command: Command) -> None:
        self._ordered.append(command)
        self._commands[command.name] = command
        for alias in command.aliases:
            self._commands[alias] = command

    def get(self, name: str) -> Optional[Command]:
        return self._commands.get(name)

    def list_commands(self) -> Iterable[Command]:
        return self._ordered


class HelpCommand(Command):
    """``help`` lists every command; ``help <name>`` shows one command's usage."""

    def __init__(self, registry: CommandRegistry) -> None:
        super().__init__("help", "Show available commands or usage for one", aliases=("?",))
        self.registry = registry
        self.parser = argparse.ArgumentParser(prog="help", add_help=False)
        self.parser.add_argument("command", nargs="?")

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        args = self.parse_args(argv)
        if args is None:
            return 1
        if args.command is None:
            for command in self.registry.list_commands():
                print(command.summary())
            print("Commands marked [-p N] queue while offline; lower priorities replay first.")
            return 0
        command = self.registry.get(args.command)
        if command is None:
            print(f"Unknown command: {args.command}")
            return 1
        print(f"usage: {command.usage()}")
        print(f"  {command.description}")
        if command.aliases:
            print(f"  aliases: {', '.join(command.aliases)}")
        if command.queueable:
            print("  -p/--priority N  queue priority while offline (default from config)")
        return 0


def build_registry() -> CommandRegistry:
    registry = CommandRegistry()
    commands = [
        HelpCommand(registry),
        ConnectCommand(),
        DisconnectCommand(),
        StatusCommand(),
        OnCommand(),
        OnceCommand(),
        OffCommand(),
        ClearCommand(),
        ListCommand(),
        EmitCommand(),
        PendingCommand(),
        ExitCommand(),
    ]
    for command in commands:
        registry.register(command)
    return registry


__all__ = ["Command", "CommandRegistry", "HelpCommand", "build_registry"]
