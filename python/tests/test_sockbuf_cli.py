"""Unit tests for sockbuf-cli commands and helpers."""

from __future__ import annotations

import json
from functools import partial

import pytest
from prompt_toolkit.document import Document

from sockbuf import ConnectionManager
from sockbuf_cli.cli import main
from sockbuf_cli.commands import build_registry
from sockbuf_cli.completion import ShellCompleter
from sockbuf_cli.context import ShellContext
from sockbuf_cli.history import HistoryStore
from sockbuf_cli.parser import CommandSyntaxError, parse_payload, split_command
from sockbuf_cli.repl import ShellREPL


def _shell(factory, *, json_output: bool = False, uri: str | None = "http://localhost:3000") -> ShellREPL:
    ctx = ShellContext(
        uri=uri,
        json_output=json_output,
        manager_factory=partial(ConnectionManager, transport_factory=factory),
    )
    return ShellREPL(ctx, build_registry())


def test_on_while_offline_is_queued_then_applied(fake_factory, capsys):
    shell = _shell(fake_factory)
    assert shell.dispatch("on chat -p 1") == 0
    assert "on chat: queued" in capsys.readouterr().out
    assert shell.dispatch("pending") == 0
    out = capsys.readouterr().out
    assert "bind" in out and "chat" in out
    assert shell.dispatch("connect") == 0
    assert "Connected to http://localhost:3000" in capsys.readouterr().out
    assert shell.ctx.manager.list_events() == {"chat"}
    fake_factory.last.fire("chat", {"text": "hi"})
    assert "[chat] {'text': 'hi'}" in capsys.readouterr().out
    assert shell.ctx.received == [{"event": "chat", "data": {"text": "hi"}}]


def test_emit_parses_json_payload(fake_factory, capsys):
    shell = _shell(fake_factory)
    shell.dispatch("connect")
    capsys.readouterr()
    assert shell.dispatch('emit greet \'{"n": 1}\'') == 0
    assert fake_factory.last.emitted == [("greet", {"n": 1})]
    assert "emit greet: sent" in capsys.readouterr().out


def test_connect_without_uri_reports_error(fake_factory, capsys):
    shell = _shell(fake_factory, uri=None)
    assert shell.dispatch("connect") == 2
    assert "error: connect failed" in capsys.readouterr().out
    assert fake_factory.created == []


def test_status_and_list_in_json_mode(fake_factory, capsys):
    shell = _shell(fake_factory, json_output=True)
    shell.dispatch("connect")
    shell.dispatch("on news")
    capsys.readouterr()
    shell.dispatch("status")
    status = json.loads(capsys.readouterr().out)
    assert status["result"]["status"] == "connected"
    assert status["result"]["events"] == ["news"]
    shell.dispatch("clear")
    capsys.readouterr()
    shell.dispatch("list")
    listing = json.loads(capsys.readouterr().out)
    assert listing["result"]["events"] == []


def test_disconnect_and_unknown_command(fake_factory, capsys):
    shell = _shell(fake_factory)
    shell.dispatch("disconnect")
    assert "Not connected" in capsys.readouterr().out
    shell.dispatch("connect")
    shell.dispatch("disconnect")
    assert "Disconnected" in capsys.readouterr().out
    assert shell.dispatch("bogus") == 1
    assert "Unknown command: bogus" in capsys.readouterr().out


def test_bad_arguments_return_nonzero(fake_factory, capsys):
    shell = _shell(fake_factory)
    assert shell.dispatch("off") == 1
    assert shell.dispatch("on chat -p notanumber") == 1
    assert shell.dispatch('emit "unterminated') == 1


def test_main_runs_single_command(capsys):
    assert main(["-c", "status", "--log-level", "WARNING"]) == 0
    assert "Socket: disconnected" in capsys.readouterr().out


def test_completer_offers_commands_and_bound_events(fake_factory):
    shell = _shell(fake_factory)
    shell.dispatch("connect")
    shell.dispatch("on news")
    completer = ShellCompleter(shell.ctx, shell.registry)
    results = {c.text for c in completer.get_completions(Document("co"), None)}
    assert "connect" in results
    results = {c.text for c in completer.get_completions(Document("off ne"), None)}
    assert results == {"news"}


def test_parse_helpers():
    assert split_command("emit a 'b c'") == ["emit", "a", "b c"]
    assert split_command("") == []
    assert parse_payload('{"a": 1}') == {"a": 1}
    assert parse_payload("plain") == "plain"
    assert parse_payload(None) is None


def test_history_store_loads_existing_file(tmp_path):
    path = tmp_path / "history.txt"
    path.write_text("one\ntwo\n", encoding="utf-8")
    store = HistoryStore(str(path), limit=5)
    assert store.snapshot() == ["one", "two"]
    store.append("three")
    assert "three" in path.read_text(encoding="utf-8")


def test_history_store_limits_entries_and_skips_duplicates(tmp_path):
    path = tmp_path / "history.txt"
    store = HistoryStore(str(path), limit=3)
    for idx in range(5):
        store.append(f"cmd{idx}")
    store.append("cmd4")
    assert store.snapshot() == ["cmd2", "cmd3", "cmd4"]
    assert path.read_text(encoding="utf-8").strip().splitlines() == ["cmd2", "cmd3", "cmd4"]


def test_split_command_rejects_open_quote():
    with pytest.raises(CommandSyntaxError):
        split_command('emit "unterminated')
    assert split_command("emit a#b") == ["emit", "a#b"]


def test_parse_error_is_reported_by_shell(fake_factory, capsys):
    shell = _shell(fake_factory)
    assert shell.dispatch("on 'chat") == 1
    assert "Parse error: No closing quotation" in capsys.readouterr().out
    assert shell.ctx.manager.pending == 0


def test_help_lists_aliases_and_queueable_commands(fake_factory, capsys):
    shell = _shell(fake_factory)
    assert shell.dispatch("help") == 0
    lines = capsys.readouterr().out.splitlines()
    emit_line = next(line for line in lines if line.startswith("emit "))
    assert "[-p N]" in emit_line and "aliases: send" in emit_line
    status_line = next(line for line in lines if line.startswith("status "))
    assert "[-p N]" not in status_line


def test_help_for_one_command_shows_usage(fake_factory, capsys):
    shell = _shell(fake_factory)
    assert shell.dispatch("? unlisten") == 0
    out = capsys.readouterr().out
    assert out.startswith("usage: off [-p PRIORITY] event")
    assert "aliases: unlisten" in out
    assert "-p/--priority" in out
    assert shell.dispatch("help bogus") == 1
    assert "Unknown command: bogus" in capsys.readouterr().out


def test_exit_reports_dropped_operations(offline_factory, capsys):
    shell = _shell(offline_factory)
    shell.dispatch("connect")
    shell.dispatch("emit hello")
    shell.dispatch("on chat")
    capsys.readouterr()
    with pytest.raises(SystemExit):
        shell.dispatch("quit")
    assert "Dropping 2 queued operation(s)" in capsys.readouterr().out
    assert shell.ctx.manager.get_client() is None


def test_exit_before_any_command_is_quiet(fake_factory, capsys):
    shell = _shell(fake_factory)
    with pytest.raises(SystemExit):
        shell.dispatch("exit")
    assert capsys.readouterr().out == ""
    assert shell.ctx.has_manager is False
