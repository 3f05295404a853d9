"""sockbuf-cli entry point."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List

from sockbuf import ConnectionConfig

from .commands import build_registry
from .context import ShellContext
from .history import HistoryStore
from .repl import ShellREPL

LOG = logging.getLogger("sockbuf_cli.cli")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Interactive Socket.IO shell with offline queueing")
    parser.add_argument("--uri", default=os.environ.get("SOCKBUF_URI"), help="Endpoint uri (env SOCKBUF_URI)")
    parser.add_argument("--namespace", default="/", help="Socket.IO namespace (default /)")
    parser.add_argument("--json", action="store_true", help="Emit JSON output when supported")
    parser.add_argument("--log-level", default=os.environ.get("SOCKBUF_LOG", "INFO"), help="Logging level (default INFO)")
    parser.add_argument(
        "-c",
        "--command",
        help="Execute a single command non-interactively (quote the command string)",
    )
    parser.add_argument(
        "--history",
        type=Path,
        default=Path.home() / ".sockbuf-history",
        help="Path to command history file",
    )
    parser.add_argument(
        "--keep-pending",
        action="store_true",
        help="Keep queued operations across a disconnect instead of discarding them",
    )
    parser.add_argument(
        "--no-reconnect",
        action="store_true",
        help="Disable automatic reconnection",
    )
    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)
    options = {"namespace": args.namespace}
    if args.no_reconnect:
        options["reconnection"] = False
    ctx = ShellContext(
        uri=args.uri,
        json_output=args.json,
        options=options,
        connection_config=ConnectionConfig(discard_on_disconnect=not args.keep_pending),
    )
    registry = build_registry()
    if args.command:
        LOG.debug("running single command: %s", args.command)
        repl = ShellREPL(ctx, registry)
        try:
            return repl.dispatch(args.command)
        except SystemExit as exc:
            return int(exc.code or 0)
        finally:
            ctx.disconnect()
    repl = ShellREPL(ctx, registry, history_store=HistoryStore(str(args.history)))
    try:
        return repl.run()
    except SystemExit as exc:
        return int(exc.code or 0)
    except KeyboardInterrupt:
        print()
        return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
