"""
sockbuf-cli package.

Interactive shell for poking at a Socket.IO endpoint through a
``sockbuf.ConnectionManager``.  Use ``python -m sockbuf_cli`` or the
``sockbuf-cli`` script to launch it.
"""

from __future__ import annotations

from .cli import main

__all__ = ["main"]
__version__ = "0.1.0"
