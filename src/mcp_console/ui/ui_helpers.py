# mcp_console/ui/ui_helpers.py
"""
Terminal housekeeping and the start-up banner.
"""
from __future__ import annotations

import logging
import os
import subprocess
import sys
from typing import Dict, Optional

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel

log = logging.getLogger(__name__)

_console = Console()


def restore_terminal() -> None:
    """Put a POSIX tty back into sane mode after prompt_toolkit or a signal."""
    if os.name != "posix" or not sys.stdin.isatty():
        return
    try:
        subprocess.run(["stty", "sane"], check=False)
    except OSError as exc:
        log.debug("stty sane failed: %s", exc)


def display_welcome_banner(
    server: str,
    provider: str,
    model: str,
    counts: Optional[Dict[str, int]] = None,
    console: Optional[Console] = None,
) -> None:
    """Print one banner when the interactive console starts."""
    summary = ", ".join(f"{n} {kind}" for kind, n in (counts or {}).items()) or "nothing discovered"
    (console or _console).print(
        Panel(
            Markdown(
                f"# Welcome to MCP Console!\n\n"
                f"**Server:** {server}  |  **Provider:** {provider}"
                f"  |  **Model:** {model}\n\n"
                f"Discovered {summary}."
            ),
            title="MCP Console",
            border_style="yellow",
            expand=True,
        )
    )
