# src/mcp_console/commands/tools.py
"""
Tools listing for the ``tools list`` command.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from mcp_console.session.capabilities import CapabilitySnapshot, ToolRef


def _hints(ref: ToolRef) -> str:
    annotations = ref.tool.annotations
    if annotations is None:
        return "-"
    flags = []
    if annotations.readOnlyHint:
        flags.append("read-only")
    if annotations.destructiveHint:
        flags.append("destructive")
    if annotations.idempotentHint:
        flags.append("idempotent")
    if annotations.openWorldHint:
        flags.append("open-world")
    return ", ".join(flags) or "-"


def _parameters(ref: ToolRef) -> str:
    required = set((ref.tool.inputSchema or {}).get("required", []))
    params = [
        f"{name}{' (required)' if name in required else ''}: {kind}"
        for name, kind in ref.input_fields
    ]
    return "\n".join(params) if params else "None"


def create_tools_table(tools: List[ToolRef], show_details: bool = False) -> Table:
    """Create a Rich table for displaying tools."""
    table = Table(title=f"{len(tools)} Available Tools", header_style="bold magenta")
    table.add_column("Tool", style="green")
    table.add_column("Title", style="cyan")
    table.add_column("Description", overflow="fold")
    if show_details:
        table.add_column("Parameters", style="yellow")
        table.add_column("Hints", style="dim")

    for ref in tools:
        row = [ref.name, ref.display_name, ref.description]
        if show_details:
            row += [_parameters(ref), _hints(ref)]
        table.add_row(*row)
    return table


async def tools_action_async(
    snapshot: CapabilitySnapshot,
    *,
    show_details: bool = False,
    show_raw: bool = False,
    console: Optional[Console] = None,
) -> List[Any]:
    """
    Render the discovered tools.

    If *show_raw* is True, prints raw JSON; otherwise prints a table.
    Returns the underlying list of refs or raw dicts.
    """
    console = console or Console()
    tools = list(snapshot.tools)
    if not tools:
        console.print("[yellow]No tools available.[/yellow]")
        return []

    if show_raw:
        raw_defs: List[Dict[str, Any]] = [
            ref.tool.model_dump(mode="json", exclude_none=True) for ref in tools
        ]
        console.print(Syntax(json.dumps(raw_defs, indent=2), "json", theme="monokai", line_numbers=True))
        return raw_defs

    console.print(create_tools_table(tools, show_details=show_details))
    console.print(f"[green]Total tools available: {len(tools)}[/green]")
    return tools
