# src/mcp_console/commands/prompts.py
"""
List the prompts the server advertised.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table

from mcp_console.session.capabilities import CapabilitySnapshot


async def prompts_action_async(
    snapshot: CapabilitySnapshot,
    *,
    console: Optional[Console] = None,
) -> List[Dict[str, Any]]:
    console = console or Console()
    prompts = [
        {
            "name": ref.name,
            "arguments": ", ".join(ref.argument_names) or "-",
            "description": ref.description,
        }
        for ref in snapshot.prompts
    ]
    if not prompts:
        console.print("[dim]No prompts recorded.[/dim]")
        return prompts

    table = Table(title="Prompts", header_style="bold magenta")
    table.add_column("Name", style="yellow")
    table.add_column("Arguments", style="cyan")
    table.add_column("Description", overflow="fold")

    for item in prompts:
        table.add_row(item["name"], item["arguments"], item["description"])

    console.print(table)
    return prompts
