# src/mcp_console/commands/resources.py
"""
Resources listing for the ``resources list`` command.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table

from mcp_console.session.capabilities import CapabilitySnapshot, ResourceTemplateRef


async def resources_action_async(
    snapshot: CapabilitySnapshot,
    *,
    console: Optional[Console] = None,
) -> List[Dict[str, Any]]:
    console = console or Console()
    rows: List[Dict[str, Any]] = []
    for ref in snapshot.readables:
        if isinstance(ref, ResourceTemplateRef):
            mime = ref.template.mimeType
            kind = "template"
        else:
            mime = ref.resource.mimeType
            kind = "resource"
        rows.append(
            {
                "kind": kind,
                "name": ref.display_name,
                "uri": ref.uri,
                "mimeType": mime or "-",
                "description": ref.description,
            }
        )

    if not rows:
        console.print("[dim]No resources recorded.[/dim]")
        return rows

    table = Table(title="Resources", header_style="bold magenta")
    table.add_column("Kind", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("URI", style="yellow")
    table.add_column("MIME-type")
    table.add_column("Description", overflow="fold")

    for item in rows:
        table.add_row(item["kind"], item["name"], item["uri"], item["mimeType"], item["description"])

    console.print(table)
    return rows
