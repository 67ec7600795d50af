# mcp_console/interactive/__init__.py
from mcp_console.interactive.orchestrator import (
    MAIN_MENU,
    InteractiveOrchestrator,
    coerce_value,
    format_resource_body,
    interactive_mode,
)

__all__ = [
    "MAIN_MENU",
    "InteractiveOrchestrator",
    "coerce_value",
    "format_resource_body",
    "interactive_mode",
]
