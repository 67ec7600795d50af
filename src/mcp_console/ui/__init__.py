# mcp_console/ui/__init__.py
from mcp_console.ui.operator import Choice, Operator, TerminalOperator

__all__ = ["Choice", "Operator", "TerminalOperator"]
