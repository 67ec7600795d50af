# mcp_console/agent/__init__.py
from mcp_console.agent.loop import (
    NO_RESPONSE,
    QueryResult,
    ToolInvocation,
    ToolSpec,
    build_toolset,
    run_query,
    sanitize_schema,
    select_answer,
)

__all__ = [
    "NO_RESPONSE",
    "QueryResult",
    "ToolInvocation",
    "ToolSpec",
    "build_toolset",
    "run_query",
    "sanitize_schema",
    "select_answer",
]
