# mcp_console/session/__init__.py
from mcp_console.session.capabilities import (
    CapabilityRef,
    CapabilitySnapshot,
    PromptRef,
    ReadableRef,
    ResourceRef,
    ResourceTemplateRef,
    ToolRef,
)
from mcp_console.session.session import INIT_TIMEOUT, McpSession, discover

__all__ = [
    "CapabilityRef",
    "CapabilitySnapshot",
    "INIT_TIMEOUT",
    "McpSession",
    "PromptRef",
    "ReadableRef",
    "ResourceRef",
    "ResourceTemplateRef",
    "ToolRef",
    "discover",
]
