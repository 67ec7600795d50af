# mcp_console/llm/__init__.py
"""Provider-agnostic LLM access used by the agent loop and the sampling bridge."""
from mcp_console.llm.llm_client import get_llm_client
from mcp_console.llm.providers.base import BaseLLMClient

__all__ = ["BaseLLMClient", "get_llm_client"]
