# mcp_console/llm/providers/openai_client.py
"""
OpenAI chat-completion adapter for MCP-Console.

Shares sanitising / normalising helpers via OpenAIStyleMixin.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from openai import OpenAI

from mcp_console.llm.openai_style_mixin import OpenAIStyleMixin
from mcp_console.llm.providers.base import BaseLLMClient


class OpenAILLMClient(OpenAIStyleMixin, BaseLLMClient):
    """
    Thin wrapper around the official `openai` SDK.
    """

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key: Optional[str] = None,
        api_base: Optional[str] = None,
    ) -> None:
        self.model = model
        self.client = (
            OpenAI(api_key=api_key, base_url=api_base)
            if api_base else
            OpenAI(api_key=api_key)
        )

    async def create_completion(
        self,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
        *,
        max_tokens: Optional[int] = None,
    ) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"model": self.model, "messages": messages}
        tools = self._sanitize_tool_names(tools)
        if tools:
            kwargs["tools"] = tools
        if max_tokens:
            kwargs["max_tokens"] = max_tokens

        resp = await self._call_blocking(self.client.chat.completions.create, **kwargs)
        return self._normalise_message(resp.choices[0].message)
