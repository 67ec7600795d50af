# mcp_console/llm/providers/base.py
"""
The interface every model adapter implements.

``create_completion`` is the chat-with-tools call used by the query agent and
answers ``{"response": str | None, "tool_calls": [...]}`` with tool calls in
OpenAI function format.  ``generate_text`` is the one-prompt form used when a
server asks the client to sample.
"""

from __future__ import annotations

import abc
from typing import Any, Dict, List, Optional


class BaseLLMClient(abc.ABC):
    model: str

    @abc.abstractmethod
    async def create_completion(
        self,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
        *,
        max_tokens: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Run one chat turn over *messages*, offering *tools* to the model.

        *max_tokens* bounds the reply; None leaves it to the provider.
        """
        ...

    async def generate_text(self, prompt: str, *, max_tokens: Optional[int] = None) -> str:
        """Send *prompt* as a lone user message; empty string when the model says nothing."""
        result = await self.create_completion(
            [{"role": "user", "content": prompt}], max_tokens=max_tokens
        )
        return result.get("response") or ""
