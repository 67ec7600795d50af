# mcp_console/llm/providers/anthropic_client.py
"""
Anthropic chat-completion adapter for MCP-Console (Claude family).

* Accepts OpenAI-style **or** bare function schemas and converts them to
  Claude's `input_schema`.
* Lifts `system` messages to the top-level arg (Claude requirement) and omits
  the key entirely when there is no system prompt.
* Converts assistant tool-calls → `tool_use` blocks and tool results →
  `tool_result` blocks.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

from anthropic import Anthropic

from mcp_console.llm.openai_style_mixin import OpenAIStyleMixin
from mcp_console.llm.providers.base import BaseLLMClient

log = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 1024


def _safe_get(obj: Any, key: str, default: Any = None) -> Any:
    return obj.get(key, default) if isinstance(obj, dict) else getattr(obj, key, default)


def _parse_claude_response(resp) -> Dict[str, Any]:
    text_parts: List[str] = []
    tool_calls: List[Dict[str, Any]] = []
    for blk in getattr(resp, "content", None) or []:
        kind = _safe_get(blk, "type")
        if kind == "text":
            text_parts.append(_safe_get(blk, "text", ""))
        elif kind == "tool_use":
            tool_calls.append(
                {
                    "id": _safe_get(blk, "id") or f"call_{uuid.uuid4().hex[:8]}",
                    "type": "function",
                    "function": {
                        "name": _safe_get(blk, "name"),
                        "arguments": json.dumps(_safe_get(blk, "input", {})),
                    },
                }
            )

    text = "".join(text_parts).strip()
    return {"response": text or None, "tool_calls": tool_calls}


def _convert_tools(tools: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    converted: List[Dict[str, Any]] = []
    for entry in tools or []:
        fn = entry.get("function", entry)
        converted.append(
            {
                "name": fn["name"],
                "description": fn.get("description", ""),
                "input_schema": fn.get("parameters") or {"type": "object", "properties": {}},
            }
        )
    return converted


def _split_for_anthropic(messages: List[Dict[str, Any]]) -> Tuple[str, List[Dict[str, Any]]]:
    sys_txt: List[str] = []
    out: List[Dict[str, Any]] = []

    for msg in messages:
        role = msg.get("role")

        if role == "system":
            sys_txt.append(msg.get("content", ""))
        elif role == "assistant" and msg.get("tool_calls"):
            blocks = [
                {
                    "type": "tool_use",
                    "id": tc["id"],
                    "name": tc["function"]["name"],
                    "input": json.loads(tc["function"].get("arguments") or "{}"),
                }
                for tc in msg["tool_calls"]
            ]
            out.append({"role": "assistant", "content": blocks})
        elif role == "tool":
            out.append(
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "tool_result",
                            "tool_use_id": msg.get("tool_call_id"),
                            "content": msg.get("content") or "",
                        }
                    ],
                }
            )
        elif role in {"user", "assistant"} and msg.get("content") is not None:
            content = msg["content"]
            if isinstance(content, str):
                content = [{"type": "text", "text": content}]
            out.append({"role": role, "content": content})

    return "\n".join(sys_txt).strip(), out


class AnthropicLLMClient(OpenAIStyleMixin, BaseLLMClient):
    def __init__(
        self,
        model: str = "claude-3-7-sonnet-latest",
        api_key: Optional[str] = None,
        api_base: Optional[str] = None,
    ) -> None:
        self.model = model
        kwargs: Dict[str, Any] = {"base_url": api_base} if api_base else {}
        if api_key:
            kwargs["api_key"] = api_key
        self.client = Anthropic(**kwargs)

    async def create_completion(
        self,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
        *,
        max_tokens: Optional[int] = None,
    ) -> Dict[str, Any]:
        anth_tools = _convert_tools(self._sanitize_tool_names(tools))
        system_text, msg_no_system = _split_for_anthropic(messages)

        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": msg_no_system,
            "max_tokens": max_tokens or DEFAULT_MAX_TOKENS,
        }
        if system_text:
            payload["system"] = system_text
        if anth_tools:
            payload["tools"] = anth_tools
            payload["tool_choice"] = {"type": "auto"}

        log.debug("Claude payload: %s", payload)
        resp = await self._call_blocking(self.client.messages.create, **payload)
        return _parse_claude_response(resp)
