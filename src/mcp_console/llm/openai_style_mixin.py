# mcp_console/llm/openai_style_mixin.py
"""
Shared plumbing for adapters whose SDK speaks the OpenAI chat shape.

The SDK clients are synchronous, so every request is pushed onto a worker
thread.  Replies are flattened into the ``{"response", "tool_calls"}`` dict
the agent loop consumes.
"""
from __future__ import annotations

import functools
import json
import logging
import re
import uuid
from typing import Any, Callable, Dict, List, Optional

import anyio

Tool = Dict[str, Any]
LLMResult = Dict[str, Any]

log = logging.getLogger(__name__)


def _arguments_json(raw: Any) -> str:
    """Canonical JSON text for a tool call's arguments; ``{}`` when unreadable."""
    try:
        value = json.loads(raw) if isinstance(raw, str) else raw
        return json.dumps(value)
    except (TypeError, json.JSONDecodeError):
        return "{}"


class OpenAIStyleMixin:
    # provider function names allow letters, digits, "_" and "-" only
    _NAME_RE = re.compile(r"[^a-zA-Z0-9_-]")

    @classmethod
    def _sanitize_tool_names(cls, tools: Optional[List[Tool]]) -> Optional[List[Tool]]:
        """Return copies of *tools* with provider-safe function names."""
        if not tools:
            return tools
        cleaned: List[Tool] = []
        for tool in tools:
            function = dict(tool.get("function", {}))
            name = function.get("name")
            if name and cls._NAME_RE.search(name):
                function["name"] = cls._NAME_RE.sub("_", name)
                log.debug("Tool name %r rewritten to %r", name, function["name"])
            cleaned.append({**tool, "function": function})
        return cleaned

    @staticmethod
    async def _call_blocking(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        return await anyio.to_thread.run_sync(functools.partial(fn, *args, **kwargs))

    @staticmethod
    def _normalise_message(msg: Any) -> LLMResult:
        """Flatten an SDK ``choices[0].message`` into an :data:`LLMResult`."""
        calls = [
            {
                "id": getattr(call, "id", None) or f"call_{uuid.uuid4().hex[:8]}",
                "type": "function",
                "function": {
                    "name": call.function.name,
                    "arguments": _arguments_json(call.function.arguments),
                },
            }
            for call in getattr(msg, "tool_calls", None) or []
        ]
        return {"response": msg.content or None, "tool_calls": calls}
