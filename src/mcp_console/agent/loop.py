# mcp_console/agent/loop.py
"""
Model-augmented free-text query.

Discovered MCP tools are offered to the model as OpenAI-style function tools.
Tool calls returned by the model are executed in order through the session;
with ``max_steps > 1`` their results are fed back and the model is asked
again.  The answer is chosen by :func:`select_answer`.
"""
from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from mcp import types

from mcp_console.llm.providers.base import BaseLLMClient
from mcp_console.session.capabilities import CapabilitySnapshot

log = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 1024
NO_RESPONSE = "No response generated."
NO_DESCRIPTION = "No description available"

_SCHEMA_KEYS = ("type", "description", "properties", "required", "items", "enum")

ToolExecutor = Callable[[Dict[str, Any]], Awaitable[types.CallToolResult]]


# --------------------------------------------------------------------------- #
# tool translation                                                            #
# --------------------------------------------------------------------------- #
def sanitize_schema(schema: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Keep the JSON-schema subset every provider understands."""
    if not schema:
        return {"type": "object", "properties": {}}

    def _clean(node: Any) -> Any:
        if not isinstance(node, dict):
            return node
        out: Dict[str, Any] = {}
        for key in _SCHEMA_KEYS:
            if key not in node:
                continue
            value = node[key]
            if key == "properties" and isinstance(value, dict):
                out[key] = {name: _clean(sub) for name, sub in value.items()}
            elif key == "items":
                out[key] = _clean(value)
            else:
                out[key] = value
        return out

    cleaned = _clean(schema)
    cleaned.setdefault("type", "object")
    if cleaned["type"] == "object":
        cleaned.setdefault("properties", {})
    return cleaned


@dataclass(frozen=True)
class ToolSpec:
    """One model-invocable tool backed by an MCP tool."""
    name: str
    description: str
    parameters: Dict[str, Any]
    execute: ToolExecutor

    def to_openai(self) -> Dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


def build_toolset(snapshot: CapabilitySnapshot, session: Any) -> Dict[str, ToolSpec]:
    """Map tool name → :class:`ToolSpec` forwarding to ``session.call_tool``."""
    toolset: Dict[str, ToolSpec] = {}
    for ref in snapshot.tools:
        def _executor(arguments: Dict[str, Any], _name: str = ref.name) -> Awaitable[types.CallToolResult]:
            return session.call_tool(_name, arguments)

        toolset[ref.name] = ToolSpec(
            name=ref.name,
            description=ref.tool.description or NO_DESCRIPTION,
            parameters=sanitize_schema(ref.tool.inputSchema),
            execute=_executor,
        )
    return toolset


# --------------------------------------------------------------------------- #
# results                                                                     #
# --------------------------------------------------------------------------- #
def first_text(result: Optional[types.CallToolResult]) -> Optional[str]:
    """Text of the first content part, if that part is text."""
    if result is None or not result.content:
        return None
    part = result.content[0]
    return part.text if isinstance(part, types.TextContent) else None


@dataclass
class ToolInvocation:
    call_id: str
    name: str
    arguments: Dict[str, Any]
    result: Optional[types.CallToolResult] = None
    error: Optional[str] = None

    @property
    def text(self) -> Optional[str]:
        if self.error is not None:
            return f"Error: {self.error}"
        return first_text(self.result)


@dataclass
class QueryResult:
    answer: str
    text: Optional[str] = None
    invocations: List[ToolInvocation] = field(default_factory=list)


def select_answer(text: Optional[str], invocations: List[ToolInvocation]) -> str:
    """Model text, else the first tool call's first text part, else a fallback."""
    if text:
        return text
    if invocations and invocations[0].text:
        return invocations[0].text
    return NO_RESPONSE


# --------------------------------------------------------------------------- #
# loop                                                                        #
# --------------------------------------------------------------------------- #
def _parse_call(call: Dict[str, Any]) -> ToolInvocation:
    fn = call.get("function", {})
    raw = fn.get("arguments") or "{}"
    try:
        arguments = json.loads(raw) if isinstance(raw, str) else dict(raw)
    except (TypeError, ValueError):
        log.warning("Unparsable arguments for tool %s: %r", fn.get("name"), raw)
        arguments = {}
    return ToolInvocation(
        call_id=call.get("id") or f"call_{uuid.uuid4().hex[:8]}",
        name=fn.get("name", "unknown_tool"),
        arguments=arguments,
    )


async def _execute(invocation: ToolInvocation, toolset: Dict[str, ToolSpec]) -> None:
    spec = toolset.get(invocation.name)
    if spec is None:
        invocation.error = f"Unknown tool '{invocation.name}'"
        return
    try:
        invocation.result = await spec.execute(invocation.arguments)
    except Exception as exc:  # noqa: BLE001 – recorded as the tool's result
        log.warning("Tool %s failed: %s", invocation.name, exc)
        invocation.error = str(exc)


async def run_query(
    query: str,
    llm: BaseLLMClient,
    toolset: Dict[str, ToolSpec],
    *,
    max_tokens: int = DEFAULT_MAX_TOKENS,
    max_steps: int = 1,
) -> QueryResult:
    """Drive one free-text query through the model and the MCP tools."""
    messages: List[Dict[str, Any]] = [{"role": "user", "content": query}]
    tools = [spec.to_openai() for spec in toolset.values()] or None
    invocations: List[ToolInvocation] = []
    text: Optional[str] = None

    for step in range(max(1, max_steps)):
        try:
            completion = await llm.create_completion(messages, tools, max_tokens=max_tokens)
        except Exception as exc:  # noqa: BLE001 – turned into the answer
            log.error("Model call failed: %s", exc)
            return QueryResult(f"Error generating response: {exc}", None, invocations)

        text = completion.get("response")
        calls = completion.get("tool_calls") or []
        log.debug("step %d: text=%r tool_calls=%d", step + 1, text, len(calls))
        if not calls:
            break

        messages.append({"role": "assistant", "content": None, "tool_calls": calls})
        for call in calls:
            invocation = _parse_call(call)
            await _execute(invocation, toolset)
            invocations.append(invocation)
            messages.append(
                {
                    "role": "tool",
                    "name": invocation.name,
                    "tool_call_id": invocation.call_id,
                    "content": invocation.text or "",
                }
            )

    return QueryResult(select_answer(text, invocations), text, invocations)
