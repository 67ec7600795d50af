# mcp_console/llm/providers/gemini_client.py
"""
Google Gemini chat-completion adapter for MCP-Console.

Key features
------------
* Fully asynchronous `create_completion` matching `BaseLLMClient`.
* ChatML → Gemini `types.Content` conversion.
* Accepts **both** OpenAI-style and bare function declarations.
* `max_tokens` maps onto `max_output_tokens`.

Implementation details
---------------------
* Blocking SDK calls are wrapped in `asyncio.to_thread`.
* Transformation steps emit `log.debug(...)` lines; enable with
  `export LOGLEVEL=DEBUG`.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import uuid
from typing import Any, Dict, List, Optional, Tuple

from google import genai
from google.genai import types as gtypes

from mcp_console.llm.providers.base import BaseLLMClient

log = logging.getLogger(__name__)

if "LOGLEVEL" in os.environ:
    log.setLevel(os.environ["LOGLEVEL"].upper())


def _convert_messages(messages: List[Dict[str, Any]]) -> Tuple[Optional[str], List[gtypes.Content]]:
    """Convert ChatML list → (system_instruction, Gemini contents)."""
    system_txt: Optional[str] = None
    gem_contents: List[gtypes.Content] = []

    for i, msg in enumerate(messages):
        role = msg.get("role")
        content = msg.get("content")
        log.debug("↻ msg[%d] role=%s keys=%s", i, role, list(msg.keys()))

        if role == "system":
            if system_txt is None:  # Gemini supports only one system prompt
                system_txt = content if isinstance(content, str) else str(content)
            continue

        if role == "tool":
            try:
                payload = json.loads(content) if isinstance(content, str) else content
            except json.JSONDecodeError:
                payload = content
            if not isinstance(payload, dict):
                payload = {"result": payload}
            part = gtypes.Part.from_function_response(name=msg.get("name") or "tool", response=payload)
            gem_contents.append(gtypes.Content(role="user", parts=[part]))
            continue

        if role == "assistant" and msg.get("tool_calls"):
            parts: List[gtypes.Part] = []
            for tc in msg["tool_calls"]:
                fn = tc.get("function", {})
                args_raw = fn.get("arguments") or "{}"
                try:
                    args = json.loads(args_raw) if isinstance(args_raw, str) else args_raw
                except json.JSONDecodeError:
                    args = {}
                if fn.get("name"):
                    parts.append(gtypes.Part.from_function_call(name=fn["name"], args=args))
            if parts:
                gem_contents.append(gtypes.Content(role="model", parts=parts))
            continue

        if role in {"user", "assistant"} and content is not None:
            g_role = "user" if role == "user" else "model"
            gem_contents.append(gtypes.Content(role=g_role, parts=[gtypes.Part.from_text(text=str(content))]))
        else:
            log.debug("Skipping unsupported message: %s", msg)

    return system_txt, gem_contents


def _upper_types(schema: Any) -> Any:
    """Gemini's Schema enum spells JSON-schema types in upper case."""
    if isinstance(schema, list):
        return [_upper_types(item) for item in schema]
    if not isinstance(schema, dict):
        return schema
    out = {k: _upper_types(v) for k, v in schema.items()}
    if isinstance(out.get("type"), str):
        out["type"] = out["type"].upper()
    if isinstance(schema.get("properties"), dict):
        out["properties"] = {k: _upper_types(v) for k, v in schema["properties"].items()}
    return out


def _convert_tools(tools: Optional[List[Dict[str, Any]]]) -> Tuple[List[gtypes.Tool], Optional[gtypes.ToolConfig]]:
    """Translate mixed tool formats → Gemini Tool objects."""
    fn_decls: List[gtypes.FunctionDeclaration] = []

    for entry in tools or []:
        fn = entry.get("function", {}) if entry.get("type") == "function" else entry
        name = fn.get("name")
        if not name:
            log.warning("Skipping tool without name: %s", entry)
            continue

        params = fn.get("parameters") or {"type": "object", "properties": {}}
        try:
            schema = gtypes.Schema.model_validate(_upper_types(params))
        except ValueError as exc:
            log.error("Invalid schema for tool '%s' (%s) → using empty object schema", name, exc)
            schema = gtypes.Schema(type="OBJECT")

        fn_decls.append(gtypes.FunctionDeclaration(name=name, description=fn.get("description", ""), parameters=schema))

    if not fn_decls:
        return [], None

    tool_cfg = gtypes.ToolConfig(
        function_calling_config=gtypes.FunctionCallingConfig(mode=gtypes.FunctionCallingConfigMode.AUTO)
    )
    return [gtypes.Tool(function_declarations=fn_decls)], tool_cfg


def _parse_final_response(resp) -> Dict[str, Any]:
    main_text = ""
    tool_calls: List[Dict[str, Any]] = []

    candidates = getattr(resp, "candidates", None) or []
    parts = (candidates[0].content.parts or []) if candidates and candidates[0].content else []
    for part in parts:
        if getattr(part, "text", None):
            main_text += part.text
        elif getattr(part, "function_call", None):
            fc = part.function_call
            tool_calls.append(
                {
                    "id": fc.id or f"call_{uuid.uuid4().hex[:8]}",
                    "type": "function",
                    "function": {"name": fc.name, "arguments": json.dumps(dict(fc.args or {}))},
                }
            )

    log.debug("Parsed text='%s…', tool_calls=%d", main_text[:60], len(tool_calls))
    return {"response": main_text.strip() or None, "tool_calls": tool_calls}


class GeminiLLMClient(BaseLLMClient):
    """`google-genai` wrapper with MCP-Console interface."""

    def __init__(self, model: str = "gemini-2.0-flash", *, api_key: Optional[str] = None) -> None:
        api_key = api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        if not api_key:
            raise ValueError("GEMINI_API_KEY / GOOGLE_API_KEY env var not set")

        self.model = model
        self.client = genai.Client(api_key=api_key)
        log.info("GeminiLLMClient initialised with model '%s'", model)

    def _create_sync(
        self,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]],
        max_tokens: Optional[int],
    ) -> Dict[str, Any]:
        system_txt, contents = _convert_messages(messages)
        gem_tools, tool_cfg = _convert_tools(tools)

        cfg = gtypes.GenerateContentConfig(
            system_instruction=system_txt or None,
            tools=gem_tools or None,
            tool_config=tool_cfg,
            max_output_tokens=max_tokens,
            # tool calls are executed by the agent loop, not by the SDK
            automatic_function_calling=gtypes.AutomaticFunctionCallingConfig(disable=True),
        )
        log.debug("GenerateContentConfig: %s", cfg)

        resp = self.client.models.generate_content(model=self.model, contents=contents, config=cfg)
        log.debug("Raw Gemini response: %s", resp)
        return _parse_final_response(resp)

    async def create_completion(
        self,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
        *,
        max_tokens: Optional[int] = None,
    ) -> Dict[str, Any]:
        return await asyncio.to_thread(self._create_sync, messages, tools, max_tokens)
