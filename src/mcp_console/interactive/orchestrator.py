# mcp_console/interactive/orchestrator.py
"""
The main menu: Query / Tools / Resources / Prompts / Exit.

Each branch works off the immutable capability snapshot taken at connect time.
Failures inside a branch are not caught here; they end the loop and reach the
CLI entry point.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from mcp import types

from mcp_console.agent.loop import build_toolset, first_text, run_query
from mcp_console.llm.providers.base import BaseLLMClient
from mcp_console.sampling.bridge import DEFAULT_MAX_TOKENS, run_prompt_message
from mcp_console.session.capabilities import ResourceTemplateRef
from mcp_console.ui.operator import Choice, Operator

log = logging.getLogger(__name__)

MAIN_MENU = [
    Choice("Query", "query", "Ask the model, with the server's tools at hand"),
    Choice("Tools", "tools", "Call a tool"),
    Choice("Resources", "resources", "Read a resource"),
    Choice("Prompts", "prompts", "Run a prompt"),
    Choice("Exit", "exit", "Leave the console"),
]

_TRUE = {"true", "yes", "y", "1"}
_FALSE = {"false", "no", "n", "0"}


def coerce_value(raw: str, declared_type: str) -> Any:
    """Convert operator input to the schema's declared type; keep *raw* when it does not parse."""
    try:
        if declared_type == "integer":
            return int(raw)
        if declared_type == "number":
            return float(raw)
        if declared_type in ("array", "object"):
            return json.loads(raw)
    except ValueError:
        log.debug("Could not coerce %r to %s; sending as typed", raw, declared_type)
        return raw
    if declared_type == "boolean":
        lowered = raw.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    return raw


def format_resource_body(contents: List[Any]) -> str:
    """Pretty-print JSON text bodies; other text is returned as is."""
    chunks: List[str] = []
    for item in contents:
        if isinstance(item, types.TextResourceContents):
            try:
                chunks.append(json.dumps(json.loads(item.text), indent=2))
            except ValueError:
                chunks.append(item.text)
        else:
            chunks.append(f"<{item.mimeType or 'binary'} content, {len(item.blob)} base64 chars>")
    return "\n".join(chunks)


class InteractiveOrchestrator:
    """Menu loop over one connected session."""

    def __init__(
        self,
        session: Any,
        operator: Operator,
        llm: BaseLLMClient,
        *,
        max_steps: int = 1,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> None:
        self.session = session
        self.operator = operator
        self.llm = llm
        self.max_steps = max_steps
        self.max_tokens = max_tokens
        self._branches = {
            "query": self.handle_query,
            "tools": self.handle_tools,
            "resources": self.handle_resources,
            "prompts": self.handle_prompts,
        }

    @property
    def snapshot(self):
        return self.session.snapshot

    async def run(self) -> None:
        self.operator.say("Connected!", style="green")
        while True:
            choice = await self.operator.select("Select an option", MAIN_MENU)
            if choice == "exit":
                self.operator.say("Exiting...", style="yellow")
                return
            await self._branches[choice]()

    # ------------------------------------------------------------------ #
    # branches                                                           #
    # ------------------------------------------------------------------ #
    async def handle_query(self) -> None:
        query = await self.operator.ask("Enter your query:")
        toolset = build_toolset(self.snapshot, self.session)
        result = await run_query(
            query,
            self.llm,
            toolset,
            max_tokens=self.max_tokens,
            max_steps=self.max_steps,
        )
        for invocation in result.invocations:
            log.info("Model called %s(%s)", invocation.name, invocation.arguments)
        self.operator.say(f"Query response: {result.answer}")

    async def handle_tools(self) -> None:
        tools = self.snapshot.tools
        if not tools:
            self.operator.say("No tools available.", style="yellow")
            return

        key = await self.operator.select(
            "Select a tool",
            [Choice(t.display_name, t.key, t.description) for t in tools],
        )
        ref = self.snapshot.tool(key)

        arguments: Dict[str, Any] = {}
        for name, declared_type in ref.input_fields:
            raw = await self.operator.ask(f"Enter value for {name} ({declared_type}):")
            arguments[name] = coerce_value(raw, declared_type)

        result = await self.session.call_tool(ref.name, arguments)
        text = first_text(result)
        if text is None:
            text = json.dumps([c.model_dump(mode="json") for c in result.content], indent=2)
        self.operator.say(f"Tool response: {text}")

    async def handle_resources(self) -> None:
        readables = self.snapshot.readables
        if not readables:
            self.operator.say("No resources available.", style="yellow")
            return

        key = await self.operator.select(
            "Select a resource",
            [Choice(r.display_name, r.key, r.description) for r in readables],
        )
        ref = self.snapshot.get(key)

        uri = ref.uri
        if isinstance(ref, ResourceTemplateRef):
            values: Dict[str, str] = {}
            for param in ref.placeholders:
                values[param] = await self.operator.ask(f"Enter value for {param}:")
            uri = ref.expand(values)

        result = await self.session.read_resource(uri)
        self.operator.say("Resource response:")
        self.operator.say(format_resource_body(result.contents))

    async def handle_prompts(self) -> None:
        prompts = self.snapshot.prompts
        if not prompts:
            self.operator.say("No prompts available.", style="yellow")
            return

        key = await self.operator.select(
            "Select a prompt",
            [Choice(p.display_name, p.key, p.description) for p in prompts],
        )
        ref = self.snapshot.get(key)

        arguments: Dict[str, str] = {}
        for name in ref.argument_names:
            arguments[name] = await self.operator.ask(f"Enter value for {name}:")

        result = await self.session.get_prompt(ref.name, arguments)
        for message in result.messages:
            contribution = await run_prompt_message(
                message, operator=self.operator, llm=self.llm, max_tokens=self.max_tokens
            )
            if contribution.text:
                self.operator.say(f"Prompt response: {contribution.text}")


async def interactive_mode(
    session: Any,
    operator: Operator,
    llm: BaseLLMClient,
    *,
    max_steps: int = 1,
    max_tokens: Optional[int] = None,
) -> None:
    """Run the menu until the operator picks Exit."""
    await InteractiveOrchestrator(
        session,
        operator,
        llm,
        max_steps=max_steps,
        max_tokens=max_tokens or DEFAULT_MAX_TOKENS,
    ).run()
