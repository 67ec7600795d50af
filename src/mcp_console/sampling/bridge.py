# mcp_console/sampling/bridge.py
"""
Fulfil server-issued sampling requests with the client's own model access.

The server cannot hold model credentials or talk to a human, so it asks the
client.  Each message of a request is handled on its own by
:func:`run_prompt_message` (the same operation the interactive *Prompts* menu
uses): the operator previews the text and confirms or denies before any model
call.  Denying or failing one message never aborts the rest of the request.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple, Union

from mcp import types

from mcp_console.llm.providers.base import BaseLLMClient
from mcp_console.ui.operator import Operator

log = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 1024
STOP_REASON = "endTurn"
RUN_QUESTION = "Do you want to run this prompt?"
CANCELLED_MARKER = "Prompt execution cancelled."
UNSUPPORTED_MARKER = "Unsupported content type: {content_type}"
FAILED_MARKER = "Model invocation failed: {error}"

PromptLike = Union[types.SamplingMessage, types.PromptMessage]


class Outcome(str, enum.Enum):
    GENERATED = "generated"
    CANCELLED = "cancelled"
    UNSUPPORTED = "unsupported"
    FAILED = "failed"


@dataclass(frozen=True)
class Contribution:
    """What one message added to the sampling reply."""
    text: str
    outcome: Outcome


def message_text(message: PromptLike) -> Tuple[Optional[str], str]:
    """Return ``(text, content_type)``; *text* is None for non-text content."""
    content: Any = message.content
    blocks = content if isinstance(content, list) else [content]
    for block in blocks:
        if getattr(block, "type", None) != "text":
            return None, str(getattr(block, "type", "unknown"))
    return "\n".join(block.text for block in blocks), "text"


async def run_prompt_message(
    message: PromptLike,
    *,
    operator: Operator,
    llm: BaseLLMClient,
    max_tokens: int = DEFAULT_MAX_TOKENS,
) -> Contribution:
    """Display, confirm and maybe run one prompt message through the model."""
    text, content_type = message_text(message)
    if text is None:
        return Contribution(UNSUPPORTED_MARKER.format(content_type=content_type), Outcome.UNSUPPORTED)

    operator.preview(text, title=f"{message.role} prompt")
    if not await operator.confirm(RUN_QUESTION, default=True):
        return Contribution(CANCELLED_MARKER, Outcome.CANCELLED)

    try:
        generated = await llm.generate_text(text, max_tokens=max_tokens)
    except Exception as exc:  # noqa: BLE001 – one message must not sink the batch
        log.warning("Model call failed for sampled message: %s", exc)
        return Contribution(FAILED_MARKER.format(error=exc), Outcome.FAILED)

    return Contribution(generated, Outcome.GENERATED)


def join_contributions(contributions: Sequence[Contribution]) -> str:
    """Newline-join the non-empty contributions in their original order."""
    return "\n".join(c.text for c in contributions if c.text)


class SamplingBridge:
    """Turns a ``sampling/createMessage`` request into one text reply."""

    def __init__(self, operator: Operator, llm: BaseLLMClient) -> None:
        self.operator = operator
        self.llm = llm

    async def run_message(self, message: PromptLike, *, max_tokens: int = DEFAULT_MAX_TOKENS) -> Contribution:
        return await run_prompt_message(message, operator=self.operator, llm=self.llm, max_tokens=max_tokens)

    async def fulfil(self, params: types.CreateMessageRequestParams) -> types.CreateMessageResult:
        max_tokens = params.maxTokens or DEFAULT_MAX_TOKENS
        self.operator.say(
            f"Server requested a completion ({len(params.messages)} message(s), max {max_tokens} tokens).",
            style="cyan",
        )

        contributions: List[Contribution] = []
        for message in params.messages:
            contributions.append(await self.run_message(message, max_tokens=max_tokens))

        log.info(
            "Sampling request fulfilled: %s",
            ", ".join(c.outcome.value for c in contributions) or "no messages",
        )
        return types.CreateMessageResult(
            role="assistant",
            content=types.TextContent(type="text", text=join_contributions(contributions)),
            model=getattr(self.llm, "model", "unknown"),
            stopReason=STOP_REASON,
        )
