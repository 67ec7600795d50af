# mcp_console/run_command.py
"""
Main entry-point helpers for all CLI sub-commands.

These helpers encapsulate

* construction / cleanup of the one **McpSession**
* model client + sampling bridge set-up for commands that need a human
* hand-off to individual command coroutines
* a thin synchronous wrapper so `mcp-console …` works
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Coroutine, Dict, Optional

from mcp import types

from mcp_console.config import load_config
from mcp_console.llm.llm_client import get_llm_client
from mcp_console.llm.providers.base import BaseLLMClient
from mcp_console.provider_config import ProviderConfig
from mcp_console.sampling.bridge import SamplingBridge
from mcp_console.session.session import McpSession
from mcp_console.ui.operator import TerminalOperator
from mcp_console.ui.ui_helpers import display_welcome_banner

log = logging.getLogger(__name__)

Command = Callable[..., Coroutine[Any, Any, Any]]


async def _sampling_unavailable(params: types.CreateMessageRequestParams) -> types.CreateMessageResult:
    raise RuntimeError("Sampling is not available in non-interactive commands")


def _build_llm(params: Dict[str, Any]) -> BaseLLMClient:
    return get_llm_client(
        params.get("provider") or "gemini",
        model=params.get("model"),
        api_key=params.get("api_key"),
        api_base=params.get("api_base"),
        config=params.get("provider_config") or ProviderConfig(),
    )


# --------------------------------------------------------------------------- #
# command dispatch                                                            #
# --------------------------------------------------------------------------- #
async def run_command(
    async_command: Command,
    *,
    config_file: str,
    server_name: str,
    extra_params: Optional[Dict[str, Any]] = None,
    interactive: bool = False,
) -> Any:
    """
    Connect to *server_name*, then call
    ``async_command(session=…, snapshot=…, **extra_params)``.

    With *interactive* a model client, a terminal operator and the sampling
    bridge are set up and passed as ``llm`` / ``operator`` too.  The session
    is always closed, even when the command raises.
    """
    params = dict(extra_params or {})
    server_params = await load_config(config_file, server_name)

    handler = _sampling_unavailable
    if interactive:
        llm = _build_llm(params)
        operator = TerminalOperator()
        handler = SamplingBridge(operator, llm).fulfil
        params.update(llm=llm, operator=operator)

    session = McpSession(server_params, server_name=server_name)
    try:
        snapshot = await session.connect(handler)
        return await async_command(session=session, snapshot=snapshot, **params)
    finally:
        await session.close()


def run_command_sync(
    async_command: Command,
    config_file: str,
    server_name: str,
    *,
    extra_params: Optional[Dict[str, Any]] = None,
    interactive: bool = False,
) -> Any:
    """Synchronous convenience wrapper used by the Typer commands."""
    return asyncio.run(
        run_command(
            async_command,
            config_file=config_file,
            server_name=server_name,
            extra_params=extra_params,
            interactive=interactive,
        )
    )


# --------------------------------------------------------------------------- #
# specialised helpers                                                         #
# --------------------------------------------------------------------------- #
async def enter_interactive_mode(
    *,
    session: McpSession,
    snapshot: Any,
    llm: BaseLLMClient,
    operator: TerminalOperator,
    max_steps: int = 1,
    **kwargs: Any,
) -> None:
    """Banner, then the main menu until Exit."""
    from mcp_console.interactive.orchestrator import interactive_mode

    display_welcome_banner(
        session.server_name,
        kwargs.get("provider") or "-",
        llm.model,
        snapshot.counts(),
        console=operator.console,
    )
    await interactive_mode(
        session,
        operator,
        llm,
        max_steps=max_steps,
        max_tokens=kwargs.get("max_tokens"),
    )
