# mcp_console/session/session.py
"""mcp_console.session.session
==============================
One client session against one MCP server launched over stdio.

* **AsyncExitStack** – automatic cleanup of the stdio client and the SDK
  session.
* **Sampling first** – the sampling callback is wired into the SDK session
  and its serving task started *before* ``initialize``, so a server request
  can never arrive unhandled.
* **Concurrent discovery** – tools, resources, resource templates and prompts
  are listed concurrently and joined into one frozen
  :class:`CapabilitySnapshot` before :meth:`McpSession.connect` returns.
"""
from __future__ import annotations

import asyncio
import contextlib
import logging
import sys
from contextlib import AsyncExitStack
from typing import Any, Dict, List, Optional, TextIO

from mcp import ClientSession, StdioServerParameters, types
from mcp.client.stdio import stdio_client

from mcp_console import __version__
from mcp_console.sampling.channel import SamplingChannel, SamplingHandler
from mcp_console.session.capabilities import CapabilitySnapshot

log = logging.getLogger(__name__)

INIT_TIMEOUT = 15       # seconds, initialize + discovery
CLIENT_INFO = types.Implementation(name="mcp-console", version=__version__)


async def discover(
    session: ClientSession,
    capabilities: Optional[types.ServerCapabilities] = None,
) -> CapabilitySnapshot:
    """List all four capability kinds concurrently.

    A kind the server does not advertise is treated as empty.  With no
    *capabilities* every kind is queried.
    """
    async def _empty() -> List[Any]:
        return []

    async def _tools() -> List[types.Tool]:
        return (await session.list_tools()).tools

    async def _resources() -> List[types.Resource]:
        return (await session.list_resources()).resources

    async def _templates() -> List[types.ResourceTemplate]:
        return (await session.list_resource_templates()).resourceTemplates

    async def _prompts() -> List[types.Prompt]:
        return (await session.list_prompts()).prompts

    has_tools = capabilities is None or capabilities.tools is not None
    has_resources = capabilities is None or capabilities.resources is not None
    has_prompts = capabilities is None or capabilities.prompts is not None

    tools, resources, templates, prompts = await asyncio.gather(
        _tools() if has_tools else _empty(),
        _resources() if has_resources else _empty(),
        _templates() if has_resources else _empty(),
        _prompts() if has_prompts else _empty(),
    )
    snapshot = CapabilitySnapshot.from_listings(tools, resources, templates, prompts)
    log.info("Discovered %s", snapshot.counts())
    return snapshot


class McpSession:
    """Connect, discover once, then forward invocations."""

    def __init__(
        self,
        server_params: StdioServerParameters,
        *,
        server_name: str = "server",
        errlog: TextIO = sys.stderr,
    ) -> None:
        self.server_params = server_params
        self.server_name = server_name
        self.errlog = errlog

        self.sampling = SamplingChannel()
        self.server_info: Optional[types.Implementation] = None

        self._exit_stack: Optional[AsyncExitStack] = None
        self._session: Optional[ClientSession] = None
        self._snapshot: Optional[CapabilitySnapshot] = None
        self._sampling_task: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------

    async def connect(self, sampling_handler: SamplingHandler) -> CapabilitySnapshot:
        """Launch the server, subscribe to sampling, initialise and discover."""
        if self._session is not None:
            raise RuntimeError("Session already connected")

        self._sampling_task = asyncio.create_task(self.sampling.serve(sampling_handler))
        self._exit_stack = AsyncExitStack()
        try:
            read, write = await self._exit_stack.enter_async_context(
                stdio_client(self.server_params, errlog=self.errlog)
            )
            session = await self._exit_stack.enter_async_context(
                ClientSession(
                    read,
                    write,
                    sampling_callback=self.sampling.callback,
                    client_info=CLIENT_INFO,
                )
            )
            init = await asyncio.wait_for(session.initialize(), timeout=INIT_TIMEOUT)
            self.server_info = init.serverInfo
            log.info("Connected to %s (%s %s)", self.server_name, init.serverInfo.name, init.serverInfo.version)

            self._snapshot = await asyncio.wait_for(
                discover(session, init.capabilities), timeout=INIT_TIMEOUT
            )
            self._session = session
        except BaseException:
            await self.close()
            raise
        return self._snapshot

    async def close(self) -> None:
        """Stop the sampling subscription and unwind the transport."""
        self.sampling.close()
        if self._sampling_task is not None:
            self._sampling_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._sampling_task
            self._sampling_task = None

        if self._exit_stack is not None:
            stack, self._exit_stack = self._exit_stack, None
            await stack.aclose()
        self._session = None

    async def __aenter__(self) -> "McpSession":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # accessors / invocations
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> CapabilitySnapshot:
        if self._snapshot is None:
            raise RuntimeError("Session is not connected")
        return self._snapshot

    def _require(self) -> ClientSession:
        if self._session is None:
            raise RuntimeError("Session is not connected")
        return self._session

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> types.CallToolResult:
        log.debug("call_tool %s %s", name, arguments)
        return await self._require().call_tool(name, arguments or {})

    async def read_resource(self, uri: str) -> types.ReadResourceResult:
        log.debug("read_resource %s", uri)
        # the SDK validates the URI into an AnyUrl itself
        return await self._require().read_resource(uri)  # type: ignore[arg-type]

    async def get_prompt(self, name: str, arguments: Optional[Dict[str, str]] = None) -> types.GetPromptResult:
        log.debug("get_prompt %s %s", name, arguments)
        return await self._require().get_prompt(name, arguments or {})
