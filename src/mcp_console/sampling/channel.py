# mcp_console/sampling/channel.py
"""
Sampling as a subscription.

The MCP SDK hands inbound ``sampling/createMessage`` requests to a callback.
:class:`SamplingChannel` turns that callback into a typed queue: the callback
submits a :class:`SamplingRequest` and waits on its one-shot reply stream, a
single long-lived :meth:`serve` task answers requests in arrival order.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Union

import anyio
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream
from mcp import types

log = logging.getLogger(__name__)

SamplingReply = Union[types.CreateMessageResult, types.ErrorData]
SamplingHandler = Callable[[types.CreateMessageRequestParams], Awaitable[types.CreateMessageResult]]


@dataclass
class SamplingRequest:
    params: types.CreateMessageRequestParams
    reply: MemoryObjectSendStream[SamplingReply]


class SamplingChannel:
    """One producer (the SDK callback), one consumer (:meth:`serve`)."""

    def __init__(self, max_pending: int = 8) -> None:
        self._send: MemoryObjectSendStream[SamplingRequest]
        self._receive: MemoryObjectReceiveStream[SamplingRequest]
        self._send, self._receive = anyio.create_memory_object_stream(max_pending)

    async def callback(self, context: Any, params: types.CreateMessageRequestParams) -> SamplingReply:
        """``sampling_callback`` for :class:`mcp.ClientSession`."""
        reply_send, reply_receive = anyio.create_memory_object_stream(1)
        async with reply_receive:
            try:
                await self._send.send(SamplingRequest(params, reply_send))
                return await reply_receive.receive()
            except (anyio.ClosedResourceError, anyio.BrokenResourceError, anyio.EndOfStream):
                reply_send.close()
                return types.ErrorData(code=types.INTERNAL_ERROR, message="Sampling is not available")

    async def serve(self, handler: SamplingHandler) -> None:
        """Answer requests until :meth:`close` is called."""
        async with self._receive:
            async for request in self._receive:
                # closing the reply stream on cancellation unblocks the caller
                async with request.reply:
                    reply: SamplingReply
                    try:
                        reply = await handler(request.params)
                    except Exception as exc:  # noqa: BLE001 – reported back to the server
                        log.exception("Sampling handler failed")
                        reply = types.ErrorData(code=types.INTERNAL_ERROR, message=str(exc))
                    await request.reply.send(reply)

    def close(self) -> None:
        self._send.close()
