# tests/mcp_console/sampling/test_channel.py
import anyio
import pytest
from mcp import types

from mcp_console.sampling.channel import SamplingChannel


def _params(text="hi"):
    return types.CreateMessageRequestParams(
        messages=[types.SamplingMessage(role="user", content=types.TextContent(type="text", text=text))],
        maxTokens=10,
    )


def _result(text):
    return types.CreateMessageResult(
        role="assistant", content=types.TextContent(type="text", text=text), model="m", stopReason="endTurn"
    )


@pytest.mark.asyncio
async def test_requests_answered_in_order():
    channel = SamplingChannel()
    seen = []

    async def handler(params):
        seen.append(params.messages[0].content.text)
        return _result(params.messages[0].content.text.upper())

    async with anyio.create_task_group() as tg:
        tg.start_soon(channel.serve, handler)
        first = await channel.callback(None, _params("a"))
        second = await channel.callback(None, _params("b"))
        channel.close()

    assert [first.content.text, second.content.text] == ["A", "B"]
    assert seen == ["a", "b"]


@pytest.mark.asyncio
async def test_handler_error_becomes_error_data():
    channel = SamplingChannel()

    async def handler(params):
        raise RuntimeError("no model")

    async with anyio.create_task_group() as tg:
        tg.start_soon(channel.serve, handler)
        reply = await channel.callback(None, _params())
        channel.close()

    assert isinstance(reply, types.ErrorData)
    assert reply.code == types.INTERNAL_ERROR
    assert reply.message == "no model"


@pytest.mark.asyncio
async def test_closed_channel_rejects():
    channel = SamplingChannel()
    channel.close()

    reply = await channel.callback(None, _params())

    assert isinstance(reply, types.ErrorData)
    assert reply.message == "Sampling is not available"


@pytest.mark.asyncio
async def test_cancelled_serve_unblocks_caller():
    channel = SamplingChannel()
    started = anyio.Event()

    async def handler(params):
        started.set()
        await anyio.sleep_forever()

    replies = []

    async def caller():
        replies.append(await channel.callback(None, _params()))

    async with anyio.create_task_group() as tg:
        async with anyio.create_task_group() as serve_group:
            serve_group.start_soon(channel.serve, handler)
            tg.start_soon(caller)
            await started.wait()
            serve_group.cancel_scope.cancel()

    assert isinstance(replies[0], types.ErrorData)
