# tests/mcp_console/sampling/test_bridge.py
import pytest
from mcp import types

from mcp_console.sampling.bridge import (
    CANCELLED_MARKER,
    Contribution,
    Outcome,
    SamplingBridge,
    join_contributions,
    message_text,
    run_prompt_message,
)


def _text(text, role="user"):
    return types.SamplingMessage(role=role, content=types.TextContent(type="text", text=text))


def _image(role="user"):
    return types.SamplingMessage(
        role=role, content=types.ImageContent(type="image", data="aGk=", mimeType="image/png")
    )


def _params(*messages, max_tokens=1024):
    return types.CreateMessageRequestParams(messages=list(messages), maxTokens=max_tokens)


def test_message_text():
    assert message_text(_text("hi")) == ("hi", "text")
    assert message_text(_image()) == (None, "image")


@pytest.mark.asyncio
async def test_two_denials_yield_two_markers_and_no_model_call(operator_factory, fake_llm_factory):
    operator = operator_factory(confirms=[False, False])
    llm = fake_llm_factory()
    bridge = SamplingBridge(operator, llm)

    result = await bridge.fulfil(_params(_text("one"), _text("two")))

    assert result.content.text == f"{CANCELLED_MARKER}\n{CANCELLED_MARKER}"
    assert llm.calls == []
    assert operator.previews == ["one", "two"]


@pytest.mark.asyncio
async def test_unsupported_then_confirmed(operator_factory, fake_llm_factory):
    operator = operator_factory(confirms=[True])
    llm = fake_llm_factory([{"response": "generated text", "tool_calls": []}])

    result = await SamplingBridge(operator, llm).fulfil(_params(_image(), _text("go")))

    assert result.content.text == "Unsupported content type: image\ngenerated text"
    # only the text message reached the gate
    assert operator.questions == ["Do you want to run this prompt?"]
    assert llm.calls[0]["messages"] == [{"role": "user", "content": "go"}]


@pytest.mark.asyncio
async def test_result_shape(operator_factory, fake_llm_factory):
    llm = fake_llm_factory([{"response": "hi", "tool_calls": []}], model="gemini-2.0-flash")
    result = await SamplingBridge(operator_factory(confirms=[True]), llm).fulfil(_params(_text("x"), max_tokens=77))

    assert result.role == "assistant"
    assert result.model == "gemini-2.0-flash"
    assert result.stopReason == "endTurn"
    assert llm.calls[0]["max_tokens"] == 77


@pytest.mark.asyncio
async def test_model_failure_is_per_message(operator_factory, fake_llm_factory):
    llm = fake_llm_factory([RuntimeError("quota"), {"response": "second", "tool_calls": []}])
    bridge = SamplingBridge(operator_factory(confirms=[True, True]), llm)

    result = await bridge.fulfil(_params(_text("a"), _text("b")))

    assert result.content.text == "Model invocation failed: quota\nsecond"
    assert len(llm.calls) == 2


@pytest.mark.asyncio
async def test_empty_generation_dropped(operator_factory, fake_llm_factory):
    llm = fake_llm_factory([{"response": None, "tool_calls": []}, {"response": "kept", "tool_calls": []}])
    result = await SamplingBridge(operator_factory(confirms=[True, True]), llm).fulfil(_params(_text("a"), _text("b")))

    assert result.content.text == "kept"


@pytest.mark.asyncio
async def test_run_prompt_message_outcomes(operator_factory, fake_llm_factory):
    llm = fake_llm_factory([{"response": "out", "tool_calls": []}])
    prompt_message = types.PromptMessage(role="user", content=types.TextContent(type="text", text="p"))

    done = await run_prompt_message(prompt_message, operator=operator_factory(confirms=[True]), llm=llm)
    assert done == Contribution("out", Outcome.GENERATED)

    denied = await run_prompt_message(prompt_message, operator=operator_factory(confirms=[False]), llm=llm)
    assert denied.outcome is Outcome.CANCELLED


def test_join_contributions():
    contribs = [
        Contribution("a", Outcome.GENERATED),
        Contribution("", Outcome.GENERATED),
        Contribution("b", Outcome.CANCELLED),
    ]
    assert join_contributions(contribs) == "a\nb"
    assert join_contributions([]) == ""
