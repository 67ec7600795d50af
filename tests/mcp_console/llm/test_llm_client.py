# tests/mcp_console/llm/test_llm_client.py
import json

import pytest

from mcp_console.llm.llm_client import get_llm_client
from mcp_console.llm.providers.base import BaseLLMClient
from mcp_console.llm.providers.openai_client import OpenAILLMClient
from mcp_console.provider_config import ProviderConfig


class RecordingClient(BaseLLMClient):
    def __init__(self, model="default", api_key=None):
        self.model = model
        self.api_key = api_key

    async def create_completion(self, messages, tools=None, *, max_tokens=None):
        return {"response": "ok", "tool_calls": []}


class ExplodingClient(BaseLLMClient):
    def __init__(self, model=None):
        raise RuntimeError("boom")

    async def create_completion(self, messages, tools=None, *, max_tokens=None):  # pragma: no cover
        return {}


@pytest.fixture
def config(tmp_path):
    path = tmp_path / "providers.json"
    path.write_text(
        json.dumps(
            {
                "custom": {"client": f"{__name__}.RecordingClient", "default_model": "m1", "api_base": "http://x"},
                "empty": {"default_model": "x"},
                "bad": {"client": f"{__name__}.ExplodingClient"},
            }
        )
    )
    return ProviderConfig(str(path))


def test_openai_client_from_config(config):
    client = get_llm_client("openai", api_key="sk-test", config=config)

    assert isinstance(client, OpenAILLMClient)
    assert client.model == "gpt-4o-mini"


def test_kwargs_filtered_to_constructor(config):
    client = get_llm_client("custom", api_key="k", config=config)

    assert isinstance(client, RecordingClient)
    assert client.model == "m1"
    assert client.api_key == "k"


def test_explicit_model_overrides_default(config):
    assert get_llm_client("custom", model="m2", config=config).model == "m2"


def test_unknown_provider(config):
    with pytest.raises(ValueError, match="Unknown provider"):
        get_llm_client("nope", config=config)


def test_provider_without_client(config):
    with pytest.raises(ValueError, match="No 'client' class configured"):
        get_llm_client("empty", config=config)


def test_constructor_error_wrapped(config):
    with pytest.raises(ValueError, match="Error initialising 'bad' client: boom"):
        get_llm_client("bad", config=config)


@pytest.mark.asyncio
async def test_generate_text_sends_single_user_message():
    client = RecordingClient()
    seen = {}

    async def fake(messages, tools=None, *, max_tokens=None):
        seen.update(messages=messages, max_tokens=max_tokens)
        return {"response": None, "tool_calls": []}

    client.create_completion = fake
    assert await client.generate_text("hello", max_tokens=7) == ""
    assert seen == {"messages": [{"role": "user", "content": "hello"}], "max_tokens": 7}
