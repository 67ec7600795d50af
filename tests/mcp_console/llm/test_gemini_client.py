# tests/mcp_console/llm/test_gemini_client.py
import json
from types import SimpleNamespace

import pytest
from google.genai import types as gtypes

from mcp_console.llm.providers import gemini_client
from mcp_console.llm.providers.gemini_client import (
    GeminiLLMClient,
    _convert_messages,
    _convert_tools,
    _parse_final_response,
    _upper_types,
)


class DummyModels:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        return self.response


class DummyGenAIClient:
    def __init__(self, *args, **kwargs):
        self.models = DummyModels(None)


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(gemini_client.genai, "Client", DummyGenAIClient)
    return GeminiLLMClient(model="gemini-test", api_key="fake-key")


def _resp(*parts):
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=list(parts)))])


def test_missing_api_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    with pytest.raises(ValueError, match="GEMINI_API_KEY"):
        GeminiLLMClient()


def test_api_key_from_env(monkeypatch):
    monkeypatch.setattr(gemini_client.genai, "Client", DummyGenAIClient)
    monkeypatch.setenv("GOOGLE_API_KEY", "from-env")
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)

    assert GeminiLLMClient().model == "gemini-2.0-flash"


@pytest.mark.asyncio
async def test_create_completion_text(client):
    client.client.models.response = _resp(SimpleNamespace(text="Hello", function_call=None))

    result = await client.create_completion([{"role": "user", "content": "Hi"}], max_tokens=1024)

    assert result == {"response": "Hello", "tool_calls": []}
    call = client.client.models.calls[0]
    assert call["model"] == "gemini-test"
    assert call["config"].max_output_tokens == 1024
    assert call["config"].automatic_function_calling.disable is True


@pytest.mark.asyncio
async def test_generate_text(client):
    client.client.models.response = _resp(SimpleNamespace(text="A fake user", function_call=None))

    assert await client.generate_text("make a user", max_tokens=10) == "A fake user"


def test_parse_function_call():
    fc = SimpleNamespace(id=None, name="get-coordinates", args={"city": "Oslo"})
    parsed = _parse_final_response(_resp(SimpleNamespace(text=None, function_call=fc)))

    assert parsed["response"] is None
    assert parsed["tool_calls"][0]["function"]["name"] == "get-coordinates"
    assert json.loads(parsed["tool_calls"][0]["function"]["arguments"]) == {"city": "Oslo"}


def test_parse_empty_candidates():
    assert _parse_final_response(SimpleNamespace(candidates=[])) == {"response": None, "tool_calls": []}


def test_convert_messages_lifts_system():
    system, contents = _convert_messages(
        [
            {"role": "system", "content": "sys"},
            {"role": "user", "content": "hi"},
            {"role": "assistant", "content": "hello"},
        ]
    )
    assert system == "sys"
    assert [c.role for c in contents] == ["user", "model"]


def test_upper_types_recurses():
    schema = {
        "type": "object",
        "properties": {"tags": {"type": "array", "items": {"type": "string"}}},
    }
    assert _upper_types(schema) == {
        "type": "OBJECT",
        "properties": {"tags": {"type": "ARRAY", "items": {"type": "STRING"}}},
    }


def test_convert_tools():
    tools = [
        {
            "type": "function",
            "function": {
                "name": "create-user",
                "description": "Create a new user in the database.",
                "parameters": {
                    "type": "object",
                    "properties": {"name": {"type": "string"}},
                    "required": ["name"],
                },
            },
        }
    ]
    gem_tools, cfg = _convert_tools(tools)

    decl = gem_tools[0].function_declarations[0]
    assert decl.name == "create-user"
    assert decl.parameters.type == gtypes.Type.OBJECT
    assert cfg is not None


def test_convert_no_tools():
    assert _convert_tools(None) == ([], None)
