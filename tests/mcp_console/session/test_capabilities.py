# tests/mcp_console/session/test_capabilities.py
import pytest
from mcp import types

from mcp_console.session.capabilities import (
    CapabilitySnapshot,
    PromptRef,
    ResourceTemplateRef,
    ToolRef,
)


def _tool(name="create-user", title=None, description="Create a new user in the database."):
    return types.Tool(
        name=name,
        description=description,
        inputSchema={
            "type": "object",
            "properties": {"name": {"type": "string"}, "age": {"type": "integer"}},
        },
        annotations=types.ToolAnnotations(title=title) if title else None,
    )


def _snapshot():
    return CapabilitySnapshot.from_listings(
        tools=[_tool(title="Create User"), _tool("plain", description=None)],
        resources=[types.Resource(name="users", uri="users://all")],
        templates=[types.ResourceTemplate(name="user-details", uriTemplate="users://{id}/profile")],
        prompts=[
            types.Prompt(
                name="generate-fake-user",
                arguments=[types.PromptArgument(name="name", required=True)],
            )
        ],
    )


def test_keys_and_lookup():
    snap = _snapshot()

    assert [t.key for t in snap.tools] == ["tool:create-user", "tool:plain"]
    assert snap.resources[0].key == "resource:users://all"
    assert snap.templates[0].key == "template:users://{id}/profile"
    assert isinstance(snap.get("prompt:generate-fake-user"), PromptRef)
    assert snap.counts() == {"tools": 2, "resources": 1, "templates": 1, "prompts": 1}


def test_unknown_key():
    with pytest.raises(KeyError, match="Unknown capability 'tool:nope'"):
        _snapshot().get("tool:nope")


def test_tool_display_name_and_fields():
    snap = _snapshot()
    titled, plain = snap.tools

    assert titled.display_name == "Create User"
    assert plain.display_name == "plain"
    assert plain.description == "No description available"
    assert titled.input_fields == [("name", "string"), ("age", "integer")]
    assert snap.find_tool("plain") is plain
    assert snap.find_tool("users") is None


def test_template_placeholders_and_expand():
    ref = ResourceTemplateRef(
        types.ResourceTemplate(name="t", uriTemplate="repo://{owner}/{name}/issues/{id}")
    )
    assert ref.placeholders == ["owner", "name", "id"]
    assert ref.expand({"owner": "a", "name": "b", "id": 7}) == "repo://a/b/issues/7"


def test_readables_order():
    snap = _snapshot()
    assert [r.display_name for r in snap.readables] == ["users", "user-details"]
    assert snap.readables[0].placeholders == []


def test_prompt_arguments():
    snap = _snapshot()
    assert snap.prompts[0].argument_names == ["name"]


def test_snapshot_is_frozen():
    snap = _snapshot()
    with pytest.raises(AttributeError):
        snap.tools = ()  # type: ignore[misc]


def test_tool_without_schema_properties():
    ref = ToolRef(types.Tool(name="bare", inputSchema={"type": "object"}))
    assert ref.input_fields == []


def test_tool_lookup_by_key():
    snap = _snapshot()
    assert snap.tool("tool:create-user").display_name == "Create User"


@pytest.mark.parametrize("key", ["tool:nope", "resource:users://all", "prompt:generate-fake-user"])
def test_tool_lookup_rejects_other_keys(key):
    with pytest.raises(KeyError, match="Unknown tool"):
        _snapshot().tool(key)
