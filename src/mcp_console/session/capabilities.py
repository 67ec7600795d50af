# mcp_console/session/capabilities.py
"""
Capability refs and the immutable discovery snapshot.

Every descriptor listed at connect time is wrapped once into a tagged ref with
a stable ``key`` (``tool:<name>``, ``resource:<uri>``, ``template:<pattern>``,
``prompt:<name>``).  UI code selects by key, never by display name.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from mcp import types

_PLACEHOLDER_RE = re.compile(r"\{([^}]+)\}")


@dataclass(frozen=True)
class ToolRef:
    tool: types.Tool

    @property
    def key(self) -> str:
        return f"tool:{self.tool.name}"

    @property
    def name(self) -> str:
        return self.tool.name

    @property
    def display_name(self) -> str:
        annotations = self.tool.annotations
        return (annotations.title if annotations and annotations.title else None) or self.tool.name

    @property
    def description(self) -> str:
        return self.tool.description or "No description available"

    @property
    def input_fields(self) -> List[Tuple[str, str]]:
        """(field name, declared type) for every property of the input schema."""
        props = (self.tool.inputSchema or {}).get("properties") or {}
        return [(name, str(spec.get("type", "string"))) for name, spec in props.items()]


@dataclass(frozen=True)
class ResourceRef:
    resource: types.Resource

    @property
    def key(self) -> str:
        return f"resource:{self.resource.uri}"

    @property
    def display_name(self) -> str:
        return self.resource.name

    @property
    def description(self) -> str:
        return self.resource.description or "No description available"

    @property
    def uri(self) -> str:
        return str(self.resource.uri)

    @property
    def placeholders(self) -> List[str]:
        return []


@dataclass(frozen=True)
class ResourceTemplateRef:
    template: types.ResourceTemplate

    @property
    def key(self) -> str:
        return f"template:{self.template.uriTemplate}"

    @property
    def display_name(self) -> str:
        return self.template.name

    @property
    def description(self) -> str:
        return self.template.description or "No description available"

    @property
    def uri(self) -> str:
        return self.template.uriTemplate

    @property
    def placeholders(self) -> List[str]:
        """Placeholder names in the order they appear in the pattern."""
        return _PLACEHOLDER_RE.findall(self.template.uriTemplate)

    def expand(self, values: Mapping[str, str]) -> str:
        """Substitute every ``{param}`` with its value from *values*."""
        return _PLACEHOLDER_RE.sub(lambda m: str(values[m.group(1)]), self.template.uriTemplate)


@dataclass(frozen=True)
class PromptRef:
    prompt: types.Prompt

    @property
    def key(self) -> str:
        return f"prompt:{self.prompt.name}"

    @property
    def name(self) -> str:
        return self.prompt.name

    @property
    def display_name(self) -> str:
        return self.prompt.name

    @property
    def description(self) -> str:
        return self.prompt.description or "No description available"

    @property
    def argument_names(self) -> List[str]:
        return [arg.name for arg in self.prompt.arguments or []]


CapabilityRef = Union[ToolRef, ResourceRef, ResourceTemplateRef, PromptRef]
ReadableRef = Union[ResourceRef, ResourceTemplateRef]


@dataclass(frozen=True)
class CapabilitySnapshot:
    """Everything the server advertised at connect time; never re-fetched."""

    tools: Tuple[ToolRef, ...] = ()
    resources: Tuple[ResourceRef, ...] = ()
    templates: Tuple[ResourceTemplateRef, ...] = ()
    prompts: Tuple[PromptRef, ...] = ()
    _index: Dict[str, CapabilityRef] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for ref in (*self.tools, *self.resources, *self.templates, *self.prompts):
            self._index[ref.key] = ref

    @classmethod
    def from_listings(
        cls,
        tools: Iterable[types.Tool] = (),
        resources: Iterable[types.Resource] = (),
        templates: Iterable[types.ResourceTemplate] = (),
        prompts: Iterable[types.Prompt] = (),
    ) -> "CapabilitySnapshot":
        return cls(
            tools=tuple(ToolRef(t) for t in tools),
            resources=tuple(ResourceRef(r) for r in resources),
            templates=tuple(ResourceTemplateRef(t) for t in templates),
            prompts=tuple(PromptRef(p) for p in prompts),
        )

    @property
    def readables(self) -> Tuple[ReadableRef, ...]:
        """Static resources followed by resource templates."""
        return (*self.resources, *self.templates)

    def get(self, key: str) -> CapabilityRef:
        try:
            return self._index[key]
        except KeyError:
            raise KeyError(f"Unknown capability '{key}'") from None

    def tool(self, key: str) -> ToolRef:
        """Like :meth:`get`, but only for tool keys."""
        ref = self._index.get(key)
        if not isinstance(ref, ToolRef):
            raise KeyError(f"Unknown tool '{key}'")
        return ref

    def find_tool(self, name: str) -> Optional[ToolRef]:
        ref = self._index.get(f"tool:{name}")
        return ref if isinstance(ref, ToolRef) else None

    def counts(self) -> Dict[str, int]:
        return {
            "tools": len(self.tools),
            "resources": len(self.resources),
            "templates": len(self.templates),
            "prompts": len(self.prompts),
        }
