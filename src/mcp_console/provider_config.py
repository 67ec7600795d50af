# mcp_console/provider_config.py
"""
Model provider settings.

``~/.mcp-console/providers.json`` holds one section per provider plus a
``__global__`` section (active provider / model, token budget).  On load the
file is layered over :data:`DEFAULTS`, so new providers and keys appear
without the user editing anything, and the merged result is written back.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

GLOBAL = "__global__"

DEFAULTS: Dict[str, Dict[str, Any]] = {
    GLOBAL: {
        "active_provider": "gemini",
        "active_model": "gemini-2.0-flash",
        "max_tokens": 1024,
    },
    "gemini": {
        "client": "mcp_console.llm.providers.gemini_client.GeminiLLMClient",
        "api_key_env": "GEMINI_API_KEY",
        "api_key": None,
        "default_model": "gemini-2.0-flash",
    },
    "openai": {
        "client": "mcp_console.llm.providers.openai_client.OpenAILLMClient",
        "api_key_env": "OPENAI_API_KEY",
        "api_base": None,
        "api_key": None,
        "default_model": "gpt-4o-mini",
    },
    "anthropic": {
        "client": "mcp_console.llm.providers.anthropic_client.AnthropicLLMClient",
        "api_key_env": "ANTHROPIC_API_KEY",
        "api_base": None,
        "api_key": None,
        "default_model": "claude-3-7-sonnet-latest",
    },
}

CFG_PATH = Path("~/.mcp-console/providers.json").expanduser()


def _read(path: Path) -> Dict[str, Dict[str, Any]]:
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        logger.warning("Ignoring malformed provider config %s", path)
        return {}
    return data if isinstance(data, dict) else {}


def _layer(user: Dict[str, Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    merged = copy.deepcopy(DEFAULTS)
    for name, section in user.items():
        merged.setdefault(name, {}).update(section)
    return merged


class ProviderConfig:
    """Provider sections backed by a JSON file."""

    def __init__(self, config_path: Optional[str] = None) -> None:
        self._path = Path(config_path).expanduser() if config_path else CFG_PATH
        on_disk = _read(self._path)
        self.providers: Dict[str, Dict[str, Any]] = _layer(on_disk)
        if self.providers != on_disk:
            try:
                self._save()
            except OSError as exc:
                # read-only home: the in-memory copy still works
                logger.debug("Could not persist provider config: %s", exc)

    def _save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(self.providers, indent=2), encoding="utf-8")

    @property
    def _global(self) -> Dict[str, Any]:
        return self.providers.setdefault(GLOBAL, {})

    # provider sections

    def get_provider_config(self, provider: str) -> Dict[str, Any]:
        """Section for *provider* with the API key resolved from its env var."""
        if provider == GLOBAL or provider not in self.providers:
            raise ValueError(f"Unknown provider '{provider}'")
        section = {**DEFAULTS.get(provider, {}), **self.providers[provider]}
        env_var = section.get("api_key_env")
        if not section.get("api_key") and env_var:
            section["api_key"] = os.getenv(env_var)
        return section

    def get_default_model(self, provider: str) -> str:
        return self.get_provider_config(provider).get("default_model", "")

    # global settings

    def get_active_provider(self) -> str:
        return self._global.get("active_provider", DEFAULTS[GLOBAL]["active_provider"])

    def get_active_model(self) -> str:
        return self._global.get("active_model", DEFAULTS[GLOBAL]["active_model"])

    def get_max_tokens(self) -> int:
        return int(self._global.get("max_tokens", DEFAULTS[GLOBAL]["max_tokens"]))
