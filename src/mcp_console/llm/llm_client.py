# mcp_console/llm/llm_client.py
"""
Central factory for obtaining a provider-specific LLM client.

* Reads client class path from ProviderConfig (“client” key).
* Filters kwargs to match each adapter's __init__.
"""
from __future__ import annotations

import importlib
import inspect
import logging
from types import ModuleType
from typing import Any, Dict, Optional, Type

from mcp_console.llm.providers.base import BaseLLMClient
from mcp_console.provider_config import ProviderConfig

log = logging.getLogger(__name__)


def _import_string(path: str) -> Any:
    module_path, _, attr = path.replace(":", ".").rpartition(".")
    if not module_path or not attr:
        raise ImportError(f"Invalid import path: {path!r}")
    module: ModuleType = importlib.import_module(module_path)
    return getattr(module, attr)


def _constructor_kwargs(cls: Type[BaseLLMClient], cfg: Dict[str, Any]) -> Dict[str, Any]:
    cand = {
        "model":    cfg.get("model") or cfg.get("default_model"),
        "api_key":  cfg.get("api_key"),
        "api_base": cfg.get("api_base"),
    }
    params = inspect.signature(cls.__init__).parameters
    if any(p.kind is inspect.Parameter.VAR_KEYWORD for p in params.values()):
        return {k: v for k, v in cand.items() if v is not None}
    return {k: v for k, v in cand.items() if k in params and v is not None}


def get_llm_client(
    provider: str = "gemini",
    *,
    model: Optional[str] = None,
    api_key: Optional[str] = None,
    api_base: Optional[str] = None,
    config: Optional[ProviderConfig] = None,
) -> BaseLLMClient:
    cfg_mgr = config or ProviderConfig()
    cfg = cfg_mgr.get_provider_config(provider.lower())  # raises if unknown

    for k, v in (("model", model), ("api_key", api_key), ("api_base", api_base)):
        if v is not None:
            cfg[k] = v

    client_path = cfg.get("client")
    if not client_path:
        raise ValueError(f"No 'client' class configured for provider '{provider}'")

    client_cls: Type[BaseLLMClient] = _import_string(client_path)
    kwargs = _constructor_kwargs(client_cls, cfg)

    try:
        client = client_cls(**kwargs)
    except Exception as exc:
        raise ValueError(f"Error initialising '{provider}' client: {exc}") from exc

    log.info("Using %s model '%s'", provider, getattr(client, "model", "?"))
    return client
