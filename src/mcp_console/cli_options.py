# mcp_console/cli_options.py
"""
Shared option-processing helpers for MCP-Console commands.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional, Tuple

from mcp_console.config import DEFAULT_SERVER
from mcp_console.provider_config import ProviderConfig

logger = logging.getLogger(__name__)


def read_config(config_file: str) -> Optional[dict]:
    """Read *config_file* (if it exists) and return a dict or None."""
    try:
        if Path(config_file).is_file():
            with open(config_file, "r", encoding="utf-8") as fh:
                return json.load(fh)
        logger.debug("Config file '%s' not found.", config_file)
    except json.JSONDecodeError:
        logger.error("Invalid JSON in config file '%s'", config_file)
    except OSError as exc:
        logger.error("Error loading config file: %s", exc)
    return None


def _provider_default_model(provider: str, config: ProviderConfig) -> str:
    """
    Return the configured default_model for *provider*, or the active model
    when the provider is unknown.
    """
    try:
        return config.get_default_model(provider.lower()) or config.get_active_model()
    except ValueError:
        return config.get_active_model()


def process_options(
    server: Optional[str],
    provider: str,
    model: Optional[str],
    config_file: str = "server_config.json",
    provider_config: Optional[ProviderConfig] = None,
) -> Tuple[str, str, str]:
    """
    Resolve CLI options → (server_name, provider, model).

    * Picks the first ``--server`` entry, else the first configured server,
      else the built-in ``users`` server.
    * Sets env-vars LLM_PROVIDER / LLM_MODEL.
    """
    cfg_mgr = provider_config or ProviderConfig()
    logger.debug("Processing options: server=%s provider=%s", server, provider)

    if server:
        names = [s.strip() for s in server.split(",") if s.strip()]
        if len(names) > 1:
            logger.warning("Only one server per session is supported; using '%s'", names[0])
        server_name = names[0] if names else DEFAULT_SERVER
    else:
        cfg = read_config(config_file)
        configured = list((cfg or {}).get("mcpServers", {}).keys())
        server_name = configured[0] if configured else DEFAULT_SERVER

    effective_model = (
        model
        or os.getenv("LLM_MODEL")
        or _provider_default_model(provider, cfg_mgr)
    )

    os.environ["LLM_PROVIDER"] = provider
    os.environ["LLM_MODEL"] = effective_model

    logger.debug("Resolved server=%s provider=%s model=%s", server_name, provider, effective_model)
    return server_name, provider, effective_model
