# mcp_console/config.py
"""
Resolve one entry of ``server_config.json`` into launch parameters.

The file uses the usual MCP client layout::

    {
      "mcpServers": {
        "users": {"command": "mcp-console", "args": ["server"], "env": {}}
      }
    }
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from mcp import StdioServerParameters

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "server_config.json"
DEFAULT_SERVER = "users"

# used when no config file exists: launch the bundled users server
BUILTIN_SERVERS: Dict[str, Dict[str, Any]] = {
    DEFAULT_SERVER: {"command": "mcp-console", "args": ["server"], "env": {}},
}


def _server_params(name: str, entry: Dict[str, Any]) -> StdioServerParameters:
    command = entry.get("command")
    if not command:
        raise ValueError(f"Server '{name}' has no 'command' configured.")

    # the SDK layers ``env`` over its own safe default environment
    env: Optional[Dict[str, str]] = entry.get("env") or None
    return StdioServerParameters(
        command=command,
        args=list(entry.get("args", [])),
        env=env,
        cwd=entry.get("cwd"),
    )


async def load_config(config_file: str, server_name: str) -> StdioServerParameters:
    """Load the launch parameters of *server_name* from *config_file*.

    Raises ``FileNotFoundError`` when the file is missing (unless the name is
    one of the built-in servers), ``ValueError`` when the server is not listed
    and ``json.JSONDecodeError`` on malformed JSON.
    """
    path = Path(config_file)
    if not path.is_file():
        if server_name in BUILTIN_SERVERS:
            logger.debug("Config file '%s' absent, using built-in '%s'", config_file, server_name)
            return _server_params(server_name, BUILTIN_SERVERS[server_name])
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    config = json.loads(path.read_text(encoding="utf-8"))
    entry = config.get("mcpServers", {}).get(server_name)
    if entry is None:
        raise ValueError(f"Server '{server_name}' not found in configuration file.")

    logger.debug("Loaded server '%s' from %s", server_name, config_file)
    return _server_params(server_name, entry)
