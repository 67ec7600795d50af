# mcp_console/server/__init__.py
from mcp_console.server.app import build_server, run_server
from mcp_console.server.store import UserStore

__all__ = ["UserStore", "build_server", "run_server"]
