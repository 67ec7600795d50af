# mcp_console/__init__.py
"""
MCP-Console package root.

Early-loads environment variables from a .env file so that provider
adapters (Gemini, OpenAI, Anthropic) can read API keys via `os.getenv`
without the caller having to export them in the shell.

Nothing else should be imported from here to keep side-effects minimal.
"""
from __future__ import annotations

import logging

from dotenv import load_dotenv

if load_dotenv():  # True if a .env file was found
    logging.getLogger(__name__).debug(".env loaded successfully")

__version__ = "0.3.0"
