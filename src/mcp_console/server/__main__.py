# mcp_console/server/__main__.py
"""``python -m mcp_console.server`` – run the users server over stdio."""
import logging
import os
import sys

from mcp_console.server.app import run_server

if __name__ == "__main__":
    logging.basicConfig(
        level=os.getenv("LOGLEVEL", "WARNING").upper(),
        format="%(asctime)s  %(levelname)-8s  %(message)s",
        stream=sys.stderr,
    )
    run_server(sys.argv[1] if len(sys.argv) > 1 else None)
