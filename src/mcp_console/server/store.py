# mcp_console/server/store.py
"""
Single-owner, append-only user store.

One JSON object per line.  Appends are serialised with an in-process lock and
written with one append-mode write; :meth:`UserStore.compact` rewrites the
file atomically (temp file + ``os.replace``) and drops blank or corrupt lines.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import anyio

log = logging.getLogger(__name__)

DEFAULT_USERS_FILE = "data/users.jsonl"
USERS_FILE_ENV = "MCP_CONSOLE_USERS_FILE"

User = Dict[str, Any]


def default_store_path() -> Path:
    return Path(os.getenv(USERS_FILE_ENV, DEFAULT_USERS_FILE))


class UserStore:
    def __init__(self, path: Union[str, Path, None] = None) -> None:
        self.path = Path(path) if path is not None else default_store_path()
        self._lock = anyio.Lock()

    # ------------------------------------------------------------------ #
    # reads                                                              #
    # ------------------------------------------------------------------ #
    def _read_sync(self) -> List[User]:
        if not self.path.exists():
            return []
        users: List[User] = []
        with self.path.open("r", encoding="utf-8") as fh:
            for lineno, line in enumerate(fh, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    record = json.loads(line)
                except json.JSONDecodeError:
                    log.warning("%s:%d: skipping corrupt record", self.path, lineno)
                    continue
                if isinstance(record, dict):
                    users.append(record)
        return users

    async def read_all(self) -> List[User]:
        return await anyio.to_thread.run_sync(self._read_sync)

    async def get(self, user_id: Union[int, str]) -> Optional[User]:
        """Look a user up by id; non-numeric ids simply miss."""
        try:
            wanted = int(user_id)
        except (TypeError, ValueError):
            return None
        for user in await self.read_all():
            if user.get("id") == wanted:
                return user
        return None

    # ------------------------------------------------------------------ #
    # writes                                                             #
    # ------------------------------------------------------------------ #
    def _append_sync(self, name: str, email: str) -> int:
        user_id = len(self._read_sync()) + 1
        line = json.dumps({"id": user_id, "name": name, "email": email}) + "\n"
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as fh:
            fh.write(line)
        return user_id

    async def append(self, name: str, email: str) -> int:
        """Add a user and return its id (number of existing records + 1)."""
        async with self._lock:
            user_id = await anyio.to_thread.run_sync(self._append_sync, name, email)
        log.info("Stored user %d (%s)", user_id, email)
        return user_id

    def _compact_sync(self) -> int:
        users = self._read_sync()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                for user in users:
                    fh.write(json.dumps(user) + "\n")
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        return len(users)

    async def compact(self) -> int:
        """Rewrite the file with only valid records; returns how many were kept."""
        async with self._lock:
            kept = await anyio.to_thread.run_sync(self._compact_sync)
        log.info("Compacted %s to %d record(s)", self.path, kept)
        return kept
