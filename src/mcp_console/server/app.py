# mcp_console/server/app.py
"""
The bundled *users* MCP server.

Resources ``users://all`` and ``users://{id}/profile``, the tools
``get-coordinates``, ``create-user`` and ``create-random-user`` and the
``generate-fake-user`` prompt.  Every tool turns its own failures into a text
result so the client always receives content.
"""
import json
import logging
import os
import re
from typing import Annotated, Optional

import httpx
from mcp import types
from mcp.server.fastmcp import Context, FastMCP
from pydantic import EmailStr, Field, TypeAdapter

from mcp_console.server.geocoding import describe_coordinates, search_city
from mcp_console.server.store import UserStore

log = logging.getLogger(__name__)

SERVER_NAME = "users"
SAMPLING_MAX_TOKENS = 1024
USER_NOT_FOUND = {"error": "User not found"}
_EMAIL = TypeAdapter(EmailStr)

RANDOM_USER_REQUEST = (
    "Create a random user with fake data. The user should have a name, a valid "
    "email address and a unique int Id. Return this data as a JSON object."
)
_FENCE_RE = re.compile(r"^\s*```(?:json)?\s*|\s*```\s*$")


def strip_code_fence(text: str) -> str:
    """Remove an optional Markdown code fence around a JSON reply."""
    return _FENCE_RE.sub("", text).strip()


def build_server(
    store: UserStore,
    http_client: Optional[httpx.AsyncClient] = None,
    *,
    log_level: str = "WARNING",
) -> FastMCP:
    """Register every capability on a fresh :class:`FastMCP` instance."""
    server = FastMCP(SERVER_NAME, log_level=log_level.upper())

    # ------------------------------------------------------------------ #
    # resources                                                          #
    # ------------------------------------------------------------------ #
    @server.resource(
        "users://all",
        name="users",
        title="Users",
        description="A resource containing all users",
        mime_type="application/json",
    )
    async def all_users() -> str:
        return json.dumps(await store.read_all(), indent=2)

    @server.resource(
        "users://{id}/profile",
        name="user-details",
        description="Get a user's details from the database",
        mime_type="application/json",
    )
    async def user_details(id: str) -> str:  # noqa: A002 – placeholder name
        user = await store.get(id)
        return json.dumps(user if user is not None else USER_NOT_FOUND, indent=2)

    # ------------------------------------------------------------------ #
    # tools                                                              #
    # ------------------------------------------------------------------ #
    @server.tool(
        name="get-coordinates",
        description="Tool to get coordinates information",
        annotations=types.ToolAnnotations(
            title="Get Coordinates",
            readOnlyHint=True,
            destructiveHint=False,
            idempotentHint=True,
            openWorldHint=True,
        ),
    )
    async def get_coordinates(
        city: Annotated[str, Field(description="City name to get the coordinates for")],
    ) -> str:
        try:
            return describe_coordinates(city, await search_city(city, http_client))
        except Exception as exc:  # noqa: BLE001 – returned as tool text
            log.error("Geocoding %s failed: %s", city, exc)
            return f"Error fetching coordinates data for {city}: {exc}"

    @server.tool(
        name="create-user",
        description="Create a new user in the database.",
        annotations=types.ToolAnnotations(
            title="Create User",
            readOnlyHint=False,
            destructiveHint=False,
            idempotentHint=False,
            openWorldHint=True,
        ),
    )
    async def create_user(
        name: Annotated[str, Field(description="User name to create")],
        email: Annotated[EmailStr, Field(description="User email to create")],
    ) -> str:
        try:
            user_id = await store.append(name, email)
        except Exception as exc:  # noqa: BLE001 – returned as tool text
            log.error("Creating user failed: %s", exc)
            return f"Error creating user: {exc}"
        return f"User {user_id} created successfully: {name} ({email})"

    @server.tool(
        name="create-random-user",
        description="Create a random user with fake data",
        annotations=types.ToolAnnotations(
            title="Create Random User",
            readOnlyHint=False,
            destructiveHint=False,
            idempotentHint=False,
            openWorldHint=True,
        ),
    )
    async def create_random_user(ctx: Context) -> str:
        try:
            reply = await ctx.session.create_message(
                messages=[
                    types.SamplingMessage(
                        role="user",
                        content=types.TextContent(type="text", text=RANDOM_USER_REQUEST),
                    )
                ],
                max_tokens=SAMPLING_MAX_TOKENS,
                related_request_id=ctx.request_id,
            )
            if not isinstance(reply.content, types.TextContent):
                return "Error: Failed to generate fake user data."

            fake = json.loads(strip_code_fence(reply.content.text))
            email = _EMAIL.validate_python(fake["email"])
            user_id = await store.append(fake["name"], email)
        except Exception as exc:  # noqa: BLE001 – returned as tool text
            log.error("Creating random user failed: %s", exc)
            return f"Error: {exc}"
        return f"Fake user created successfully: {user_id}"

    # ------------------------------------------------------------------ #
    # prompts                                                            #
    # ------------------------------------------------------------------ #
    @server.prompt(name="generate-fake-user", description="Generate a fake user for a given name")
    def generate_fake_user(
        name: Annotated[str, Field(description="Name of the user to generate")],
    ) -> str:
        return (
            f"Generate a fake user with the name {name}. "
            "The user should have a valid email address and a unique Id."
        )

    return server


def run_server(store_path: Optional[str] = None, *, log_level: Optional[str] = None) -> None:
    """Serve the registry over stdio until the client disconnects."""
    store = UserStore(store_path)
    log.info("Serving users from %s", store.path)
    build_server(store, log_level=log_level or os.getenv("LOGLEVEL", "WARNING")).run("stdio")
