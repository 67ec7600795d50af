# mcp_console/main.py
"""Entry-point for the MCP Console."""
from __future__ import annotations

import logging
import os
import signal
import sys
from typing import Any, Optional

import typer
from rich.console import Console
from rich.panel import Panel

# ──────────────────────────────────────────────────────────────────────────────
# local imports
# ──────────────────────────────────────────────────────────────────────────────
from mcp_console.cli_options import process_options
from mcp_console.commands.prompts import prompts_action_async
from mcp_console.commands.resources import resources_action_async
from mcp_console.commands.tools import tools_action_async
from mcp_console.config import DEFAULT_CONFIG_FILE
from mcp_console.provider_config import ProviderConfig
from mcp_console.run_command import enter_interactive_mode, run_command_sync
from mcp_console.ui.ui_helpers import restore_terminal

# ──────────────────────────────────────────────────────────────────────────────
# logging
# ──────────────────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=os.getenv("LOGLEVEL", "WARNING").upper(),
    format="%(asctime)s  %(levelname)-8s  %(message)s",
    stream=sys.stderr,
)

console = Console()


def _fatal(exc: BaseException) -> None:
    console.print(Panel(str(exc) or exc.__class__.__name__, title="Fatal Error", style="bold red"))
    sys.exit(1)


# ──────────────────────────────────────────────────────────────────────────────
# Typer root app + global “quiet” flag
# ──────────────────────────────────────────────────────────────────────────────
app = typer.Typer(add_completion=False, help="Interactive MCP client with model-backed sampling.")


def _start_interactive(
    config_file: str = DEFAULT_CONFIG_FILE,
    server: Optional[str] = None,
    provider: Optional[str] = None,
    model: Optional[str] = None,
    api_base: Optional[str] = None,
    api_key: Optional[str] = None,
    max_steps: int = 1,
) -> None:
    provider_cfg = ProviderConfig()
    actual_provider = provider or provider_cfg.get_active_provider()
    server_name, actual_provider, actual_model = process_options(
        server,
        actual_provider,
        model,
        config_file,
        provider_config=provider_cfg,
    )
    try:
        run_command_sync(
            enter_interactive_mode,
            config_file,
            server_name,
            interactive=True,
            extra_params={
                "provider": actual_provider,
                "model": actual_model,
                "api_base": api_base,
                "api_key": api_key,
                "provider_config": provider_cfg,
                "max_steps": max_steps,
                "max_tokens": provider_cfg.get_max_tokens(),
            },
        )
    except Exception as exc:  # noqa: BLE001 – show nicely then exit
        _fatal(exc)


@app.callback(invoke_without_command=True)
def main_callback(  # noqa: D401
    ctx: typer.Context,
    quiet: bool = typer.Option(
        False,
        "-q",
        "--quiet",
        help="Only show warnings and errors in the log output",
        is_flag=True,
        show_default=False,
    ),
) -> None:
    """Common pre-command setup (handles --quiet); runs interactive mode by default."""
    if quiet:
        logging.getLogger().setLevel(logging.WARNING)
        os.environ["LOGLEVEL"] = "WARNING"
    if ctx.invoked_subcommand is None:
        _start_interactive()


# ──────────────────────────────────────────────────────────────────────────────
# interactive
# ──────────────────────────────────────────────────────────────────────────────
@app.command("interactive", help="Start the interactive menu.")
def _interactive_command(  # noqa: D401
    config_file: str = typer.Option(DEFAULT_CONFIG_FILE, help="Configuration file path"),
    server: Optional[str] = typer.Option(None, help="Server to connect to"),
    provider: Optional[str] = typer.Option(
        None, help="LLM provider name (defaults to active provider)"
    ),
    model: Optional[str] = typer.Option(
        None, help="Model name (defaults to the provider's default model)"
    ),
    api_base: Optional[str] = typer.Option(
        None, "--api-base", help="API base URL for the provider"
    ),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", help="API key for the provider"
    ),
    max_steps: int = typer.Option(
        1, "--max-steps", min=1, help="Model/tool rounds per query"
    ),
) -> None:
    """Start the interactive menu."""
    _start_interactive(config_file, server, provider, model, api_base, api_key, max_steps)


# ──────────────────────────────────────────────────────────────────────────────
# server
# ──────────────────────────────────────────────────────────────────────────────
@app.command("server", help="Run the bundled users MCP server over stdio.")
def _server_command(
    store: Optional[str] = typer.Option(
        None, "--store", help="User store file (default: $MCP_CONSOLE_USERS_FILE or data/users.jsonl)"
    ),
) -> None:
    from mcp_console.server.app import run_server

    run_server(store)


# ──────────────────────────────────────────────────────────────────────────────
# listing sub-command groups (tools/resources/prompts)
# ──────────────────────────────────────────────────────────────────────────────
async def _list_tools(*, snapshot: Any, details: bool = False, raw: bool = False, **_: Any) -> None:
    await tools_action_async(snapshot, show_details=details, show_raw=raw)


async def _list_resources(*, snapshot: Any, **_: Any) -> None:
    await resources_action_async(snapshot)


async def _list_prompts(*, snapshot: Any, **_: Any) -> None:
    await prompts_action_async(snapshot)


def _run_listing(command, config_file: str, server: Optional[str], **extra: Any) -> None:
    provider_cfg = ProviderConfig()
    server_name, _, _ = process_options(
        server,
        provider_cfg.get_active_provider(),
        None,
        config_file,
        provider_config=provider_cfg,
    )
    try:
        run_command_sync(command, config_file, server_name, extra_params=extra)
    except Exception as exc:  # noqa: BLE001 – show nicely then exit
        _fatal(exc)


tools_app = typer.Typer(help="Commands for working with tools")
resources_app = typer.Typer(help="Commands for working with resources")
prompts_app = typer.Typer(help="Commands for working with prompts")


@tools_app.command("list", help="List the tools the server provides.")
def _tools_list(
    config_file: str = typer.Option(DEFAULT_CONFIG_FILE, help="Configuration file path"),
    server: Optional[str] = typer.Option(None, help="Server to connect to"),
    details: bool = typer.Option(False, "--details", help="Show parameters and hints"),
    raw: bool = typer.Option(False, "--raw", help="Print raw JSON definitions"),
) -> None:
    _run_listing(_list_tools, config_file, server, details=details, raw=raw)


@resources_app.command("list", help="List the resources and resource templates.")
def _resources_list(
    config_file: str = typer.Option(DEFAULT_CONFIG_FILE, help="Configuration file path"),
    server: Optional[str] = typer.Option(None, help="Server to connect to"),
) -> None:
    _run_listing(_list_resources, config_file, server)


@prompts_app.command("list", help="List the prompts the server provides.")
def _prompts_list(
    config_file: str = typer.Option(DEFAULT_CONFIG_FILE, help="Configuration file path"),
    server: Optional[str] = typer.Option(None, help="Server to connect to"),
) -> None:
    _run_listing(_list_prompts, config_file, server)


app.add_typer(tools_app, name="tools", help="Tools commands")
app.add_typer(resources_app, name="resources", help="Resources commands")
app.add_typer(prompts_app, name="prompts", help="Prompts commands")


# ──────────────────────────────────────────────────────────────────────────────
# graceful shutdown
# ──────────────────────────────────────────────────────────────────────────────
def _signal_handler(sig, _frame):
    logging.debug("Received signal %s, restoring terminal", sig)
    restore_terminal()
    sys.exit(0)


def _setup_signal_handlers() -> None:
    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)
    if hasattr(signal, "SIGQUIT"):
        signal.signal(signal.SIGQUIT, _signal_handler)


# ──────────────────────────────────────────────────────────────────────────────
# main
# ──────────────────────────────────────────────────────────────────────────────
def cli_entry() -> None:
    """Console-script entry point."""
    _setup_signal_handlers()
    try:
        app()  # Typer dispatch
    finally:
        restore_terminal()


if __name__ == "__main__":
    cli_entry()
