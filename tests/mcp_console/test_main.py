# tests/mcp_console/test_main.py
import json

import pytest
from typer.testing import CliRunner

import mcp_console.main as main_mod

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.setattr("mcp_console.provider_config.CFG_PATH", tmp_path / "providers.json")
    # process_options exports the resolved provider/model
    for var in ("LLM_PROVIDER", "LLM_MODEL"):
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "server_config.json"
    path.write_text(json.dumps({"mcpServers": {"users": {"command": "mcp-console", "args": ["server"]}}}))
    return str(path)


@pytest.fixture
def calls(monkeypatch):
    recorded = []

    def fake_run(command, config_file, server_name, **kwargs):
        recorded.append((command, config_file, server_name, kwargs))

    monkeypatch.setattr(main_mod, "run_command_sync", fake_run)
    return recorded


def test_tools_list_forwards_flags(config_file, calls):
    result = runner.invoke(main_mod.app, ["tools", "list", "--config-file", config_file, "--details"])

    assert result.exit_code == 0, result.output
    command, cfg, server, kwargs = calls[0]
    assert command is main_mod._list_tools
    assert cfg == config_file
    assert server == "users"
    assert kwargs["extra_params"] == {"details": True, "raw": False}


def test_interactive_passes_model_options(config_file, calls):
    result = runner.invoke(
        main_mod.app,
        ["interactive", "--config-file", config_file, "--provider", "openai", "--model", "gpt-4o", "--max-steps", "3"],
    )

    assert result.exit_code == 0, result.output
    command, _, _, kwargs = calls[0]
    assert command is main_mod.enter_interactive_mode
    assert kwargs["interactive"] is True
    assert kwargs["extra_params"]["provider"] == "openai"
    assert kwargs["extra_params"]["model"] == "gpt-4o"
    assert kwargs["extra_params"]["max_steps"] == 3


def test_max_steps_must_be_positive(config_file, calls):
    result = runner.invoke(main_mod.app, ["interactive", "--config-file", config_file, "--max-steps", "0"])

    assert result.exit_code != 0
    assert calls == []


def test_fatal_error_panel(config_file, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("server exited")

    monkeypatch.setattr(main_mod, "run_command_sync", boom)
    result = runner.invoke(main_mod.app, ["prompts", "list", "--config-file", config_file])

    assert result.exit_code == 1
    assert "Fatal Error" in result.output
    assert "server exited" in result.output
