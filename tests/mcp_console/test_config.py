import json
import pytest

from mcp_console.config import BUILTIN_SERVERS, load_config


@pytest.mark.asyncio
async def test_load_config_success(tmp_path):
    config_data = {
        "mcpServers": {
            "TestServer": {
                "command": "dummy_command",
                "args": ["--dummy"],
                "env": {"VAR": "value"}
            }
        }
    }
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps(config_data))

    result = await load_config(str(config_file), "TestServer")

    assert result.command == "dummy_command"
    assert result.args == ["--dummy"]
    assert result.env == {"VAR": "value"}


@pytest.mark.asyncio
async def test_load_config_empty_env_is_none(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"mcpServers": {"s": {"command": "c"}}}))

    result = await load_config(str(config_file), "s")
    assert result.args == []
    assert result.env is None


@pytest.mark.asyncio
async def test_load_config_server_not_found(tmp_path):
    config_data = {
        "mcpServers": {
            "AnotherServer": {
                "command": "dummy_command",
                "args": [],
                "env": {}
            }
        }
    }
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps(config_data))

    with pytest.raises(ValueError, match=r"Server 'TestServer' not found in configuration file\."):
        await load_config(str(config_file), "TestServer")


@pytest.mark.asyncio
async def test_load_config_missing_command(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"mcpServers": {"broken": {"args": []}}}))

    with pytest.raises(ValueError, match="no 'command'"):
        await load_config(str(config_file), "broken")


@pytest.mark.asyncio
async def test_load_config_file_not_found(tmp_path):
    non_existent = tmp_path / "nonexistent.json"

    with pytest.raises(FileNotFoundError, match=r"Configuration file not found:"):
        await load_config(str(non_existent), "TestServer")


@pytest.mark.asyncio
async def test_missing_file_falls_back_to_builtin_server(tmp_path):
    result = await load_config(str(tmp_path / "nonexistent.json"), "users")

    assert result.command == BUILTIN_SERVERS["users"]["command"]
    assert result.args == ["server"]


@pytest.mark.asyncio
async def test_load_config_invalid_json(tmp_path):
    invalid_file = tmp_path / "invalid.json"
    invalid_file.write_text("not a json")

    with pytest.raises(json.JSONDecodeError):
        await load_config(str(invalid_file), "TestServer")
