from __future__ import annotations

from binja_bridge.cli import build_parser, config_from_args
from binja_bridge.utils.config import BridgeConfig, resolve_config
from binja_bridge.utils.env import ENV_FILE_VAR, load_env


def test_defaults() -> None:
    config = resolve_config(environ={})

    assert config == BridgeConfig(host="localhost", port=9009, timeout=30.0)
    assert config.base_url == "http://localhost:9009"


def test_environment_overrides_defaults() -> None:
    env = {"BINJA_MCP_HOST": "10.0.0.5", "BINJA_MCP_PORT": "9100", "BINJA_MCP_TIMEOUT": "5"}

    config = resolve_config(environ=env)

    assert config.base_url == "http://10.0.0.5:9100"
    assert config.timeout == 5.0


def test_command_line_overrides_environment() -> None:
    env = {"BINJA_MCP_HOST": "10.0.0.5", "BINJA_MCP_PORT": "9100"}

    config = resolve_config(host="127.0.0.1", port=9200, environ=env)

    assert config.base_url == "http://127.0.0.1:9200"


def test_invalid_environment_values_fall_back() -> None:
    env = {"BINJA_MCP_HOST": "  ", "BINJA_MCP_PORT": "ninety", "BINJA_MCP_TIMEOUT": "-1"}

    assert resolve_config(environ=env) == BridgeConfig()


def test_parser_leaves_connection_flags_unset(monkeypatch) -> None:
    monkeypatch.setenv("BINJA_MCP_PORT", "9300")
    monkeypatch.setenv("BINJA_MCP_HOST", "unset")
    monkeypatch.delenv("BINJA_MCP_HOST")
    monkeypatch.delenv("BINJA_MCP_TIMEOUT", raising=False)

    args = build_parser().parse_args([])
    assert args.transport == "stdio"
    assert config_from_args(args).port == 9300

    args = build_parser().parse_args(["--port", "9400", "--host", "binja", "--timeout", "2.5"])
    assert config_from_args(args) == BridgeConfig(host="binja", port=9400, timeout=2.5)


def test_env_file_fills_unset_variables_only(tmp_path, monkeypatch) -> None:
    env_file = tmp_path / "bridge.env"
    env_file.write_text("BINJA_MCP_HOST=from-file\nBINJA_MCP_PORT=9300\n")
    monkeypatch.setenv(ENV_FILE_VAR, str(env_file))
    monkeypatch.setenv("BINJA_MCP_PORT", "9400")
    monkeypatch.setenv("BINJA_MCP_HOST", "placeholder")
    monkeypatch.delenv("BINJA_MCP_HOST")

    loaded = load_env(force=True)

    assert loaded == env_file
    assert resolve_config().base_url == "http://from-file:9400"


def test_missing_env_file_is_not_an_error(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv(ENV_FILE_VAR, str(tmp_path / "absent.env"))

    assert load_env(force=True) is None
