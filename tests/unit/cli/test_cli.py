"""Unit tests for the widgetbridge CLI."""

import asyncio
import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from widgetbridge.cli.arg_parser import parse_args
from widgetbridge.cli.main import main
from widgetbridge.cli.serve import resolve_config, run_serve, run_show_config
from widgetbridge.config.loader import CONFIG_ENV_VAR
from widgetbridge.core.errors import ConfigError


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch, tmp_path):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)


class TestArgParser:

    def test_serve_defaults(self):
        args = parse_args(["serve"])
        assert args.command == "serve"
        assert args.config is None
        assert args.host is None
        assert args.port is None
        assert args.verbose is False
        assert args.log_dir == Path(".widgetbridge/logs")

    def test_serve_options(self):
        args = parse_args(["serve", "-p", "9000", "--host", "0.0.0.0", "-v", "-c", "b.json"])
        assert args.port == 9000
        assert args.host == "0.0.0.0"
        assert args.verbose is True
        assert args.config == Path("b.json")

    def test_config_command(self):
        args = parse_args(["config", "--config", "b.json"])
        assert args.command == "config"
        assert args.config == Path("b.json")

    def test_no_command(self):
        assert parse_args([]).command is None


class TestResolveConfig:

    def test_no_overrides(self):
        config = resolve_config()
        assert config.server.port == 8787

    def test_overrides(self):
        config = resolve_config(host="0.0.0.0", port=9100)
        assert config.server.host == "0.0.0.0"
        assert config.server.port == 9100

    def test_invalid_port_override(self):
        with pytest.raises(ValueError):
            resolve_config(port=0)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            resolve_config(tmp_path / "nope.json")


class TestShowConfig:

    def test_prints_effective_config(self, tmp_path, capsys):
        path = tmp_path / "bridge.json"
        path.write_text(json.dumps({"session": {"chain_id": 5}}))

        assert run_show_config(path) == 0
        printed = json.loads(capsys.readouterr().out)
        assert printed["session"]["chain_id"] == 5

    def test_bad_config(self, tmp_path, capsys):
        path = tmp_path / "bridge.json"
        path.write_text("{")

        assert run_show_config(path) == 1
        assert "Configuration error" in capsys.readouterr().out


class TestRunServe:

    @pytest.mark.asyncio
    async def test_bad_config_exits_before_serving(self, tmp_path):
        with patch("widgetbridge.cli.serve.BridgeServer") as server_cls:
            assert await run_serve(config_path=tmp_path / "missing.json") == 1
        server_cls.assert_not_called()

    @pytest.mark.asyncio
    async def test_bind_failure(self, tmp_path, capsys):
        with (
            patch("widgetbridge.cli.serve.configure_bridge_logging", return_value=tmp_path / "b.log"),
            patch("widgetbridge.cli.serve.BridgeServer") as server_cls,
        ):
            server = server_cls.return_value
            server.serve = AsyncMock(side_effect=OSError("address in use"))
            server.started = asyncio.Event()

            # Reported as soon as serve() fails, not after the bind timeout
            assert await asyncio.wait_for(run_serve(), timeout=1.0) == 1

        assert "address in use" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_banner_after_bind(self, tmp_path, capsys):
        with (
            patch("widgetbridge.cli.serve.configure_bridge_logging", return_value=tmp_path / "b.log"),
            patch("widgetbridge.cli.serve.BridgeServer") as server_cls,
        ):
            server = server_cls.return_value
            server.started = asyncio.Event()

            async def serve():
                server.started.set()
                await asyncio.sleep(0.01)

            server.serve = serve
            assert await run_serve(port=9100) == 0

        out = capsys.readouterr().out
        assert "Widget Bridge Server" in out
        assert "ws://127.0.0.1:9100" in out


class TestMain:

    def test_config_command_exit_code(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["config"])
        assert exc_info.value.code == 0
        assert json.loads(capsys.readouterr().out)["server"]["port"] == 8787

    def test_no_command_prints_help(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 1
        assert "usage: widgetbridge" in capsys.readouterr().out
