"""Tests for the configuration service and the config commands."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from lifeforge_cli.commands.config import _parse_value
from lifeforge_cli.main import app
from lifeforge_cli.models.config_models import AppConfig

runner = CliRunner()


# ---------------------------------------------------------------------------
# ConfigService
# ---------------------------------------------------------------------------


class TestConfigService:
    def test_first_load_writes_defaults(self, tmp_config):
        assert tmp_config.config == AppConfig()
        assert tmp_config.config_path.exists()

    def test_get_nested_value(self, tmp_config):
        assert tmp_config.get("timer.focus_minutes") == 25
        assert tmp_config.get("proxy.endpoint") == "http://localhost:5174"
        assert tmp_config.get("storage.data_dir") is None

    def test_get_unknown_key(self, tmp_config):
        with pytest.raises(KeyError):
            tmp_config.get("timer.nope")
        with pytest.raises(KeyError):
            tmp_config.get("timer.focus_minutes.extra")

    def test_set_persists(self, tmp_config):
        tmp_config.set("timer.focus_minutes", 50)

        saved = json.loads(tmp_config.config_path.read_text())
        assert saved["timer"]["focus_minutes"] == 50
        assert tmp_config.config.timer.focus_minutes == 50

    def test_set_rejects_unknown_key(self, tmp_config):
        with pytest.raises(KeyError):
            tmp_config.set("timer.nope", 1)

    def test_set_rejects_section(self, tmp_config):
        with pytest.raises(KeyError):
            tmp_config.set("timer", 1)

    def test_set_validates_range(self, tmp_config):
        with pytest.raises(ValueError):
            tmp_config.set("timer.focus_minutes", 1000)
        assert tmp_config.config.timer.focus_minutes == 25

    def test_session_cap_cannot_exceed_500(self, tmp_config):
        with pytest.raises(ValueError):
            tmp_config.set("storage.max_sessions", 501)
        assert tmp_config.config.storage.max_sessions == 500

        tmp_config.set("storage.max_sessions", 200)
        assert tmp_config.config.storage.max_sessions == 200

    def test_reset_single_key(self, tmp_config):
        tmp_config.set("timer.break_minutes", 15)
        tmp_config.reset("timer.break_minutes")
        assert tmp_config.config.timer.break_minutes == 5

    def test_reset_key_with_none_default(self, tmp_config, tmp_path):
        tmp_config.set("storage.data_dir", str(tmp_path / "elsewhere"))
        tmp_config.reset("storage.data_dir")
        assert tmp_config.config.storage.data_dir is None

    def test_reset_all(self, tmp_config):
        tmp_config.set("timer.focus_minutes", 40)
        tmp_config.set("proxy.fetch_on_start", False)
        tmp_config.reset()
        assert tmp_config.config == AppConfig()

    def test_storage_dir_override(self, tmp_config, tmp_path):
        assert tmp_config.storage_dir == tmp_config.data_dir

        tmp_config.set("storage.data_dir", str(tmp_path / "elsewhere"))
        assert tmp_config.storage_dir == tmp_path / "elsewhere"

    def test_corrupted_file_falls_back_to_defaults(self, tmp_path):
        from unittest.mock import patch

        from lifeforge_cli.services.config_service import ConfigService

        config_dir = tmp_path / "config"
        config_dir.mkdir()
        (config_dir / "config.json").write_text("{not json")

        with patch(
            "lifeforge_cli.services.config_service.user_config_dir",
            return_value=str(config_dir),
        ), patch(
            "lifeforge_cli.services.config_service.user_data_dir",
            return_value=str(tmp_path / "data"),
        ):
            service = ConfigService()
            assert service.load_config() == AppConfig()

        assert (config_dir / "config.json").read_text() == "{not json"

    def test_partial_file_keeps_other_defaults(self, tmp_path):
        from unittest.mock import patch

        from lifeforge_cli.services.config_service import ConfigService

        config_dir = tmp_path / "config"
        config_dir.mkdir()
        (config_dir / "config.json").write_text(json.dumps({"timer": {"focus_minutes": 45}}))

        with patch(
            "lifeforge_cli.services.config_service.user_config_dir",
            return_value=str(config_dir),
        ), patch(
            "lifeforge_cli.services.config_service.user_data_dir",
            return_value=str(tmp_path / "data"),
        ):
            config = ConfigService().load_config()

        assert config.timer.focus_minutes == 45
        assert config.timer.break_minutes == 5
        assert config.proxy.timeout == 10.0


class TestParseValue:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("true", True),
            ("False", False),
            ("none", None),
            ("42", 42),
            ("2.5", 2.5),
            ("http://localhost:5174", "http://localhost:5174"),
        ],
    )
    def test_parse(self, raw, expected):
        assert _parse_value(raw) == expected


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


class TestConfigCommands:
    def test_show(self, tmp_config):
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0, result.output
        assert "focus_minutes" in result.output

    def test_get(self, tmp_config):
        result = runner.invoke(app, ["config", "get", "timer.break_minutes"])
        assert result.exit_code == 0, result.output
        assert "5" in result.output

    def test_get_unknown(self, tmp_config):
        result = runner.invoke(app, ["config", "get", "timer.unknown"])
        assert result.exit_code == 2
        assert "not found" in result.output

    def test_set(self, tmp_config):
        result = runner.invoke(app, ["config", "set", "timer.focus_minutes", "30"])
        assert result.exit_code == 0, result.output
        assert tmp_config.config.timer.focus_minutes == 30

    def test_set_invalid_value(self, tmp_config):
        result = runner.invoke(app, ["config", "set", "timer.focus_minutes", "abc"])
        assert result.exit_code == 2
        assert tmp_config.config.timer.focus_minutes == 25

    def test_set_session_cap_above_500(self, tmp_config):
        result = runner.invoke(app, ["config", "set", "storage.max_sessions", "10000"])
        assert result.exit_code == 2
        assert tmp_config.config.storage.max_sessions == 500

    def test_set_unknown_key(self, tmp_config):
        result = runner.invoke(app, ["config", "set", "nope.key", "1"])
        assert result.exit_code == 2
        assert "Unknown configuration key" in result.output

    def test_reset_requires_confirmation(self, tmp_config):
        tmp_config.set("timer.focus_minutes", 40)
        result = runner.invoke(app, ["config", "reset"], input="n\n")
        assert result.exit_code == 0
        assert tmp_config.config.timer.focus_minutes == 40

    def test_reset_yes(self, tmp_config):
        tmp_config.set("timer.focus_minutes", 40)
        result = runner.invoke(app, ["config", "reset", "--yes"])
        assert result.exit_code == 0, result.output
        assert tmp_config.config.timer.focus_minutes == 25
