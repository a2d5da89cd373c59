"""Tests for the command line entry point."""

from unittest.mock import patch

import pytest

from linear_dashboard.cli import build_parser, main
from linear_dashboard.config import load_config


class TestInit:
    """Tests for ``linear-dashboard init``."""

    def test_writes_config(self, tmp_path, monkeypatch, capsys):
        monkeypatch.delenv("LINEAR_API_KEY", raising=False)
        with patch("linear_dashboard.config.get_config_dir", return_value=tmp_path):
            code = main([
                "init", "--team-id", "team-1", "--api-key", "lin_api_x",
                "--allowed-origin", "https://dash.example.com",
            ])
            config = load_config()

        assert code == 0
        assert "Wrote" in capsys.readouterr().out
        assert config.team_id == "team-1"
        assert config.linear_api_key == "lin_api_x"
        assert config.allowed_origins == ["https://dash.example.com"]

    def test_refuses_to_overwrite(self, tmp_path, capsys):
        (tmp_path / "config.toml").write_text("[linear]\nteam_id = \"t\"\n")
        with patch("linear_dashboard.config.get_config_dir", return_value=tmp_path):
            code = main(["init", "--team-id", "team-2", "--api-key", "k"])
        assert code == 1
        assert "--force" in capsys.readouterr().err

    def test_reports_validation_errors(self, tmp_path, capsys):
        with patch("linear_dashboard.config.get_config_dir", return_value=tmp_path):
            code = main(["init", "--api-key", "k"])
        assert code == 1
        assert "A team ID or an assignee email is required" in capsys.readouterr().err
        assert not (tmp_path / "config.toml").exists()


class TestParser:
    def test_requires_command(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_proxy_defaults(self):
        args = build_parser().parse_args(["proxy"])
        assert args.port == 8787
        assert args.host == "127.0.0.1"


class TestProxyCommand:
    def test_exits_without_config(self, tmp_path, capsys):
        with patch("linear_dashboard.config.get_config_dir", return_value=tmp_path):
            with pytest.raises(SystemExit) as exc:
                main(["proxy"])
        assert exc.value.code == 1
        assert "Configuration not found" in capsys.readouterr().err
