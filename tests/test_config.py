"""Tests for configuration loading and validation."""

from unittest.mock import patch

import pytest

from linear_dashboard.config import Config, config_from_dict, load_config, save_config


def _valid_config(**overrides):
    values = {"team_id": "team-1", "linear_api_key": "lin_api_123"}
    values.update(overrides)
    return Config(**values)


class TestValidate:
    """Tests for Config.validate."""

    def test_valid(self):
        assert _valid_config().validate() == []

    def test_requires_key_or_proxy(self):
        errors = _valid_config(linear_api_key="").validate()
        assert "Either a proxy URL or a Linear API key is required" in errors

    def test_proxy_without_key_is_fine(self):
        config = _valid_config(linear_api_key="", proxy_url="https://proxy.example.workers.dev")
        assert config.validate() == []

    def test_requires_team_or_assignee(self):
        errors = _valid_config(team_id="").validate()
        assert "A team ID or an assignee email is required" in errors

    def test_assignee_email_must_look_like_email(self):
        errors = _valid_config(team_id="", assignee_email="nobody").validate()
        assert "Assignee email must be a valid email address" in errors

    def test_rejects_bad_urls(self):
        errors = _valid_config(proxy_url="ftp://proxy").validate()
        assert "Proxy URL must start with http:// or https://" in errors

    def test_rejects_non_positive_interval(self):
        assert _valid_config(refresh_interval=0).validate()

    def test_rejects_unknown_status_category(self):
        errors = _valid_config(project_statuses={"Shipped": "launched"}).validate()
        assert len(errors) == 1
        assert "Shipped" in errors[0]


class TestLoadConfig:
    """Tests for load_config / save_config."""

    def test_raises_when_missing(self, tmp_path):
        with patch("linear_dashboard.config.get_config_dir", return_value=tmp_path):
            with pytest.raises(FileNotFoundError):
                load_config()

    def test_save_then_load(self, tmp_path, monkeypatch):
        monkeypatch.delenv("LINEAR_API_KEY", raising=False)
        config = _valid_config(
            allowed_origins=["https://dash.example.com"],
            project_statuses={"shipped": "completed"},
            refresh_interval=120,
        )
        with patch("linear_dashboard.config.get_config_dir", return_value=tmp_path):
            save_config(config)
            loaded = load_config()
        assert loaded == config

    def test_env_key_overrides_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LINEAR_API_KEY", "from-env")
        with patch("linear_dashboard.config.get_config_dir", return_value=tmp_path):
            save_config(_valid_config())
            assert load_config().linear_api_key == "from-env"

    def test_raises_when_invalid(self, tmp_path, monkeypatch):
        monkeypatch.delenv("LINEAR_API_KEY", raising=False)
        (tmp_path / "config.toml").write_text('[linear]\nteam_id = "t"\n', encoding="utf-8")
        with patch("linear_dashboard.config.get_config_dir", return_value=tmp_path):
            with pytest.raises(ValueError, match="Invalid configuration"):
                load_config()

    def test_status_categories_are_lowercased(self, monkeypatch):
        monkeypatch.delenv("LINEAR_API_KEY", raising=False)
        config = config_from_dict({"statuses": {"projects": {"Shipped": "Completed"}}})
        assert config.project_statuses == {"Shipped": "completed"}
