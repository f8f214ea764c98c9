"""
Tests for settings loading.
"""

import tempfile
from pathlib import Path

import pytest

from smnoise.config import DEFAULT_DB_HOST, load_settings
from smnoise.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in (
        "HAZARD_PASSWD",
        "HAZARD_DB_HOST",
        "HAZARD_DB_PORT",
        "HAZARD_OUTPUT_DIR",
        "HAZARD_NOISE_THRESHOLD",
    ):
        monkeypatch.delenv(name, raising=False)


class TestLoadSettings:
    def test_missing_password(self):
        with pytest.raises(ConfigurationError, match="HAZARD_PASSWD not set"):
            load_settings()

    def test_defaults(self, monkeypatch):
        monkeypatch.setenv("HAZARD_PASSWD", "secret")

        settings = load_settings()

        assert settings.passwd.get_secret_value() == "secret"
        assert settings.db_host == DEFAULT_DB_HOST
        assert settings.db_name == "hazard"
        assert settings.db_user == "hazard_r"
        assert settings.db_sslmode == "disable"
        assert settings.output_dir == Path(tempfile.gettempdir())
        assert settings.noise_threshold == 16
        assert settings.report_limit == 10

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HAZARD_PASSWD", "secret")
        monkeypatch.setenv("HAZARD_DB_HOST", "localhost")
        monkeypatch.setenv("HAZARD_OUTPUT_DIR", str(tmp_path))
        monkeypatch.setenv("HAZARD_NOISE_THRESHOLD", "20")

        settings = load_settings()

        assert settings.db_host == "localhost"
        assert settings.output_dir == tmp_path
        assert settings.noise_threshold == 20

    def test_explicit_overrides_win(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HAZARD_PASSWD", "secret")
        monkeypatch.setenv("HAZARD_OUTPUT_DIR", "/somewhere/else")

        settings = load_settings(output_dir=tmp_path)

        assert settings.output_dir == tmp_path

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("HAZARD_PASSWD=from-file\nHAZARD_DB_PORT=6432\n")

        settings = load_settings(env_file=env_file)

        assert settings.passwd.get_secret_value() == "from-file"
        assert settings.db_port == 6432

    def test_invalid_value(self, monkeypatch):
        monkeypatch.setenv("HAZARD_PASSWD", "secret")
        monkeypatch.setenv("HAZARD_DB_PORT", "not-a-port")

        with pytest.raises(ConfigurationError, match="Invalid settings"):
            load_settings()

    def test_password_not_in_repr(self, monkeypatch):
        monkeypatch.setenv("HAZARD_PASSWD", "secret")

        settings = load_settings()

        assert "secret" not in repr(settings)
        assert "secret" not in settings.database_url().render_as_string(hide_password=True)
