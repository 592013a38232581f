"""
Tests for YAML settings loading.
"""

import pytest
from edrtest.config import (
    DEFAULT_LOG_FILE,
    EDRTEST_CONFIG,
    Settings,
    default_config_path,
    load_settings,
)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv(EDRTEST_CONFIG, raising=False)
    return home


class TestLoadSettings:
    """Test the config search order and validation."""

    def test_defaults(self):
        assert load_settings() == Settings()
        assert load_settings().log_file == DEFAULT_LOG_FILE

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("log_file: /var/log/probe.log\n")
        assert load_settings(path).log_file == "/var/log/probe.log"

    def test_explicit_path_as_string(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("log_file: x.log\n")
        assert load_settings(str(path)).log_file == "x.log"

    def test_missing_explicit_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "nope.yaml")

    def test_environment_variable(self, tmp_path, monkeypatch):
        path = tmp_path / "env.yaml"
        path.write_text("log_file: env.log\n")
        monkeypatch.setenv(EDRTEST_CONFIG, str(path))
        assert load_settings().log_file == "env.log"

    def test_explicit_beats_environment(self, tmp_path, monkeypatch):
        env_path = tmp_path / "env.yaml"
        env_path.write_text("log_file: env.log\n")
        explicit = tmp_path / "explicit.yaml"
        explicit.write_text("log_file: explicit.log\n")
        monkeypatch.setenv(EDRTEST_CONFIG, str(env_path))
        assert load_settings(explicit).log_file == "explicit.log"

    def test_user_config(self):
        path = default_config_path()
        path.parent.mkdir(parents=True)
        path.write_text("log_file: user.log\n")
        assert load_settings().log_file == "user.log"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("")
        assert load_settings(path) == Settings()

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError):
            load_settings(path)

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("log_fil: typo.log\n")
        with pytest.raises(ValueError, match="log_fil"):
            load_settings(path)
