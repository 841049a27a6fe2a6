"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from selfdeploy.core.config import Settings, get_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in (
        "SELFDEPLOY_GIT_BINARY",
        "SELFDEPLOY_CLONE_DEPTH",
        "SELFDEPLOY_CLONE_TIMEOUT",
        "SELFDEPLOY_CLONE_PREFIX",
        "SELFDEPLOY_DEBUG",
        "SELFDEPLOY_LOG_JSON",
    ):
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    def test_defaults(self):
        settings = get_settings()
        assert settings.git_binary == "git"
        assert settings.clone_depth == 1
        assert settings.clone_timeout is None
        assert settings.clone_prefix == "selfdeploy_repo."
        assert settings.debug is False
        assert settings.log_json is False

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("SELFDEPLOY_CLONE_DEPTH", "5")
        monkeypatch.setenv("SELFDEPLOY_CLONE_TIMEOUT", "120")
        monkeypatch.setenv("SELFDEPLOY_DEBUG", "true")
        settings = get_settings()
        assert settings.clone_depth == 5
        assert settings.clone_timeout == 120.0
        assert settings.debug is True

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("SELFDEPLOY_GIT_BINARY=/opt/git/bin/git\n", encoding="utf-8")
        assert Settings().git_binary == "/opt/git/bin/git"

    def test_depth_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("SELFDEPLOY_CLONE_DEPTH", "0")
        with pytest.raises(ValidationError):
            get_settings()

    def test_unrelated_variables_ignored(self, monkeypatch):
        monkeypatch.setenv("SELFDEPLOY_SOMETHING_ELSE", "1")
        assert get_settings().clone_depth == 1
