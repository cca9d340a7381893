"""
Tests for environment configuration.
"""

from ..config import Settings
from ..engine_core.expression import DEFAULT_FORMULA


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("GRIMHAND_ENV", "GRIMHAND_LOG_LEVEL", "ALLOWED_ORIGINS", "GRIMHAND_DEFAULT_FORMULA"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings.from_env()
        assert settings.env == "development"
        assert settings.log_level == "INFO"
        assert settings.allowed_origins == ["*"]
        assert settings.default_formula == DEFAULT_FORMULA

    def test_origins_are_split(self, monkeypatch):
        monkeypatch.setenv("ALLOWED_ORIGINS", "http://localhost:3000, https://grimhand.app ,")
        settings = Settings.from_env()
        assert settings.allowed_origins == ["http://localhost:3000", "https://grimhand.app"]

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("GRIMHAND_ENV", "production")
        monkeypatch.setenv("GRIMHAND_DEFAULT_FORMULA", "attack")
        settings = Settings.from_env()
        assert settings.env == "production"
        assert settings.default_formula == "attack"
