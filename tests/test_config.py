"""
Tests for application settings.
"""

from laptopshop.config import Settings, settings


class TestSettings:
    """Test loading settings from the environment."""

    def test_environment_overrides(self):
        """Test that the test environment reached the global settings."""
        assert settings.DATABASE_URL == "sqlite:///:memory:"
        assert settings.PASSWORD_HASH_ROUNDS == 4
        assert settings.LOG_LEVEL == "WARNING"

    def test_defaults(self, monkeypatch):
        """Test built-in defaults when nothing is set."""
        for name in ("DATABASE_URL", "PASSWORD_HASH_ROUNDS", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        defaults = Settings(_env_file=None)
        assert defaults.APP_NAME == "laptopshop"
        assert defaults.DATABASE_URL == "sqlite:///laptopshop.db"
        assert defaults.PASSWORD_HASH_ROUNDS == 12
        assert defaults.QUERY_LOG_THRESHOLD_MS == 100
        assert defaults.DB_ECHO is False
        assert defaults.LOGIN_MAX_FAILED_ATTEMPTS == 5
        assert defaults.LOGIN_FAILURE_WINDOW_SECONDS == 60
        assert defaults.LOGIN_BLOCK_SECONDS == 300

    def test_typed_values(self, monkeypatch):
        """Test that environment strings are coerced to field types."""
        monkeypatch.setenv("DB_ECHO", "true")
        monkeypatch.setenv("QUERY_LOG_THRESHOLD_MS", "250")
        loaded = Settings(_env_file=None)
        assert loaded.DB_ECHO is True
        assert loaded.QUERY_LOG_THRESHOLD_MS == 250
