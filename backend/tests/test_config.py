"""
Solace Backend — Configuration Tests
======================================

What:  Tests for Settings parsing and the startup validation.

What we test:
    ✅ Missing OPENROUTER_API_KEY or JWT_SECRET aborts startup
    ✅ Comma-separated lists are split
    ✅ Invalid LOG_LEVEL is rejected
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from solace.config import Settings


def _settings(**overrides) -> Settings:
    values = {
        "database_url": "postgresql+asyncpg://solace:secret@db:5432/solace",
        "openrouter_api_key": "sk-test",
        "jwt_secret": "jwt-test",
    }
    values.update(overrides)
    return Settings(**values)


class TestValidateRequiredForProduction:
    def test_complete_configuration_passes(self):
        _settings().validate_required_for_production()

    def test_missing_jwt_secret_is_fatal(self):
        with pytest.raises(ValueError) as exc_info:
            _settings(jwt_secret="").validate_required_for_production()

        assert "JWT_SECRET" in str(exc_info.value)

    def test_missing_openrouter_key_is_fatal(self):
        with pytest.raises(ValueError) as exc_info:
            _settings(openrouter_api_key="").validate_required_for_production()

        assert "OPENROUTER_API_KEY" in str(exc_info.value)

    def test_all_missing_values_are_reported_together(self):
        with pytest.raises(ValueError) as exc_info:
            _settings(openrouter_api_key="", jwt_secret="").validate_required_for_production()

        message = str(exc_info.value)
        assert "OPENROUTER_API_KEY" in message
        assert "JWT_SECRET" in message


class TestSettingsParsing:
    def test_lists_are_split(self):
        settings = _settings(
            cors_origins="http://localhost:3000, https://solace.app",
            jwt_algorithms="HS256,HS512",
        )

        assert settings.cors_origins_list == ["http://localhost:3000", "https://solace.app"]
        assert settings.jwt_algorithms_list == ["HS256", "HS512"]

    def test_log_level_is_normalized(self):
        assert _settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(PydanticValidationError):
            _settings(log_level="chatty")
