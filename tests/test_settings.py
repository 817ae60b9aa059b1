"""
Tests for settings validation — the signing secret is mandatory in production.
"""

import pytest
from pydantic import ValidationError

from config.settings import Settings


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None, environment="development", jwt_secret=None)
        assert settings.bcrypt_rounds == 12
        assert settings.jwt_expiry_seconds == 86400
        assert settings.auth_timing_floor_ms == 100
        assert not settings.is_production

    @pytest.mark.parametrize("environment", ["production", "Staging"])
    def test_missing_secret_fails_fast(self, environment):
        with pytest.raises(ValidationError, match="JWT_SECRET"):
            Settings(_env_file=None, environment=environment, jwt_secret=None)

    def test_placeholder_secret_refused_in_production(self):
        with pytest.raises(ValidationError):
            Settings(
                _env_file=None,
                environment="production",
                jwt_secret="your-super-secret-jwt-key-change-this-in-production",
            )

    def test_bcrypt_rounds_bounds(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, bcrypt_rounds=3)
