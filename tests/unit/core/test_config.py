import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from aclcore.core.config import Settings, get_settings


def test_settings_defaults():
    """Test that settings load with correct defaults."""
    get_settings.cache_clear()

    with patch.dict(os.environ, {}, clear=True):
        settings = Settings(_env_file=None)

    assert settings.app_name == "aclcore"
    assert settings.environment == "development"
    assert settings.debug is False
    assert settings.database_url == "sqlite+aiosqlite:///./acl_data/acl.db"
    assert settings.permission_cache_ttl_seconds == 300
    assert settings.default_page_size == 50
    assert settings.max_page_size == 500
    assert settings.root_admin_account_name == "admin"
    assert settings.is_development is True
    assert settings.is_production is False
    assert settings.is_testing is False


def test_settings_env_override():
    """Test that environment variables override defaults."""
    get_settings.cache_clear()

    with patch.dict(os.environ, {
        "ACL_APP_NAME": "TestAcl",
        "ACL_ENVIRONMENT": "production",
        "ACL_DEBUG": "true",
        "ACL_PERMISSION_CACHE_TTL_SECONDS": "30",
    }):
        settings = Settings(_env_file=None)

        assert settings.app_name == "TestAcl"
        assert settings.environment == "production"
        assert settings.debug is True
        assert settings.permission_cache_ttl_seconds == 30
        assert settings.is_production is True
        assert settings.is_development is False


def test_invalid_environment_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, environment="staging")


def test_max_page_size_must_be_positive():
    with pytest.raises(ValidationError, match="max_page_size"):
        Settings(_env_file=None, max_page_size=0)


@pytest.mark.parametrize(
    "url,expected",
    [
        ("sqlite+aiosqlite:///./acl.db", "sqlite:///./acl.db"),
        ("postgresql+asyncpg://u:p@db/acl", "postgresql://u:p@db/acl"),
        ("mysql://u:p@db/acl", "mysql://u:p@db/acl"),
    ],
)
def test_database_url_sync(url, expected):
    assert Settings(_env_file=None, database_url=url).database_url_sync == expected


def test_get_settings_is_cached():
    get_settings.cache_clear()

    assert get_settings() is get_settings()
