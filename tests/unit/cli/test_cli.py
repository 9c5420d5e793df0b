"""Tests for the aclcore command-line interface."""

import pytest
from click.testing import CliRunner

from aclcore.cli import cli
from aclcore.core.config import Settings, get_settings
from aclcore.infrastructure.persistence.database import DatabaseManager


@pytest.fixture
def runner(monkeypatch) -> CliRunner:
    monkeypatch.setenv("ACL_LOG_FORMAT", "console")
    get_settings.cache_clear()
    yield CliRunner()
    get_settings.cache_clear()


@pytest.fixture
def cli_obj(tmp_path) -> dict:
    settings = Settings(
        _env_file=None,
        environment="testing",
        log_format="console",
        database_url=f"sqlite+aiosqlite:///{tmp_path}/acl.db",
    )
    return {"db": DatabaseManager(settings)}


def _invoke(runner, cli_obj, *args):
    return runner.invoke(cli, list(args), obj=cli_obj)


@pytest.fixture
def initialized(runner, cli_obj):
    result = _invoke(runner, cli_obj, "init-db", "--force")
    assert result.exit_code == 0, result.output
    assert "Database initialized successfully." in result.output
    return cli_obj


def test_version(runner):
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "aclcore" in result.output


def test_info(runner, cli_obj):
    result = _invoke(runner, cli_obj, "info")

    assert result.exit_code == 0
    assert "Cache TTL:    300 seconds" in result.output


def test_init_db_requires_confirmation(runner, cli_obj):
    result = runner.invoke(cli, ["init-db"], obj=cli_obj, input="n\n")

    assert result.exit_code == 1
    assert "Aborted" in result.output


def test_commands_require_initialized_store(runner, cli_obj):
    result = _invoke(runner, cli_obj, "role", "list")

    assert result.exit_code != 0


def test_end_to_end(runner, initialized):
    assert _invoke(runner, initialized, "domain", "create", "eng").exit_code == 0
    result = _invoke(
        runner, initialized, "account", "create", "bob", "--domain", "2", "--type", "domain_admin"
    )
    assert result.exit_code == 0, result.output
    assert _invoke(runner, initialized, "account", "create", "carol", "--domain", "2").exit_code == 0

    steps = [
        ["role", "create", "viewer", "--domain", "2", "--as-account", "2"],
        ["role", "grant", "1", "listVMs", "startVM", "--as-account", "2"],
        ["group", "create", "ops", "--domain", "2", "--as-account", "2"],
        ["group", "add-roles", "1", "1", "--as-account", "2"],
        ["group", "add-accounts", "1", "3", "--as-account", "2"],
    ]
    for step in steps:
        result = _invoke(runner, initialized, *step)
        assert result.exit_code == 0, result.output

    result = _invoke(runner, initialized, "account", "permissions", "3", "--as-account", "3")
    assert result.exit_code == 0, result.output
    assert "listVMs" in result.output
    assert "startVM" in result.output

    result = _invoke(runner, initialized, "role", "show", "1")
    assert result.exit_code == 0, result.output
    assert "viewer" in result.output

    result = _invoke(runner, initialized, "group", "list", "--as-account", "2")
    assert "1 of 1 group(s)" in result.output


def test_acl_errors_are_reported(runner, initialized):
    result = _invoke(runner, initialized, "role", "delete", "99")

    assert result.exit_code == 1
    assert "Unable to find acl role: 99" in result.output


def test_plain_user_denied(runner, initialized):
    assert _invoke(runner, initialized, "account", "create", "dave", "--domain", "1").exit_code == 0
    assert _invoke(runner, initialized, "role", "create", "viewer", "--domain", "1").exit_code == 0

    result = _invoke(runner, initialized, "role", "grant", "1", "listVMs", "--as-account", "2")

    assert result.exit_code == 1
    assert "does not have permission" in result.output
