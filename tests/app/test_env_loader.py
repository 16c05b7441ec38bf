"""Tests for environment variable handling."""

import pytest

from echoboard.app.env_loader import (
    get_cors_allowed_origins,
    get_current_environment,
    validate_required_env_vars,
)


@pytest.mark.parametrize("env", ["dev", "staging", "prod"])
def test_current_environment(env, monkeypatch):
    monkeypatch.setenv("ENV", env)
    assert get_current_environment() == env


def test_current_environment_defaults_to_dev(monkeypatch):
    monkeypatch.delenv("ENV", raising=False)
    assert get_current_environment() == "dev"


def test_unknown_environment_is_rejected(monkeypatch):
    monkeypatch.setenv("ENV", "k8s")
    with pytest.raises(ValueError):
        get_current_environment()


def test_cors_origins_default_to_local_frontend(monkeypatch):
    monkeypatch.delenv("CORS_ALLOWED_ORIGINS", raising=False)
    assert get_cors_allowed_origins() == ["http://localhost:5173"]


def test_cors_origins_are_comma_separated(monkeypatch):
    monkeypatch.setenv(
        "CORS_ALLOWED_ORIGINS", "https://echoboard.dev, https://app.echoboard.dev,,"
    )
    assert get_cors_allowed_origins() == [
        "https://echoboard.dev",
        "https://app.echoboard.dev",
    ]


def test_missing_database_url_exits(monkeypatch, capsys):
    monkeypatch.delenv("DATABASE_URL", raising=False)

    with pytest.raises(SystemExit) as exc_info:
        validate_required_env_vars()

    assert exc_info.value.code == 1
    assert "DATABASE_URL" in capsys.readouterr().err


def test_required_vars_present(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://localhost/echoboard")
    validate_required_env_vars()
