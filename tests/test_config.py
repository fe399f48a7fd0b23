"""Tests for environment-based settings."""

from datetime import timedelta

import pytest

from botcall.config import RegistrySettings, settings_from_env

ENV_VARS = [
    "PORT",
    "BOTCALL_HOST",
    "BOTCALL_LIVENESS_WINDOW",
    "BOTCALL_HEARTBEAT_INTERVAL",
    "BOTCALL_RETENTION",
    "BOTCALL_SWEEP_INTERVAL",
    "BOTCALL_SHUTDOWN_GRACE",
    "BOTCALL_CALLBACK_SCHEME",
    "BOTCALL_ATTESTATION_VERIFIER",
    "BOTCALL_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    # No stray .env file from the working directory
    monkeypatch.chdir(tmp_path)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = settings_from_env()

    assert settings.port == 8080
    assert settings.liveness_window == timedelta(minutes=5)
    assert settings.heartbeat_interval_seconds == 30
    assert settings.retention == timedelta(days=1)
    assert settings.callback_scheme == "wss"
    assert settings.attestation_verifier == "accept-all"


def test_overrides(clean_env):
    clean_env.setenv("PORT", "9090")
    clean_env.setenv("BOTCALL_LIVENESS_WINDOW", "360")
    clean_env.setenv("BOTCALL_RETENTION", "0")
    clean_env.setenv("BOTCALL_LOG_LEVEL", "debug")

    settings = settings_from_env()

    assert settings.port == 9090
    assert settings.liveness_window == timedelta(minutes=6)
    assert settings.retention is None
    assert settings.log_level == "DEBUG"


def test_empty_port_falls_back(clean_env):
    clean_env.setenv("PORT", "")
    assert settings_from_env().port == 8080


@pytest.mark.parametrize("kwargs", [
    {"liveness_window_seconds": 0},
    {"heartbeat_interval_seconds": -1},
    {"sweep_interval_seconds": 0},
    {"retention_seconds": -5},
    {"liveness_window_seconds": 300, "retention_seconds": 60},
])
def test_invalid_settings(kwargs):
    with pytest.raises(ValueError):
        RegistrySettings(**kwargs)
