"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from deploygate.config import load_settings

ENV_VARS = (
    "DEPLOYGATE_ARCHIVE_DIR",
    "DEPLOYGATE_BUILD_ID",
    "BUILD_NUMBER",
    "DEPLOYGATE_PMD_MAX_PRIORITY",
    "DEPLOYGATE_LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = load_settings()

    assert settings.archive_dir is None
    assert settings.pmd_max_priority == 2
    assert settings.log_format == "json"
    # timestamp fallback, e.g. 20261019-101500
    assert len(settings.build_id) == 15


def test_build_id_falls_back_to_jenkins_build_number(monkeypatch):
    monkeypatch.setenv("BUILD_NUMBER", "118")

    assert load_settings().build_id == "118"


def test_explicit_build_id_wins(monkeypatch):
    monkeypatch.setenv("BUILD_NUMBER", "118")
    monkeypatch.setenv("DEPLOYGATE_BUILD_ID", "pr-77")

    assert load_settings().build_id == "pr-77"


def test_values_from_environment(monkeypatch):
    monkeypatch.setenv("DEPLOYGATE_ARCHIVE_DIR", "/var/ci/reports")
    monkeypatch.setenv("DEPLOYGATE_PMD_MAX_PRIORITY", "3")
    monkeypatch.setenv("DEPLOYGATE_LOG_FORMAT", "Console")

    settings = load_settings()

    assert settings.archive_dir == "/var/ci/reports"
    assert settings.pmd_max_priority == 3
    assert settings.log_format == "console"


@pytest.mark.parametrize(
    "name,value",
    [
        ("DEPLOYGATE_PMD_MAX_PRIORITY", "0"),
        ("DEPLOYGATE_PMD_MAX_PRIORITY", "high"),
        ("DEPLOYGATE_LOG_FORMAT", "xml"),
    ],
)
def test_invalid_values_are_rejected(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ValidationError):
        load_settings()
