# tests/test_config.py
"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from northstar.core.config import Settings
from northstar.schemas.okr import TrackingSource


class TestSettings:

    def test_defaults(self):
        config = Settings(_env_file=None)
        assert config.DEFAULT_TRACKING_SOURCE == TrackingSource.CHECK_INS
        assert config.DEFAULT_PLAN_YEAR is None

    def test_tracking_source_parsed(self):
        config = Settings(_env_file=None, DEFAULT_TRACKING_SOURCE="mixed")
        assert config.DEFAULT_TRACKING_SOURCE == TrackingSource.MIXED

    def test_unknown_tracking_source_fails_at_startup(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, DEFAULT_TRACKING_SOURCE="spreadsheets")

    def test_tracking_source_from_environment(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_TRACKING_SOURCE", "tasks")
        assert Settings(_env_file=None).DEFAULT_TRACKING_SOURCE == TrackingSource.TASKS

    def test_cors_origins_split(self):
        config = Settings(_env_file=None, CORS_ORIGINS_STR="https://a.example, https://b.example,")
        assert config.CORS_ORIGINS == ["https://a.example", "https://b.example"]
