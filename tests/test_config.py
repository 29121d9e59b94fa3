"""Tests for settings and logging configuration."""

from __future__ import annotations

import pytest
from loguru import logger
from pydantic import ValidationError

from press_impact.config import Settings
from press_impact.helpers.logging_helpers import configure_logger


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.epsilon == 1.0e-5
        assert s.palette == ("#92C5DE", "#F7F7F7", "#F4A582")
        assert s.workers == 1

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("PRESS_IMPACT_EPSILON", "0.001")
        monkeypatch.setenv("PRESS_IMPACT_PORT", "8123")
        s = Settings()
        assert s.epsilon == 0.001
        assert s.port == 8123

    def test_negative_epsilon_rejected(self, monkeypatch):
        monkeypatch.setenv("PRESS_IMPACT_EPSILON", "-1")
        with pytest.raises(ValidationError):
            Settings()

    def test_workers_rejected(self):
        with pytest.raises(ValidationError):
            Settings(workers=0)


class TestLogging:
    def test_file_sink(self, tmp_path):
        path = configure_logger("tests", level="CRITICAL", log_dir=str(tmp_path / "logs"))
        try:
            assert path.parent == tmp_path / "logs"
            assert path.parent.is_dir()
            assert path.name.startswith("tests_")
        finally:
            logger.remove()
