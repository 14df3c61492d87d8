"""Settings and logging."""

from __future__ import annotations

import json
import logging

import pytest
import structlog
from pydantic import ValidationError

from shapekit import schema as S
from shapekit.core.config import Settings, get_settings
from shapekit.core.logging import (
    LoggerRegistry,
    bind_context,
    clear_context,
    configure_logging,
    engine_logger,
    get_logger,
)
from shapekit.engines import decoder_for


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.GENERATOR_MAX_RETRIES == 100
        assert settings.GENERATOR_MAX_DEPTH == 4
        assert settings.LOG_LEVEL == "WARNING"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("SHAPEKIT_GENERATOR_MAX_DEPTH", "7")
        assert Settings().GENERATOR_MAX_DEPTH == 7

    def test_validation(self):
        with pytest.raises(ValidationError):
            Settings(GENERATOR_MAX_RETRIES=0)

    def test_cached(self):
        assert get_settings() is get_settings()


class TestLogging:
    @pytest.fixture(autouse=True)
    def _reset(self):
        yield
        clear_context()
        configure_logging("WARNING")

    def test_registry_reuses_loggers(self):
        assert LoggerRegistry.get("engine") is engine_logger()

    def test_derivation_logs_at_debug(self, capsys):
        configure_logging("DEBUG", json_logs=True)
        decoder_for(S.string)
        lines = [json.loads(line) for line in capsys.readouterr().out.splitlines() if line.strip()]
        events = [line for line in lines if line.get("event") == "derive"]
        assert events
        assert events[-1]["artifact"] == "decoder"
        assert events[-1]["root"] == "Keyword"
        assert events[-1]["library"] == "shapekit"

    def test_context_is_bound(self, capsys):
        configure_logging("DEBUG", json_logs=True)
        bind_context(request_id="abc")
        get_logger("shapekit.test").info("hello")
        record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert record["request_id"] == "abc"

    def test_quiet_at_warning(self, capsys):
        configure_logging("WARNING")
        decoder_for(S.string)
        assert capsys.readouterr().out == ""

    def test_library_logger_does_not_propagate(self):
        configure_logging("INFO")
        assert logging.getLogger("shapekit").propagate is False
        assert isinstance(structlog.get_config()["logger_factory"], structlog.stdlib.LoggerFactory)
