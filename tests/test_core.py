import json
import logging

import pytest
from pydantic import ValidationError as SettingsValidationError

from flashdeck.core.config import Settings
from flashdeck.core.error_handling import handle_service_errors
from flashdeck.core.exceptions.domain import LoadError, ResourceMissingError
from flashdeck.core.logging import JSONFormatter, setup_logging


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("RESHUFFLE_INTERVAL_SECONDS", "FLIP_DURATION_MS", "RESOURCE_PATH", "LOG_LEVEL"):
            monkeypatch.delenv(f"FLASHDECK_{name}", raising=False)

        config = Settings()

        assert config.resource_path is None
        assert config.reshuffle_interval_seconds == 15.0
        assert config.flip_duration_ms == 500
        assert config.face_threshold_degrees == 90.0
        assert config.reset_flips_on_reshuffle is False
        assert config.strip_whitespace is False

    def test_reads_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("FLASHDECK_RESHUFFLE_INTERVAL_SECONDS", "2.5")
        monkeypatch.setenv("FLASHDECK_RESOURCE_PATH", str(tmp_path / "deck.xml"))
        monkeypatch.setenv("FLASHDECK_LOG_LEVEL", "debug")

        config = Settings()

        assert config.reshuffle_interval_seconds == 2.5
        assert config.resource_path == tmp_path / "deck.xml"
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"reshuffle_interval_seconds": 0},
            {"flip_duration_ms": -5},
            {"frame_rate": 0},
            {"face_threshold_degrees": 180},
            {"face_threshold_degrees": 0},
            {"log_level": "CHATTY"},
        ],
    )
    def test_rejects_invalid_values(self, overrides):
        with pytest.raises(SettingsValidationError):
            Settings(**overrides)


class TestHandleServiceErrors:

    def test_sync_function_returns_default_on_expected_error(self, caplog):
        @handle_service_errors(default_return_value=(), expected=(LoadError,))
        def load():
            raise ResourceMissingError("deck.xml")

        with caplog.at_level(logging.WARNING):
            assert load() == ()

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.error_code == "RESOURCE_NOT_FOUND"
        assert record.function_name == "load"

    def test_unexpected_error_logged_with_traceback(self, caplog):
        @handle_service_errors(default_return_value=[])
        def explode():
            raise KeyError("bug")

        with caplog.at_level(logging.WARNING):
            assert explode() == []

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.exc_info is not None
        assert record.exception_type == "KeyError"

    def test_passes_through_results(self):
        @handle_service_errors(default_return_value=None)
        def add(a, b):
            return a + b

        assert add(2, b=3) == 5

    async def test_async_function(self, caplog):
        @handle_service_errors(default_return_value="fallback")
        async def fetch():
            raise LoadError("cannot read", "deck.xml")

        with caplog.at_level(logging.WARNING):
            assert await fetch() == "fallback"

        assert caplog.records[-1].details == {"source": "deck.xml"}


class TestLogging:

    def test_json_formatter_includes_error_fields(self):
        record = logging.LogRecord("flashdeck.test", logging.WARNING, __file__, 10, "load failed", None, None)
        record.error_code = "LOAD_ERROR"
        record.details = {"source": "deck.xml"}

        payload = json.loads(JSONFormatter().format(record))

        assert payload["level"] == "WARNING"
        assert payload["message"] == "load failed"
        assert payload["logger"] == "flashdeck.test"
        assert payload["error_code"] == "LOAD_ERROR"
        assert payload["details"] == {"source": "deck.xml"}

    def test_setup_logging_does_not_stack_handlers(self):
        root = logging.getLogger()
        level = root.level
        try:
            setup_logging("DEBUG")
            setup_logging("INFO", json_output=False)

            ours = [h for h in root.handlers if getattr(h, "_flashdeck_handler", False)]
            assert len(ours) == 1
            assert root.level == logging.INFO
        finally:
            for handler in [h for h in root.handlers if getattr(h, "_flashdeck_handler", False)]:
                root.removeHandler(handler)
            root.setLevel(level)
