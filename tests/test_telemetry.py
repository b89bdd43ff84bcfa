from __future__ import annotations

import pytest

from edit_history.runtime import telemetry


def test_settings_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EDIT_HISTORY_LOG_LEVEL", "debug")
    monkeypatch.setenv("EDIT_HISTORY_DISABLE_CONSOLE", "yes")
    monkeypatch.setenv("EDIT_HISTORY_LOG_BUFFER_SIZE", "64")

    settings = telemetry.TelemetrySettings.from_env()

    assert settings.level == "DEBUG"
    assert settings.console is False
    assert settings.buffer_size == 64
    assert settings.logger_name == "edit_history"


def test_configure_rejects_config_and_preset() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="development")


def test_configure_rejects_unknown_preset() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(preset="verbose")


def test_span_reraises_failures() -> None:
    with pytest.raises(KeyError):
        with telemetry.span("test::failure", component=True):
            raise KeyError("boom")
