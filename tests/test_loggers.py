import logging

from clinic.config import settings
from clinic.loggers import (
    app_logger,
    configure_logger,
    file_handler,
    init_app_logger,
    stream_handler,
)


def test_file_handler_writes_under_log_dir(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "LOG_DIR", str(tmp_path / "logs"))

    handler = file_handler("errors.log", logging.ERROR)
    logger = configure_logger("clinic-test-file-logger", handler)
    logger.warning("below the handler level")
    logger.error("appointment store unavailable")
    handler.close()

    lines = (tmp_path / "logs" / "errors.log").read_text().splitlines()
    assert len(lines) == 1
    assert lines[0].endswith("ERROR; appointment store unavailable")


def test_configure_logger_does_not_stack_handlers():
    handler = logging.NullHandler()

    first = configure_logger("clinic-test-reloaded-logger", handler)
    second = configure_logger("clinic-test-reloaded-logger", logging.NullHandler())

    assert second is first
    assert first.handlers == [handler]


def test_application_loggers_share_console_output():
    assert stream_handler in app_logger.handlers
    assert stream_handler in init_app_logger.handlers
    assert [
        handler.level
        for handler in app_logger.handlers
        if isinstance(handler, logging.FileHandler)
    ] == [logging.NOTSET, logging.ERROR]
