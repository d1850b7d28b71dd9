import logging
from pathlib import Path

from .config import settings

LOG_FILE_ENCODING = "utf-8"

file_log_formatter = logging.Formatter(
    "%(threadName)s; %(asctime)s; %(name)s; %(levelname)s; %(message)s",
    "%Y-%m-%d %H:%M:%S",
)
stream_log_formatter = logging.Formatter(
    "%(asctime)s; %(levelname)s; %(message)s",
    "%H:%M:%S",
)


def file_handler(filename: str, level: int = logging.NOTSET) -> logging.FileHandler:
    """File handler writing under ``LOG_DIR``. The file is opened on first record."""
    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(
        log_dir / filename, encoding=LOG_FILE_ENCODING, delay=True
    )
    handler.setFormatter(file_log_formatter)
    handler.setLevel(level)
    return handler


def configure_logger(name: str, *handlers: logging.Handler) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(settings.LOG_LEVEL)

    # module reloads must not stack handlers
    if not logger.handlers:
        for handler in handlers:
            logger.addHandler(handler)

    return logger


stream_handler = logging.StreamHandler()
stream_handler.setFormatter(stream_log_formatter)

app_logger = configure_logger(
    "clinic-app-logger",
    file_handler(settings.LOG_FILE),
    file_handler(settings.ERROR_LOG_FILE, logging.ERROR),
    stream_handler,
)

# bootstrap output goes to its own file
init_app_logger = configure_logger(
    "clinic-init-app-logger",
    file_handler(settings.INIT_LOG_FILE),
    stream_handler,
)
