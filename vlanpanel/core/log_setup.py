import os
import logging
from logging.handlers import RotatingFileHandler
import structlog
from structlog.stdlib import ProcessorFormatter, BoundLogger, add_logger_name
from structlog.processors import (
    JSONRenderer,
    TimeStamper,
    add_log_level,
    StackInfoRenderer,
    format_exc_info,
)
from rich.logging import RichHandler
from structlog.dev import ConsoleRenderer


XDG_STATE_HOME = os.environ.get("XDG_STATE_HOME") or os.path.expanduser(
    "~/.local/state"
)
APP_DIR = "vlanpanel"

LOG_FILE_PATH = os.path.join(XDG_STATE_HOME, APP_DIR, "vlanpanel.log")

LOGGER_NAME = None

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class SpamFilter(logging.Filter):
    """
    Lets only the first of a run of "Configuration reloaded from file."
    records through. Shared by several handlers, so each record is judged once.
    """

    _config_reload_count = 0

    @staticmethod
    def event_text(record) -> str:
        if isinstance(record.msg, dict):
            return str(record.msg.get("event", ""))
        return record.getMessage()

    def filter(self, record):
        verdict = getattr(record, "_vlanpanel_spam_verdict", None)
        if verdict is not None:
            return verdict
        verdict = self._judge(self.event_text(record))
        record._vlanpanel_spam_verdict = verdict
        return verdict

    def _judge(self, message: str) -> bool:
        if message == "Configuration reloaded from file.":
            SpamFilter._config_reload_count += 1
            if SpamFilter._config_reload_count > 1:
                return False
        elif message == "Configuration file modified. Reloading...":
            if SpamFilter._config_reload_count >= 1:
                return False
        else:
            SpamFilter._config_reload_count = 0
        return True


def level_from_name(name, default: int = logging.INFO) -> int:
    """Map a config level name such as 'debug' to a logging level."""
    if isinstance(name, int):
        return name
    if not isinstance(name, str):
        return default
    return LEVELS.get(name.strip().upper(), default)


def set_level(level: int) -> None:
    """Change the level of the application logger and all of its handlers."""
    std_logger = logging.getLogger(LOGGER_NAME)
    std_logger.setLevel(level)
    for handler in std_logger.handlers:
        handler.setLevel(level)


def setup_logging(level: int = logging.DEBUG, log_file: str = LOG_FILE_PATH) -> BoundLogger:
    shared_processors = [
        add_log_level,
        TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=False),
        StackInfoRenderer(),
        format_exc_info,
    ]

    structlog.configure(
        processors=shared_processors
        + [
            add_logger_name,
            ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    std_logger = logging.getLogger(LOGGER_NAME)
    std_logger.setLevel(level)
    std_logger.propagate = False
    for handler in std_logger.handlers[:]:
        std_logger.removeHandler(handler)
    spam_filter = SpamFilter()
    os.makedirs(os.path.dirname(log_file), exist_ok=True)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=1024 * 1024,
        backupCount=2,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.addFilter(spam_filter)
    json_formatter = ProcessorFormatter(
        foreign_pre_chain=shared_processors + [add_logger_name],
        processor=JSONRenderer(),
    )
    file_handler.setFormatter(json_formatter)
    std_logger.addHandler(file_handler)
    console_handler = RichHandler(
        rich_tracebacks=True,
        markup=True,
        show_path=False,
        show_time=False,
    )
    console_handler.setLevel(level)
    console_handler.addFilter(spam_filter)
    console_formatter_final = ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processor=ConsoleRenderer(colors=False),
        fmt="%(message)s",
    )
    console_handler.setFormatter(console_formatter_final)
    std_logger.addHandler(console_handler)
    return structlog.get_logger(LOGGER_NAME)
