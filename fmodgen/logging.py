import datetime as _dt
import json
import logging as _logging
import os
import sys
from dataclasses import dataclass
from typing import Any, Dict, Optional

_LOGGER_NAMESPACE = "fmodgen"
_LEVEL_ENV = "FMODGEN_LOG_LEVEL"

_DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
_DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

_COLOR_MAP = {
    _logging.DEBUG: "\033[36m",      # Cyan
    _logging.INFO: "\033[37m",       # Light gray
    _logging.WARNING: "\033[33m",    # Yellow
    _logging.ERROR: "\033[31m",      # Red
    _logging.CRITICAL: "\033[41m",   # Red background
}
_RESET = "\033[0m"


@dataclass
class LoggingState:
    console_level: int
    text_log_path: Optional[str] = None
    jsonl_log_path: Optional[str] = None


def _parse_level(value: Optional[str], default: int) -> int:
    if value is None:
        return default
    level = _logging.getLevelName(value.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {value}")
    return level


class _ColorFormatter(_logging.Formatter):
    def __init__(self, use_color: bool) -> None:
        super().__init__(fmt=_DEFAULT_FORMAT, datefmt=_DEFAULT_DATEFMT)
        self.use_color = use_color

    def format(self, record: _logging.LogRecord) -> str:
        message = super().format(record)
        color = _COLOR_MAP.get(record.levelno) if self.use_color else None
        return f"{color}{message}{_RESET}" if color else message


class _MaxLevelFilter(_logging.Filter):
    def __init__(self, max_level: int) -> None:
        super().__init__()
        self.max_level = max_level

    def filter(self, record: _logging.LogRecord) -> bool:
        return record.levelno <= self.max_level


class _JsonLinesFormatter(_logging.Formatter):
    def format(self, record: _logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, _DEFAULT_DATEFMT),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "lineno": record.lineno,
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _add_file_handler(logger: _logging.Logger, path: str, level: int, formatter: _logging.Formatter) -> None:
    handler = _logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def get_logger(name: Optional[str] = None) -> _logging.Logger:
    if name is None:
        return _logging.getLogger(_LOGGER_NAMESPACE)
    if name.startswith(_LOGGER_NAMESPACE):
        full_name = name
    else:
        full_name = f"{_LOGGER_NAMESPACE}.{name}"
    return _logging.getLogger(full_name)


def configure_logging(config: Dict[str, Any]) -> LoggingState:
    """Install the console handlers and, when `logging.dir` is set, the file logs.

    Records below ERROR go to stdout and the rest to stderr. `FMODGEN_LOG_LEVEL`
    takes precedence over `logging.console_level`. File logging is opt-in so a
    failed run leaves nothing behind.
    """
    logging_cfg: Dict[str, Any] = config.get("logging", {}) if config else {}

    console_level = _parse_level(
        os.environ.get(_LEVEL_ENV) or logging_cfg.get("console_level"), _logging.INFO)
    file_level = _parse_level(logging_cfg.get("file_level"), _logging.DEBUG)
    use_color = logging_cfg.get("color", True)

    logger = get_logger()
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(min(console_level, file_level))
    logger.propagate = False

    stdout_handler = _logging.StreamHandler(stream=sys.stdout)
    stdout_handler.setLevel(console_level)
    stdout_handler.addFilter(_MaxLevelFilter(_logging.ERROR - 1))
    stdout_handler.setFormatter(_ColorFormatter(use_color and sys.stdout.isatty()))
    logger.addHandler(stdout_handler)

    stderr_handler = _logging.StreamHandler(stream=sys.stderr)
    stderr_handler.setLevel(max(console_level, _logging.ERROR))
    stderr_handler.setFormatter(_ColorFormatter(use_color and sys.stderr.isatty()))
    logger.addHandler(stderr_handler)

    state = LoggingState(console_level)
    log_dir = logging_cfg.get("dir")
    if not log_dir:
        return state

    log_dir = os.path.abspath(log_dir)
    os.makedirs(log_dir, exist_ok=True)
    stamp = _dt.datetime.now().strftime(logging_cfg.get("timestamp_format", "%Y%m%dT%H%M%S"))
    filename = logging_cfg.get("filename_pattern", "fmodgen-{timestamp}.log").format(timestamp=stamp)

    state.text_log_path = os.path.join(log_dir, filename)
    _add_file_handler(logger, state.text_log_path, file_level, _logging.Formatter(_DEFAULT_FORMAT, _DEFAULT_DATEFMT))
    if logging_cfg.get("jsonl", False):
        state.jsonl_log_path = os.path.join(log_dir, os.path.splitext(filename)[0] + ".jsonl")
        _add_file_handler(logger, state.jsonl_log_path, file_level, _JsonLinesFormatter())
    return state


def is_configured() -> bool:
    return bool(get_logger().handlers)
