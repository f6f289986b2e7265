"""
Logging for the luckyfive package.

Everything hangs off the "luckyfive" logger so the engine never touches the
host application's root logger. Engine calls attach their run context (seed,
contest, pool sizes) as structured data; the console shows it as key=value
pairs and the optional run log stores it as JSON lines.
"""
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

PACKAGE_LOGGER = "luckyfive"

# Attribute used to carry structured context on a LogRecord
CONTEXT_ATTR = "extra_data"


def _short_name(name: str) -> str:
    prefix = PACKAGE_LOGGER + "."
    return name[len(prefix):] if name.startswith(prefix) else name


def _record_context(record: logging.LogRecord) -> Dict[str, Any]:
    return getattr(record, CONTEXT_ATTR, None) or {}


class StructuredFormatter(logging.Formatter):
    """One JSON object per line, for run logs that get post-processed."""

    def format(self, record):
        entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(timespec='milliseconds'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'location': f"{record.module}.{record.funcName}:{record.lineno}",
        }
        context = _record_context(record)
        if context:
            entry['data'] = context
        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ColoredConsoleFormatter(logging.Formatter):
    """Compact colored lines: time, level, component, message, context."""

    LEVEL_COLORS = {
        logging.DEBUG: '\033[36m',
        logging.INFO: '\033[32m',
        logging.WARNING: '\033[33m',
        logging.ERROR: '\033[31m',
        logging.CRITICAL: '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)
        stamp = datetime.fromtimestamp(record.created).strftime('%H:%M:%S')
        line = (
            f"{color}{stamp} {record.levelname[0]}{self.RESET} "
            f"{_short_name(record.name)}: {record.getMessage()}"
        )

        context = _record_context(record)
        if context:
            line += " [" + " ".join(f"{k}={v}" for k, v in context.items()) + "]"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


FORMATTERS = {
    'console': ColoredConsoleFormatter,
    'json': StructuredFormatter,
    'simple': lambda: logging.Formatter('%(asctime)s %(levelname)s %(name)s: %(message)s'),
}


class LoggerManager:
    """Owns the handlers of the package logger."""

    ROOT_NAME = PACKAGE_LOGGER
    _configured = False

    @classmethod
    def configure(
        cls,
        log_level: str = "INFO",
        log_file: Optional[str] = None,
        log_format: str = "console",
        output_dir: str = "outputs",
        force: bool = False
    ) -> None:
        """
        Attach a stderr handler (and a JSON run-log file when log_file is set).

        A second call is a no-op unless force=True.
        """
        if cls._configured and not force:
            return

        level = logging.getLevelName(log_level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {log_level}")
        if log_format not in FORMATTERS:
            raise ValueError(f"Unknown log format: {log_format}")

        package_logger = logging.getLogger(cls.ROOT_NAME)
        cls._drop_handlers(package_logger)
        package_logger.setLevel(level)

        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(FORMATTERS[log_format]())
        package_logger.addHandler(console)

        if log_file:
            run_log = Path(output_dir) / log_file
            run_log.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(run_log, encoding='utf-8')
            file_handler.setFormatter(StructuredFormatter())
            package_logger.addHandler(file_handler)

        cls._configured = True

    @classmethod
    def reset(cls) -> None:
        """Remove package handlers so configure() can run again."""
        cls._drop_handlers(logging.getLogger(cls.ROOT_NAME))
        cls._configured = False

    @staticmethod
    def _drop_handlers(target: logging.Logger) -> None:
        for handler in list(target.handlers):
            target.removeHandler(handler)
            handler.close()

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Logger under the package namespace (module __name__ works as is)."""
        if name != cls.ROOT_NAME and not name.startswith(cls.ROOT_NAME + "."):
            name = f"{cls.ROOT_NAME}.{name}"
        return logging.getLogger(name)


def get_logger(name: str) -> logging.Logger:
    return LoggerManager.get_logger(name)


def configure_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    log_format: str = "console",
    output_dir: str = "outputs",
    force: bool = False
) -> None:
    LoggerManager.configure(log_level, log_file, log_format, output_dir, force)


class LogContext(logging.LoggerAdapter):
    """
    Logger adapter that stamps every record with a fixed context mapping.

    Per-call keyword context passed as extra={'extra_data': {...}} is merged
    over the adapter's own.
    """

    def process(self, msg, kwargs):
        extra = kwargs.setdefault('extra', {})
        extra[CONTEXT_ATTR] = {**self.extra, **extra.get(CONTEXT_ATTR, {})}
        return msg, kwargs


def log_with_context(logger: logging.Logger, **context) -> LogContext:
    """Wrap `logger` so its records carry `context` as structured data."""
    return LogContext(logger, context)
