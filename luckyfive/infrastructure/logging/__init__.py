"""
Logging infrastructure for the luckyfive prediction engine.
"""
from .logger import (
    LoggerManager,
    StructuredFormatter,
    ColoredConsoleFormatter,
    LogContext,
    get_logger,
    configure_logging,
    log_with_context
)

__all__ = [
    'LoggerManager',
    'StructuredFormatter',
    'ColoredConsoleFormatter',
    'LogContext',
    'get_logger',
    'configure_logging',
    'log_with_context'
]
