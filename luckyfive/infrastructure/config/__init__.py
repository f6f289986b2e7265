"""
Configuration management module for the luckyfive prediction engine.
"""
from .settings import (
    PICK_COUNT,
    MAX_NUM,
    EngineParams,
    SearchConstants,
    FilterConfig,
    BacktestConfig,
    LoggingConfig,
    ConfigManager,
    get_config_manager,
    get_config
)

__all__ = [
    'PICK_COUNT',
    'MAX_NUM',
    'EngineParams',
    'SearchConstants',
    'FilterConfig',
    'BacktestConfig',
    'LoggingConfig',
    'ConfigManager',
    'get_config_manager',
    'get_config'
]
