"""
Configuration management system for the luckyfive prediction engine.
Provides structured configuration with validation and environment support.
"""
import logging
import os
import yaml
from typing import Dict, Any, Optional, Union
from dataclasses import dataclass, field, fields, asdict, replace
from pathlib import Path

from ...utils.error_handling import InvalidConfigurationError
from ...utils.input_validation import InputValidator

PICK_COUNT = 5
MAX_NUM = 80


@dataclass(frozen=True)
class EngineParams:
    """Tuning parameters for a single generation call."""
    # Scorer weights
    alpha: float = 1.0
    beta: float = 1.0
    gamma: float = 0.5
    cluster_penalty: float = 0.5

    # Statistics and seeding
    recency_lambda: float = 0.05
    hot_cold_boost: float = 1.2
    hot_window: int = 10
    cooc_window: int = 0             # 0 = whole history
    smoothing: float = 1.0
    cands_mult: int = 3

    # Refinement
    hill_iter: int = 50
    enable_evolution: bool = True
    generations: int = 40
    elite_fraction: float = 0.2
    mutate_prob: float = 0.1

    # Output
    use_smart_filters: bool = False
    num_predictions: int = 10
    seed: int = 0                    # 0 = derive from the clock

    # Domain
    pick_count: int = PICK_COUNT
    max_num: int = MAX_NUM

    # Backtest history slice (contests kept before the target contest)
    max_history: int = 500

    def validate(self) -> "EngineParams":
        """
        Return a copy with every field coerced to its declared type.

        Numeric strings (from YAML or the CLI) are parsed; anything out of
        range raises InvalidConfigurationError. Callers must use the returned
        instance.
        """
        v = InputValidator
        ints = {
            'pick_count': 1, 'max_num': 1, 'num_predictions': 0, 'cands_mult': 1,
            'hill_iter': 0, 'generations': 0, 'hot_window': 0, 'cooc_window': 0,
            'max_history': 1, 'seed': 0,
        }
        values = {name: v.validate_positive_integer(getattr(self, name), name, min_val=low)
                  for name, low in ints.items()}
        if values['max_num'] < values['pick_count']:
            raise InvalidConfigurationError(
                f"max_num ({values['max_num']}) must be at least pick_count ({values['pick_count']})."
            )

        values['smoothing'] = v.validate_float_range(self.smoothing, 'smoothing', min_val=0.0, exclusive_min=True)
        values['recency_lambda'] = v.validate_float_range(self.recency_lambda, 'recency_lambda', min_val=0.0)
        values['hot_cold_boost'] = v.validate_float_range(self.hot_cold_boost, 'hot_cold_boost', min_val=0.0)
        for name in ('elite_fraction', 'mutate_prob'):
            values[name] = v.validate_float_range(getattr(self, name), name, min_val=0.0, max_val=1.0)
        for name in ('alpha', 'beta', 'gamma', 'cluster_penalty'):
            values[name] = v.validate_float_range(getattr(self, name), name, min_val=float('-inf'))
        for name in ('enable_evolution', 'use_smart_filters'):
            if not isinstance(getattr(self, name), bool):
                raise InvalidConfigurationError(f"{name} must be a boolean.")
        return replace(self, **values)

    def with_overrides(self, **overrides) -> "EngineParams":
        """Return a copy with the given fields replaced."""
        unknown = set(overrides) - {f.name for f in fields(self)}
        if unknown:
            raise InvalidConfigurationError(f"Unknown engine parameters: {sorted(unknown)}")
        return replace(self, **overrides)


@dataclass(frozen=True)
class SearchConstants:
    """Canonical constants for the greedy extension step."""
    weighted_fallback_prob: float = 0.10
    uniform_fallback_prob: float = 0.05
    marginal_tilt: float = 0.1
    smart_filter_oversample: int = 5
    top_up_attempts_per_slot: int = 50

    def validate(self) -> "SearchConstants":
        v = InputValidator
        weighted = v.validate_float_range(self.weighted_fallback_prob, 'weighted_fallback_prob', 0.0, 1.0)
        uniform = v.validate_float_range(self.uniform_fallback_prob, 'uniform_fallback_prob', 0.0, 1.0)
        if weighted + uniform > 1.0:
            raise InvalidConfigurationError("Fallback probabilities must not sum above 1.0.")
        return replace(
            self,
            weighted_fallback_prob=weighted,
            uniform_fallback_prob=uniform,
            marginal_tilt=v.validate_float_range(self.marginal_tilt, 'marginal_tilt', 0.0),
            smart_filter_oversample=v.validate_positive_integer(
                self.smart_filter_oversample, 'smart_filter_oversample', 1),
            top_up_attempts_per_slot=v.validate_positive_integer(
                self.top_up_attempts_per_slot, 'top_up_attempts_per_slot', 1),
        )


@dataclass(frozen=True)
class FilterConfig:
    """Bounds used by the topological filter."""
    sum_min: int = 120
    sum_max: int = 280
    max_adjacent_pairs: int = 2

    def validate(self) -> "FilterConfig":
        v = InputValidator
        checked = replace(
            self,
            sum_min=v.validate_positive_integer(self.sum_min, 'sum_min', min_val=0),
            sum_max=v.validate_positive_integer(self.sum_max, 'sum_max', min_val=0),
            max_adjacent_pairs=v.validate_positive_integer(self.max_adjacent_pairs, 'max_adjacent_pairs', min_val=0),
        )
        if checked.sum_min > checked.sum_max:
            raise InvalidConfigurationError("sum_min must not exceed sum_max.")
        return checked


@dataclass
class BacktestConfig:
    """Backtest driver configuration."""
    data_path: str = "data/raw/quina.csv"
    start_contest: Optional[int] = None
    end_contest: Optional[int] = None
    show_progress: bool = True
    plot_path: Optional[str] = "outputs/backtest_hits.png"


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "console"
    log_file: Optional[str] = None
    output_dir: str = "outputs"

    def validate(self) -> "LoggingConfig":
        if not isinstance(logging.getLevelName(str(self.level).upper()), int):
            raise InvalidConfigurationError(f"Unknown log level: {self.level}")
        if self.format not in ("console", "json", "simple"):
            raise InvalidConfigurationError(f"Unknown log format: {self.format}")
        return self


SECTIONS = {
    'engine': EngineParams,
    'search': SearchConstants,
    'filters': FilterConfig,
    'backtest': BacktestConfig,
    'logging': LoggingConfig,
}


def build_section(section_cls, values: Optional[Dict[str, Any]]):
    """Instantiate a config section, rejecting unknown keys."""
    values = values or {}
    if not isinstance(values, dict):
        raise InvalidConfigurationError(
            f"Section for {section_cls.__name__} must be a mapping, got {type(values).__name__}."
        )
    known = {f.name for f in fields(section_cls)}
    unknown = set(values) - known
    if unknown:
        raise InvalidConfigurationError(
            f"Unknown keys for {section_cls.__name__}: {sorted(unknown)}"
        )
    section = section_cls(**values)
    if hasattr(section, 'validate'):
        section = section.validate()
    return section


class ConfigManager:
    """Manages application configuration with environment support."""

    def __init__(self, config_path: Optional[Union[str, Path]] = None, environment: str = "default"):
        self.environment = environment
        self.config_path = Path(config_path) if config_path else self._get_default_config_path()
        self._config_cache = {}

    def _get_default_config_path(self) -> Path:
        """Get default configuration file path."""
        base_dir = Path(__file__).parent.parent.parent.parent
        return base_dir / "config" / f"{self.environment}.yml"

    def load_config(self) -> Dict[str, Any]:
        """Load configuration from file with caching."""
        if self.environment in self._config_cache:
            return self._config_cache[self.environment]

        if self.config_path.exists():
            with open(self.config_path, 'r', encoding='utf-8') as f:
                try:
                    file_config = yaml.safe_load(f) or {}
                except yaml.YAMLError as e:
                    raise InvalidConfigurationError(f"Malformed config file {self.config_path}: {e}") from e
        else:
            file_config = {}

        unknown = set(file_config) - set(SECTIONS)
        if unknown:
            raise InvalidConfigurationError(f"Unknown config sections: {sorted(unknown)}")

        config = {
            name: build_section(section_cls, file_config.get(name))
            for name, section_cls in SECTIONS.items()
        }

        self._config_cache[self.environment] = config
        return config

    def save_config(self, config: Dict[str, Any]) -> None:
        """Save configuration to file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        serializable_config = {}
        for key, value in config.items():
            if hasattr(value, '__dataclass_fields__'):
                serializable_config[key] = asdict(value)
            else:
                serializable_config[key] = value

        with open(self.config_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(serializable_config, f, default_flow_style=False, indent=2, sort_keys=False)

    def update_config(self, updates: Dict[str, Any]) -> None:
        """Update configuration with new values."""
        config = dict(self.load_config())

        for key, value in updates.items():
            for section_name, section_config in config.items():
                if key in {f.name for f in fields(section_config)}:
                    config[section_name] = replace(section_config, **{key: value})
                    break
            else:
                raise InvalidConfigurationError(f"Unknown configuration key: {key}")

        for section_name, section in config.items():
            if hasattr(section, 'validate'):
                config[section_name] = section.validate()

        self.save_config(config)
        self._config_cache.pop(self.environment, None)


def get_config_manager(environment: str = None, config_path: Optional[Union[str, Path]] = None) -> ConfigManager:
    """Get configuration manager instance."""
    env = environment or os.getenv('LUCKYFIVE_ENV', 'default')
    return ConfigManager(config_path=config_path, environment=env)


def get_config(environment: str = None, config_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Get configuration dictionary."""
    manager = get_config_manager(environment, config_path)
    return manager.load_config()
