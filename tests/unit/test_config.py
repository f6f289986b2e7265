"""
Tests for the configuration layer.
"""
import pytest
import yaml

from luckyfive.infrastructure.config import (
    ConfigManager,
    EngineParams,
    FilterConfig,
    SearchConstants,
    get_config_manager
)
from luckyfive.utils.error_handling import InvalidConfigurationError


class TestEngineParams:
    """Test EngineParams validation."""

    def test_defaults_are_valid(self):
        assert EngineParams().validate() == EngineParams()

    @pytest.mark.parametrize("overrides", [
        {'num_predictions': -1},
        {'max_num': 4},
        {'smoothing': 0.0},
        {'smoothing': -1.0},
        {'hill_iter': -5},
        {'elite_fraction': 1.5},
        {'mutate_prob': -0.1},
        {'seed': -3},
        {'cands_mult': 0},
        {'num_predictions': 2.5},
        {'enable_evolution': 'yes'},
    ])
    def test_invalid_values_raise(self, overrides):
        with pytest.raises(InvalidConfigurationError):
            EngineParams(**overrides).validate()

    def test_invalid_configuration_is_value_error(self):
        with pytest.raises(ValueError):
            EngineParams(max_num=3).validate()

    def test_validate_returns_coerced_copy(self):
        params = EngineParams(num_predictions="5", seed="42", recency_lambda="0.05", alpha=2)
        checked = params.validate()

        assert checked.num_predictions == 5 and isinstance(checked.num_predictions, int)
        assert checked.seed == 42
        assert checked.recency_lambda == 0.05 and isinstance(checked.recency_lambda, float)
        assert isinstance(checked.alpha, float)
        assert params.seed == "42"

    def test_numeric_strings_compared_after_coercion(self):
        with pytest.raises(InvalidConfigurationError):
            EngineParams(pick_count="5", max_num="4").validate()
        assert EngineParams(pick_count="5", max_num="10").validate().max_num == 10

    def test_search_and_filter_validate_coerce(self):
        search = SearchConstants(marginal_tilt="0.2", smart_filter_oversample="3").validate()
        filters = FilterConfig(sum_min="100", sum_max="300").validate()

        assert search.marginal_tilt == 0.2
        assert search.smart_filter_oversample == 3
        assert (filters.sum_min, filters.sum_max) == (100, 300)

    def test_with_overrides(self):
        params = EngineParams().with_overrides(alpha=2.0, seed=7)

        assert params.alpha == 2.0
        assert params.seed == 7
        assert EngineParams().alpha == 1.0

    def test_with_overrides_rejects_unknown(self):
        with pytest.raises(InvalidConfigurationError):
            EngineParams().with_overrides(learning_rate=0.1)

    def test_search_and_filter_validation(self):
        with pytest.raises(InvalidConfigurationError):
            SearchConstants(weighted_fallback_prob=0.7, uniform_fallback_prob=0.5).validate()
        with pytest.raises(InvalidConfigurationError):
            FilterConfig(sum_min=300, sum_max=200).validate()


class TestConfigManager:
    """Test ConfigManager loading and saving."""

    def test_repository_default_config_loads(self):
        config = ConfigManager().load_config()

        assert config['engine'] == EngineParams()
        assert config['search'] == SearchConstants()
        assert config['filters'] == FilterConfig()
        assert config['logging'].level == "INFO"

    def test_missing_file_gives_defaults(self, tmp_path):
        config = ConfigManager(tmp_path / "absent.yml").load_config()

        assert config['engine'] == EngineParams()

    def test_partial_file_overrides(self, tmp_path):
        path = tmp_path / "custom.yml"
        path.write_text(yaml.safe_dump({'engine': {'alpha': 2.5, 'num_predictions': 3}}))

        config = ConfigManager(path).load_config()

        assert config['engine'].alpha == 2.5
        assert config['engine'].num_predictions == 3
        assert config['engine'].beta == 1.0

    def test_loaded_sections_are_coerced(self, tmp_path):
        path = tmp_path / "quoted.yml"
        path.write_text(yaml.safe_dump({'engine': {'num_predictions': '4', 'seed': '9'}}))

        engine = ConfigManager(path).load_config()['engine']

        assert engine.num_predictions == 4
        assert engine.seed == 9

    def test_unknown_section_raises(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text(yaml.safe_dump({'model': {'layers': 3}}))

        with pytest.raises(InvalidConfigurationError):
            ConfigManager(path).load_config()

    def test_unknown_key_raises(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text(yaml.safe_dump({'engine': {'learning_rate': 0.1}}))

        with pytest.raises(InvalidConfigurationError):
            ConfigManager(path).load_config()

    def test_invalid_value_raises(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text(yaml.safe_dump({'engine': {'smoothing': 0}}))

        with pytest.raises(InvalidConfigurationError):
            ConfigManager(path).load_config()

    def test_malformed_yaml_raises(self, tmp_path):
        path = tmp_path / "broken.yml"
        path.write_text("engine: [unclosed")

        with pytest.raises(InvalidConfigurationError):
            ConfigManager(path).load_config()

    def test_load_is_cached(self, tmp_path):
        manager = ConfigManager(tmp_path / "absent.yml")

        assert manager.load_config() is manager.load_config()

    def test_save_and_update_roundtrip(self, tmp_path):
        path = tmp_path / "saved.yml"
        manager = ConfigManager(path)
        manager.save_config(manager.load_config())

        manager.update_config({'gamma': 0.75, 'sum_min': 100})
        reloaded = ConfigManager(path).load_config()

        assert reloaded['engine'].gamma == 0.75
        assert reloaded['filters'].sum_min == 100

    def test_update_unknown_key_raises(self, tmp_path):
        manager = ConfigManager(tmp_path / "saved.yml")

        with pytest.raises(InvalidConfigurationError):
            manager.update_config({'dropout': 0.5})

    def test_environment_variable_selects_file(self, monkeypatch):
        monkeypatch.setenv('LUCKYFIVE_ENV', 'staging')

        manager = get_config_manager()

        assert manager.environment == 'staging'
        assert manager.config_path.name == 'staging.yml'
