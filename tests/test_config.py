"""Tests for configuration system."""

import pytest
from pydantic import ValidationError

from keen.config import (
    AltererConfig,
    Config,
    EvolutionConfig,
    LimitsConfig,
    MutatorSettings,
    OutputConfig,
    SelectionConfig,
    TournamentSettings,
    get_default_config,
    validate_parameters,
)
from keen.exceptions import CompositeException, MutatorConfigException, SelectorConfigException


class TestValidateParameters:
    def test_valid(self):
        settings = validate_parameters(MutatorSettings, MutatorConfigException, individual_rate=0.3)
        assert settings.individual_rate == 0.3
        assert settings.chromosome_rate == 0.5

    def test_message(self):
        with pytest.raises(CompositeException) as exc_info:
            validate_parameters(MutatorSettings, MutatorConfigException, chromosome_rate=-0.5)
        [error] = exc_info.value.infringements
        assert isinstance(error, MutatorConfigException)
        assert str(error) == "The chromosome rate (-0.5) must be in 0.0..1.0"

    def test_all_violations_reported(self):
        with pytest.raises(CompositeException) as exc_info:
            validate_parameters(
                MutatorSettings, MutatorConfigException, individual_rate=2, chromosome_rate=3
            )
        assert len(exc_info.value.infringements) == 2
        assert "2 constraint(s) violated" in str(exc_info.value)

    def test_strict_integer(self):
        with pytest.raises(CompositeException) as exc_info:
            validate_parameters(TournamentSettings, SelectorConfigException, tournament_size=2.5)
        assert exc_info.value.has_infringement(SelectorConfigException, "tournament size (2.5)")


class TestEvolutionConfig:
    def test_default_values(self):
        config = EvolutionConfig()
        assert config.population_size == 50
        assert config.survival_rate == 0.4
        assert config.ranker == "max"

    def test_selection_config(self):
        config = EvolutionConfig()
        assert config.parent_selection.strategy == "tournament"
        assert config.survivor_selection.strategy == "tournament"
        assert config.parent_selection.options == {}

    def test_default_alterers(self):
        config = EvolutionConfig()
        assert [(a.kind, a.strategy) for a in config.alterers] == [
            ("crossover", "single_point"),
            ("mutation", "random"),
        ]
        assert config.alterers[1].options == {"individual_rate": 0.2}

    def test_validation(self):
        with pytest.raises(ValidationError):
            EvolutionConfig(survival_rate=1.1)
        with pytest.raises(ValidationError):
            EvolutionConfig(population_size=0)
        with pytest.raises(ValidationError):
            EvolutionConfig(ranker="median")

    def test_extra_fields_forbidden(self):
        with pytest.raises(ValidationError):
            EvolutionConfig(generations=10)

    def test_unknown_selection_strategy(self):
        with pytest.raises(ValidationError):
            SelectionConfig(strategy="rank")

    def test_alterer_kind(self):
        assert AltererConfig().kind == "mutation"
        with pytest.raises(ValidationError):
            AltererConfig(kind="migration")


class TestLimitsConfig:
    def test_default_values(self):
        config = LimitsConfig()
        assert config.max_generations == 100
        assert config.target_fitness is None
        assert config.steady_generations is None

    def test_custom_values(self):
        config = LimitsConfig(max_generations=None, target_fitness=10, steady_generations=5)
        assert config.max_generations is None
        assert config.target_fitness == 10.0
        assert config.steady_generations == 5

    def test_validation(self):
        with pytest.raises(ValidationError):
            LimitsConfig(max_generations=0)


class TestOutputConfig:
    def test_verbosity(self):
        assert OutputConfig().verbosity == "normal"
        assert OutputConfig(verbosity="debug").verbosity == "debug"
        with pytest.raises(ValidationError):
            OutputConfig(verbosity="loud")


class TestConfig:
    def test_default_config(self):
        config = get_default_config()
        assert config.evolution.population_size == 20
        assert config.limits.max_generations == 50
        assert config.seed == 42

    def test_from_dict(self):
        data = {
            "evolution": {"population_size": 80, "ranker": "min"},
            "limits": {"steady_generations": 10},
            "seed": 7,
        }
        config = Config.from_dict(data)
        assert config.evolution.population_size == 80
        assert config.evolution.ranker == "min"
        assert config.limits.steady_generations == 10
        assert config.limits.max_generations == 100
        assert config.seed == 7

    def test_to_dict(self):
        data = get_default_config().to_dict()
        assert "evolution" in data
        assert "limits" in data
        assert data["evolution"]["population_size"] == 20
        assert data["output"]["verbosity"] == "normal"

    def test_yaml_roundtrip(self, tmp_path):
        config = get_default_config()
        config.evolution.alterers = [
            AltererConfig(kind="mutation", strategy="swap", options={"swap_rate": 0.1})
        ]
        path = tmp_path / "keen.yaml"

        config.to_yaml(path)
        loaded = Config.from_yaml(path)

        assert loaded.to_dict() == config.to_dict()
        assert loaded.evolution.alterers[0].options == {"swap_rate": 0.1}

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert Config.from_yaml(path).to_dict() == Config().to_dict()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Config.from_yaml(tmp_path / "missing.yaml")

    def test_unknown_section(self):
        with pytest.raises(ValidationError):
            Config.from_dict({"budget": {"max_time": 10}})
