"""Tests for scheduler configuration.

Configurations are validated on construction: bad quanta, allotments,
reset periods or an empty level list never reach the scheduler.
"""

import dataclasses

import pytest

from mlfq_sim.config import (
    DEFAULT_RESET_PERIOD,
    PRESETS,
    InvalidConfigurationError,
    LevelConfig,
    MLFQConfig,
    ResetMode,
)

DEFAULT_QUANTA = (4, 8, 16)
DEFAULT_ALLOTMENTS = (None, 20, 10)
BOUNDED_TOP_ALLOTMENTS = (10, 20, None)


class TestLevelConfig:
    """Verify per-level validation."""

    def test_unbounded_by_default(self) -> None:
        """Omitting the allotment means unbounded."""
        level = LevelConfig(quantum=4)
        assert level.unbounded
        assert level.allotment is None

    @pytest.mark.parametrize("quantum", [0, -1])
    def test_non_positive_quantum_rejected(self, quantum: int) -> None:
        """Quanta must be positive."""
        with pytest.raises(InvalidConfigurationError, match="Quantum"):
            LevelConfig(quantum=quantum)

    @pytest.mark.parametrize("allotment", [0, -5])
    def test_non_positive_allotment_rejected(self, allotment: int) -> None:
        """Finite allotments must be positive."""
        with pytest.raises(InvalidConfigurationError, match="Allotment"):
            LevelConfig(quantum=4, allotment=allotment)

    def test_non_integer_quantum_rejected(self) -> None:
        """Quanta must be integers."""
        with pytest.raises(InvalidConfigurationError, match="integer"):
            LevelConfig(quantum=2.5)  # pyright: ignore[reportArgumentType]

    def test_config_error_is_value_error(self) -> None:
        """Configuration errors are ValueErrors."""
        assert issubclass(InvalidConfigurationError, ValueError)


class TestMLFQConfig:
    """Verify whole-configuration validation and the defaults."""

    def test_default_levels(self) -> None:
        """The default has three levels, shortest quantum on top."""
        config = MLFQConfig.default()
        assert tuple(level.quantum for level in config.levels) == DEFAULT_QUANTA
        assert tuple(level.allotment for level in config.levels) == DEFAULT_ALLOTMENTS
        assert config.reset_period == DEFAULT_RESET_PERIOD
        assert config.reset_mode is ResetMode.EXACT

    def test_bottom_level(self) -> None:
        """The bottom level is the last index."""
        assert MLFQConfig.default().bottom_level == len(DEFAULT_QUANTA) - 1

    def test_empty_levels_rejected(self) -> None:
        """At least one level is required."""
        with pytest.raises(InvalidConfigurationError, match="At least one"):
            MLFQConfig(levels=())

    @pytest.mark.parametrize("period", [0, -50])
    def test_non_positive_reset_period_rejected(self, period: int) -> None:
        """The reset period must be positive."""
        with pytest.raises(InvalidConfigurationError, match="Reset period"):
            MLFQConfig(levels=(LevelConfig(quantum=4),), reset_period=period)

    def test_unknown_reset_mode_rejected(self) -> None:
        """Only the known reset modes are accepted."""
        with pytest.raises(InvalidConfigurationError, match="reset mode"):
            MLFQConfig(
                levels=(LevelConfig(quantum=4),),
                reset_mode="sometimes",  # pyright: ignore[reportArgumentType]
            )

    def test_reset_mode_string_is_coerced(self) -> None:
        """A reset mode given as a string becomes the enum member."""
        config = MLFQConfig(
            levels=(LevelConfig(quantum=4),),
            reset_mode="crossing",  # pyright: ignore[reportArgumentType]
        )
        assert config.reset_mode is ResetMode.CROSSING

    def test_levels_list_is_stored_as_tuple(self) -> None:
        """Level lists are frozen into tuples."""
        config = MLFQConfig(levels=[LevelConfig(quantum=4)])  # pyright: ignore[reportArgumentType]
        assert isinstance(config.levels, tuple)

    def test_config_is_immutable(self) -> None:
        """Configurations cannot be changed after construction."""
        config = MLFQConfig.default()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.reset_period = 10  # pyright: ignore[reportAttributeAccessIssue]


class TestConfigDicts:
    """Verify JSON-style conversion."""

    def test_round_trip_default(self) -> None:
        """to_dict() output rebuilds an equal configuration."""
        config = MLFQConfig.default()
        assert MLFQConfig.from_dict(config.to_dict()) == config

    def test_missing_keys_use_defaults(self) -> None:
        """An empty dict yields the default configuration."""
        assert MLFQConfig.from_dict({}) == MLFQConfig.default()

    def test_custom_levels(self) -> None:
        """Levels and period are read from the dict."""
        config = MLFQConfig.from_dict(
            {"levels": [{"quantum": 2, "allotment": 6}, {"quantum": 5}], "reset_period": 30}
        )
        assert config.levels == (LevelConfig(quantum=2, allotment=6), LevelConfig(quantum=5))
        assert config.reset_period == 30

    def test_malformed_level_rejected(self) -> None:
        """A level entry without a quantum is rejected."""
        with pytest.raises(InvalidConfigurationError, match="Malformed level"):
            MLFQConfig.from_dict({"levels": [{"allotment": 3}]})

    def test_levels_must_be_a_list(self) -> None:
        """A non-list 'levels' value is rejected."""
        with pytest.raises(InvalidConfigurationError, match="must be a list"):
            MLFQConfig.from_dict({"levels": 3})

    def test_preset_key_selects_base(self) -> None:
        """'preset' picks the configuration that missing keys fall back to."""
        config = MLFQConfig.from_dict({"preset": "bounded-top", "reset_period": 30})
        assert config.levels == MLFQConfig.bounded_top().levels
        assert config.reset_period == 30

    def test_preset_key_must_be_a_string(self) -> None:
        """A non-string 'preset' value is rejected."""
        with pytest.raises(InvalidConfigurationError, match="'preset' must be a string"):
            MLFQConfig.from_dict({"preset": 1})


class TestPresets:
    """Verify the built-in configurations."""

    def test_bounded_top_levels(self) -> None:
        """The top queue is bounded and the bottom queue is not."""
        config = MLFQConfig.bounded_top()
        assert tuple(level.quantum for level in config.levels) == DEFAULT_QUANTA
        assert tuple(level.allotment for level in config.levels) == BOUNDED_TOP_ALLOTMENTS
        assert config.reset_period == DEFAULT_RESET_PERIOD

    def test_preset_by_name(self) -> None:
        """Every listed preset name resolves to its configuration."""
        assert MLFQConfig.preset("default") == MLFQConfig.default()
        assert MLFQConfig.preset("bounded-top") == MLFQConfig.bounded_top()
        for name in PRESETS:
            assert isinstance(MLFQConfig.preset(name), MLFQConfig)

    def test_unknown_preset_rejected(self) -> None:
        """An unknown name is a configuration error listing the choices."""
        with pytest.raises(InvalidConfigurationError, match="bounded-top"):
            MLFQConfig.preset("fastest")
