import math

import pytest

from particlefall.core import Axis, Rect, SimulationConfig


class TestAxis:

    @pytest.mark.parametrize("value,expected", [
        (None, None),
        ("none", None),
        ("Off", None),
        ("horizontal", Axis.HORIZONTAL),
        ("HORIZONTAL", Axis.HORIZONTAL),
        (" vertical ", Axis.VERTICAL),
        (Axis.VERTICAL, Axis.VERTICAL),
    ])
    def test_parse(self, value, expected):
        assert Axis.parse(value) is expected

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValueError, match="diagonal"):
            Axis.parse("diagonal")


class TestSimulationConfig:

    def test_defaults(self):
        config = SimulationConfig()
        assert config.particle_count == 100
        assert config.speed == 1.0
        assert config.size_range == (0.4, 1.0)
        assert config.fall_angle_degrees == 0.0
        assert config.spin_speed == 20.0
        assert config.spin_orientation is Axis.HORIZONTAL
        assert config.viewport is None
        assert config.display_size == (1920.0, 1080.0)

    def test_size_range_orders_bounds(self):
        assert SimulationConfig(min_size=2.0, max_size=0.5).size_range == (0.5, 2.0)

    def test_fall_angle_radians(self):
        assert SimulationConfig(fall_angle_degrees=90).fall_angle_radians == pytest.approx(math.pi / 2)

    @pytest.mark.parametrize("count,expected", [(10, 10), (0, 0), (-3, 0), (7.9, 7)])
    def test_target_count(self, count, expected):
        assert SimulationConfig(particle_count=count).target_count == expected

    def test_copy_is_independent(self, config):
        other = config.copy(speed=4.0)
        assert other.speed == 4.0
        assert config.speed == 1.0
        assert other.viewport == config.viewport


class TestConfigDict:

    def test_round_trip(self, config):
        config.spin_orientation = Axis.VERTICAL
        data = config.to_dict()

        assert data['spin_orientation'] == "vertical"
        assert data['viewport'] == [0.0, 0.0, 200.0, 100.0]
        assert data['particle_half_extent'] == [9.5, 10.5]
        assert SimulationConfig.from_dict(data) == config

    def test_ignores_unknown_keys(self):
        config = SimulationConfig.from_dict({'speed': 2.0, 'wind': 'strong'})
        assert config.speed == 2.0

    def test_viewport_from_size(self):
        config = SimulationConfig.from_dict({'viewport': [640, 480]})
        assert config.viewport == Rect(0.0, 0.0, 640.0, 480.0)

    def test_viewport_from_bounds(self):
        config = SimulationConfig.from_dict({'viewport': [10, 20, 110, 220]})
        assert config.viewport == Rect(10.0, 20.0, 110.0, 220.0)
        assert config.viewport.width == 100.0
        assert config.viewport.height == 200.0

    def test_spin_orientation_none(self):
        assert SimulationConfig.from_dict({'spin_orientation': None}).spin_orientation is None
        assert SimulationConfig.from_dict({'spin_orientation': 'none'}).spin_orientation is None

    def test_numeric_strings_are_converted(self):
        config = SimulationConfig.from_dict({'speed': '2.5', 'particle_count': '40', 'seed': '3'})
        assert config.speed == 2.5
        assert config.particle_count == 40
        assert config.seed == 3

    def test_seed_may_be_none(self):
        assert SimulationConfig.from_dict({'seed': None}).seed is None

    @pytest.mark.parametrize("data", [
        {'speed': 'fast'},
        {'particle_count': 'many'},
        {'spin_speed': [1, 2]},
        {'min_size': True},
        {'seed': 'lucky'},
        {'particle_count': None},
    ])
    def test_non_numeric_values_rejected(self, data):
        with pytest.raises(ValueError, match=next(iter(data))):
            SimulationConfig.from_dict(data)
