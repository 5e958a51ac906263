import pytest

from dilation.core.config import (
    CosmologyParameters,
    OrbitParameters,
    SimulationConfig,
    TimingParameters,
    create_capped_expansion_config,
    create_default_config,
)


def test_default_config_increments():
    config = create_default_config()

    assert config.timing.fixed_time_step == pytest.approx(1 / 60)
    assert config.timing.coordinate_dt == pytest.approx(4132.2 / 60 / 1000)
    assert config.timing.orbit_dt == pytest.approx(10.0 / 60 / 1000)
    assert config.orbit.scaled_speed == pytest.approx(3870 / 1e6)
    assert config.cosmology.max_expansion_factor is None


def test_capped_config():
    assert create_capped_expansion_config(3.0).cosmology.max_expansion_factor == 3.0


@pytest.mark.parametrize("kwargs", [
    {'timing': TimingParameters(fixed_time_step=0.0)},
    {'timing': TimingParameters(fixed_time_step=-1 / 60)},
    {'timing': TimingParameters(time_speed=float('nan'))},
    {'orbit': OrbitParameters(satellite_radius=0.0)},
    {'orbit': OrbitParameters(earth_radius=-1.0)},
    {'cosmology': CosmologyParameters(expansion_rate=-0.1)},
    {'cosmology': CosmologyParameters(max_expansion_factor=0.5)},
    {'cosmology': CosmologyParameters(universe_simulation_duration=0.0)},
])
def test_invalid_config_fails_fast(kwargs):
    with pytest.raises(ValueError):
        SimulationConfig(**kwargs)
