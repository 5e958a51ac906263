import math

import numpy as np
import pytest

from dilation.core.config import (
    CosmologyParameters,
    SimulationConfig,
    create_capped_expansion_config,
)
from dilation.core.model import OrbitalDilationModel
from dilation.core.satellite import Satellite, create_ring

EARTH_MASS = 5.972e24


def _model(n: int = 4, config: SimulationConfig = None) -> OrbitalDilationModel:
    config = config or SimulationConfig()
    return OrbitalDilationModel(create_ring(n, config.orbit.satellite_radius), config)


def _state(model: OrbitalDilationModel):
    return (
        model.simulation_time,
        model.orbit_time,
        model.expansion_factor,
        model.earth_rotation_angle,
        np.array(model.get_satellite_positions()),
        np.array(model.get_satellite_clocks()),
    )


def _assert_same_state(a, b):
    for x, y in zip(_state(a), _state(b)):
        assert np.allclose(x, y, rtol=0, atol=1e-12)


def test_four_satellites_sit_at_quarter_angles_at_orbit_time_zero():
    model = _model(4)
    r = model.config.orbit.satellite_radius

    positions = model.compute_positions(0.0)

    expected = np.array([[r, 0, 0], [0, 0, r], [-r, 0, 0], [0, 0, -r]])
    assert np.allclose(positions, expected, atol=1e-12)
    assert np.all(positions[:, 1] == 0.0)


def test_step_advances_accumulators_by_configured_increments():
    model = _model(2)
    timing = model.config.timing

    model.step(EARTH_MASS)

    assert model.simulation_time == pytest.approx(timing.fixed_time_step * timing.time_speed / 1000)
    assert model.orbit_time == pytest.approx(timing.fixed_time_step * timing.orbit_speed / 1000)
    assert model.expansion_factor == pytest.approx(
        1.0 + model.config.cosmology.expansion_rate * timing.coordinate_dt)
    assert model.earth_rotation_angle == pytest.approx(
        timing.earth_rotation_speed * timing.coordinate_dt)

    theta = model.orbit_time * model.config.orbit.orbit_angular_rate
    r = model.config.orbit.satellite_radius
    assert np.allclose(model.satellites[0].position, [r * math.cos(theta), 0, r * math.sin(theta)])


def test_delta_is_positive_and_matches_closed_form():
    model = _model(1)
    sat = model.satellites[0]
    const = model.config.constants

    delta = model.calculate_delta(sat, EARTH_MASS)

    gm = const.gravitational_constant * EARTH_MASS
    c2 = const.speed_of_light ** 2
    v = model.config.orbit.scaled_speed
    expected = (-gm / 6.0 + gm / 1.0) / c2 - v * v / (2 * c2)
    assert delta > 0
    assert delta == pytest.approx(expected, rel=1e-12)
    assert abs(delta) < 1e-2


def test_delta_grows_with_mass():
    model = _model(1)
    sat = model.satellites[0]

    assert model.calculate_delta(sat, 2 * EARTH_MASS) > model.calculate_delta(sat, EARTH_MASS)


def test_clock_accumulates_dilated_proper_time():
    model = _model(1)
    dt = model.config.timing.coordinate_dt

    model.step(EARTH_MASS)

    sat = model.satellites[0]
    delta = model.calculate_delta(sat, EARTH_MASS)
    assert sat.clock == pytest.approx((1 + delta) * dt)
    assert sat.clock > model.simulation_time


def test_clock_rate_scales_accumulation():
    model = _model(1)
    model.satellites[0].clock_rate = 0.5

    model.step(EARTH_MASS)

    delta = model.calculate_delta(model.satellites[0], EARTH_MASS)
    assert model.satellites[0].clock == pytest.approx(0.5 * (1 + delta) * model.config.timing.coordinate_dt)


def test_identical_inputs_give_identical_outputs():
    a, b = _model(6), _model(6)
    frames = [(0.0, EARTH_MASS), (16.7, EARTH_MASS), (40.0, 3e24), (95.5, 8e24), (300.0, 8e24)]

    for now_ms, mass in frames:
        assert a.update(now_ms, mass) == b.update(now_ms, mass)

    for x, y in zip(_state(a), _state(b)):
        assert np.array_equal(x, y)


def test_update_runs_six_steps_for_tenth_of_second():
    model = _model(3)
    model.update(1000.0, EARTH_MASS)

    assert model.update(1100.0, EARTH_MASS) == 6
    assert model.simulation_time == pytest.approx(6 * model.config.timing.coordinate_dt)


def test_paused_updates_change_nothing():
    model = _model(4)
    model.update(0.0, EARTH_MASS)
    model.update(250.0, EARTH_MASS)
    model.set_paused(True)
    before = _state(model)

    for t in (500.0, 1000.0, 60000.0):
        assert model.update(t, EARTH_MASS) == 0

    for x, y in zip(before, _state(model)):
        assert np.array_equal(x, y)
    assert model.is_paused


def test_resume_does_not_replay_paused_interval():
    paused = _model(4)
    paused.update(0.0, EARTH_MASS)
    paused.update(100.0, EARTH_MASS)
    paused.set_paused(True)
    paused.update(5000.0, EARTH_MASS)
    paused.set_paused(False)
    paused.update(20000.0, EARTH_MASS)
    paused.update(20100.0, EARTH_MASS)

    straight = _model(4)
    straight.update(0.0, EARTH_MASS)
    straight.update(100.0, EARTH_MASS)
    straight.update(200.0, EARTH_MASS)

    assert paused.clock.step_count == straight.clock.step_count == 12
    _assert_same_state(paused, straight)


def test_reset_returns_to_time_zero_and_is_idempotent():
    model = _model(4)
    model.satellites[1].clock_rate = 0.9
    model.update(0.0, EARTH_MASS)
    model.update(500.0, EARTH_MASS)
    model.set_paused(True)

    model.reset()
    once = _state(model)
    model.reset()

    for x, y in zip(once, _state(model)):
        assert np.array_equal(x, y)
    assert model.simulation_time == 0.0
    assert model.orbit_time == 0.0
    assert model.expansion_factor == 1.0
    assert model.get_earth_rotation() == 0.0
    assert model.get_satellite_clocks() == [0.0] * 4
    assert model.satellites[1].clock_rate == 0.9
    assert model.is_paused
    assert np.allclose(model.get_satellite_positions(), model.compute_positions(0.0))


def test_reset_then_run_matches_fresh_model():
    used = _model(3)
    used.update(0.0, EARTH_MASS)
    used.update(400.0, EARTH_MASS)
    used.reset()
    # Anchor survives reset: the next update steps from 400 ms
    used.update(500.0, EARTH_MASS)

    fresh = _model(3)
    fresh.update(0.0, EARTH_MASS)
    fresh.update(100.0, EARTH_MASS)

    _assert_same_state(used, fresh)


def test_expansion_factor_respects_cap():
    model = _model(1, create_capped_expansion_config(1.001))

    for _ in range(100):
        model.step(EARTH_MASS)

    assert model.get_expansion_factor() == 1.001


def test_expansion_factor_never_decreases_while_running():
    model = _model(1)
    last = model.get_expansion_factor()
    for _ in range(20):
        model.step(EARTH_MASS)
        assert model.get_expansion_factor() >= last
        last = model.get_expansion_factor()


def test_universe_age_is_linear_then_clamped():
    config = SimulationConfig(cosmology=CosmologyParameters(universe_simulation_duration=300.0))
    model = _model(1, config)

    model.simulation_time = 150.0
    assert model.get_universe_age() == pytest.approx(13.8e9 / 2)

    model.simulation_time = 1e6
    assert model.get_universe_age() == 13.8e9


def test_satellite_positions_are_copies():
    model = _model(2)
    model.step(EARTH_MASS)

    positions = model.get_satellite_positions()
    positions[0][:] = 99.0

    assert not np.allclose(model.satellites[0].position, 99.0)


@pytest.mark.parametrize("mass", [0.0, -1.0, float("nan"), float("inf")])
def test_invalid_mass_rejected(mass):
    model = _model(1)
    with pytest.raises(ValueError):
        model.update(0.0, mass)
    with pytest.raises(ValueError):
        model.step(mass)


def test_earth_rotation_speed_is_configurable():
    model = _model(1)
    model.set_earth_rotation_speed(2.0)

    model.step(EARTH_MASS)

    assert model.get_earth_rotation() == pytest.approx(2.0 * model.config.timing.coordinate_dt)


def test_clock_correction_cancels_drift():
    corrected, uncorrected = _model(4), _model(4)
    rates = corrected.apply_clock_correction(EARTH_MASS)

    for _ in range(120):
        corrected.step(EARTH_MASS)
        uncorrected.step(EARTH_MASS)

    assert all(rate < 1.0 for rate in rates)
    worst_corrected = max(abs(o) for o in corrected.get_clock_offsets())
    worst_uncorrected = max(abs(o) for o in uncorrected.get_clock_offsets())
    assert worst_corrected < worst_uncorrected * 1e-2
    assert corrected.estimate_position_error() < uncorrected.estimate_position_error()


def test_set_clock_rate_applies_to_all_satellites():
    model = _model(3)
    model.set_clock_rate(1.5)
    assert [s.clock_rate for s in model.satellites] == [1.5] * 3

    with pytest.raises(ValueError):
        model.set_clock_rate(0.0)


def test_position_error_without_satellites_is_zero():
    model = OrbitalDilationModel([], SimulationConfig())
    model.step(EARTH_MASS)

    assert model.estimate_position_error() == 0.0
    assert model.get_satellite_positions() == []


def test_snapshot_payload_uses_wire_keys():
    model = _model(2)
    model.step(EARTH_MASS)

    payload = model.snapshot().to_payload()

    assert set(payload) == {'positions', 'rotation', 'expansion', 'universeAge'}
    assert set(payload['positions'][0]) == {'x', 'y', 'z'}
    assert payload['expansion'] == model.get_expansion_factor()


def test_satellite_round_trips_through_dict():
    sat = Satellite([1.0, 2.0, 3.0])
    copy = Satellite.from_dict(sat.to_dict())

    assert np.array_equal(copy.position, sat.position)
    assert copy.position is not sat.position


def test_satellite_at_origin_rejected_by_delta():
    model = OrbitalDilationModel([Satellite()], SimulationConfig())

    with pytest.raises(ValueError, match="distance"):
        model.calculate_delta(model.satellites[0], EARTH_MASS)
    with pytest.raises(ValueError, match="distance"):
        model.apply_clock_correction(EARTH_MASS)


def test_clock_correction_after_reset_uses_seeded_positions():
    model = _model(4)
    model.step(EARTH_MASS)
    model.reset()

    rates = model.apply_clock_correction(EARTH_MASS)

    assert len(rates) == 4
    assert all(0 < rate < 1 for rate in rates)
