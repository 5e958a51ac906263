import numpy as np
import pytest

from dilation.core.config import SimulationConfig
from dilation.environment.spacetime_grid import SpacetimeGrid


def test_grid_has_101_vertices_per_edge():
    grid = SpacetimeGrid()

    assert grid.shape == (101, 101)
    assert grid.x.min() == pytest.approx(-5.0)
    assert grid.x.max() == pytest.approx(5.0)


def test_center_depth_matches_softened_well():
    config = SimulationConfig()
    grid = SpacetimeGrid(config)
    mass = 5.972e24

    const = config.constants
    k = mass * const.gravitational_constant / const.speed_of_light ** 2 * 5e2
    assert grid.center_depth(mass) == pytest.approx(-k / 0.5)


def test_heights_are_negative_and_deepest_at_center():
    grid = SpacetimeGrid()
    heights = grid.deform(5.972e24)

    assert np.all(heights < 0)
    assert heights.min() == pytest.approx(grid.center_depth(5.972e24))
    assert heights[0, 0] > heights[50, 50]


def test_heavier_mass_digs_deeper():
    grid = SpacetimeGrid()
    assert grid.center_depth(1e25) < grid.center_depth(1e24)


def test_non_positive_mass_rejected():
    with pytest.raises(ValueError):
        SpacetimeGrid().deform(0.0)
