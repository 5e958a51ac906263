"""
Spacetime Grid
==============

Wireframe plane deformed into a softened potential well around the
central mass. Depth is exaggerated for display.
"""

import numpy as np

from ..core.config import SimulationConfig


class SpacetimeGrid:
    """
    Deformable grid in the orbital plane.

    height(r) = -k / (r + epsilon),  k = mass * G / c^2 * depth_scale
    """

    def __init__(self, config: SimulationConfig = None):
        """
        Initialize grid.

        Args:
            config: Simulation configuration (presentation and constants)
        """
        self.config = config or SimulationConfig()
        pres = self.config.presentation

        segments = pres.grid_segments
        half = pres.grid_size / 2
        axis = np.linspace(-half, half, segments + 1)
        self.x, self.z = np.meshgrid(axis, axis)
        self.radius = np.sqrt(self.x ** 2 + self.z ** 2)

    @property
    def shape(self) -> tuple:
        return self.x.shape

    def well_strength(self, mass: float) -> float:
        """Depth coefficient k for the given mass."""
        if not mass > 0:
            raise ValueError(f"mass must be positive, got {mass!r}")
        const = self.config.constants
        return mass * const.gravitational_constant / const.speed_of_light ** 2 * \
            self.config.presentation.grid_depth_scale

    def deform(self, mass: float) -> np.ndarray:
        """
        Vertex heights for the given mass.

        Returns:
            Array with the grid shape, all values negative
        """
        k = self.well_strength(mass)
        return -k / (self.radius + self.config.presentation.grid_smoothing)

    def center_depth(self, mass: float) -> float:
        """Height at the vertex nearest the central body."""
        heights = self.deform(mass)
        idx = np.unravel_index(np.argmin(self.radius), self.radius.shape)
        return float(heights[idx])
