"""
Mass Sweep Scenario
===================

Dilation delta, clock drift and grid depth across the mass slider range.
"""

import logging
import numpy as np
from typing import Dict, Optional
from dataclasses import dataclass
from ..core.config import SimulationConfig
from ..core.model import OrbitalDilationModel
from ..core.satellite import create_ring
from ..environment.spacetime_grid import SpacetimeGrid

logger = logging.getLogger(__name__)


@dataclass
class MassSweepScenarioConfig:
    """Configuration for mass sweep."""
    min_mass_kg: float = 1e24
    max_mass_kg: float = 1e25
    num_points: int = 10
    steps_per_point: int = 600       # 10 s of 60 Hz physics


class MassSweepScenario:
    """Evaluates the model at evenly spaced masses."""

    def __init__(self,
                 config: MassSweepScenarioConfig = None,
                 sim_config: SimulationConfig = None):
        self.config = config or MassSweepScenarioConfig()
        self.sim_config = sim_config or SimulationConfig()
        self.grid: Optional[SpacetimeGrid] = None
        self.results: Dict = {}

    def run(self) -> Dict:
        """
        Run sweep.

        Returns:
            Dict of equally long lists keyed by quantity
        """
        if self.config.num_points < 1:
            raise ValueError("num_points must be at least 1")

        self.grid = SpacetimeGrid(self.sim_config)
        masses = np.linspace(self.config.min_mass_kg, self.config.max_mass_kg,
                             self.config.num_points)
        radius = self.sim_config.orbit.satellite_radius

        logger.info("Sweeping %d masses from %.2e to %.2e kg",
                    len(masses), masses[0], masses[-1])

        deltas, drifts, depths = [], [], []
        for mass in masses:
            mass = float(mass)
            model = OrbitalDilationModel(create_ring(1, radius), self.sim_config)
            for _ in range(self.config.steps_per_point):
                model.step(mass)

            deltas.append(model.calculate_delta(model.satellites[0], mass))
            drifts.append(model.get_clock_offsets()[0])
            depths.append(self.grid.center_depth(mass))

        self.results = {
            'mass_kg': masses.tolist(),
            'delta': deltas,
            'clock_drift': drifts,
            'grid_center_depth': depths,
        }
        return self.results

    def get_summary(self) -> str:
        """Get human-readable summary."""
        if not self.results:
            return "Scenario not yet run."

        lines = [
            "",
            "Mass Sweep Summary",
            "==================",
            f"{'Mass [kg]':>12} {'Delta':>14} {'Drift':>14} {'Grid depth':>12}",
        ]
        for m, d, dr, g in zip(self.results['mass_kg'], self.results['delta'],
                               self.results['clock_drift'], self.results['grid_center_depth']):
            lines.append(f"{m:>12.3e} {d:>14.6e} {dr:>14.6e} {g:>12.4f}")
        return "\n".join(lines) + "\n"
