"""
Clock Correction Scenario
=========================

Compares an uncorrected satellite constellation with one whose clock
rates have been set to cancel the dilation delta.
"""

import logging
import numpy as np
from typing import Dict, List, Optional
from dataclasses import dataclass
from ..core.config import SimulationConfig
from ..core.model import OrbitalDilationModel
from ..core.satellite import create_ring

logger = logging.getLogger(__name__)


@dataclass
class ClockCorrectionScenarioConfig:
    """Configuration for clock correction scenario."""
    num_satellites: int = 4
    duration_s: float = 10.0          # Wall-clock seconds of frames
    frame_rate_hz: float = 60.0       # Driver frame rate
    mass_kg: float = 5.972e24


class ClockCorrectionScenario:
    """
    Clock correction scenario.

    Simulates:
    - Synthetic animation frames driving two identical models
    - Uncorrected proper-time drift
    - Rate-corrected clocks tracking coordinate time

    Success criteria:
    - Corrected drift far below uncorrected drift
    """

    def __init__(self,
                 config: ClockCorrectionScenarioConfig = None,
                 sim_config: SimulationConfig = None):
        """
        Initialize clock correction scenario.

        Args:
            config: Scenario configuration
            sim_config: Simulation configuration shared by both models
        """
        self.config = config or ClockCorrectionScenarioConfig()
        self.sim_config = sim_config or SimulationConfig()

        self.uncorrected: Optional[OrbitalDilationModel] = None
        self.corrected: Optional[OrbitalDilationModel] = None
        self.results: Dict = {}

        self.time_history: List[float] = []
        self.uncorrected_drift: List[float] = []
        self.corrected_drift: List[float] = []

    def setup(self):
        """Setup scenario."""
        radius = self.sim_config.orbit.satellite_radius
        n = self.config.num_satellites

        self.uncorrected = OrbitalDilationModel(create_ring(n, radius), self.sim_config)
        self.corrected = OrbitalDilationModel(create_ring(n, radius), self.sim_config)
        self.corrected.apply_clock_correction(self.config.mass_kg)

    def run(self) -> Dict:
        """
        Run clock correction scenario.

        Returns:
            Results dictionary
        """
        if self.uncorrected is None:
            self.setup()

        logger.info("Running clock correction scenario: %.1f s at %.0f Hz",
                    self.config.duration_s, self.config.frame_rate_hz)

        frame_ms = 1000.0 / self.config.frame_rate_hz
        num_frames = int(self.config.duration_s * self.config.frame_rate_hz) + 1
        mass = self.config.mass_kg

        for frame in range(num_frames):
            now_ms = frame * frame_ms
            self.uncorrected.update(now_ms, mass)
            self.corrected.update(now_ms, mass)

            self.time_history.append(self.uncorrected.simulation_time)
            self.uncorrected_drift.append(_worst_offset(self.uncorrected))
            self.corrected_drift.append(_worst_offset(self.corrected))

        self.results = self._analyze_results()
        return self.results

    def _analyze_results(self) -> Dict:
        """Analyze scenario results."""
        sat = self.uncorrected.satellites[0] if self.uncorrected.satellites else None
        delta = self.uncorrected.calculate_delta(sat, self.config.mass_kg) if sat else 0.0

        uncorrected = self.uncorrected_drift[-1] if self.uncorrected_drift else 0.0
        corrected = self.corrected_drift[-1] if self.corrected_drift else 0.0

        return {
            'steps': self.uncorrected.clock.step_count,
            'simulation_time': self.uncorrected.simulation_time,
            'delta': delta,
            'uncorrected_drift': uncorrected,
            'corrected_drift': corrected,
            'uncorrected_position_error': self.uncorrected.estimate_position_error(),
            'corrected_position_error': self.corrected.estimate_position_error(),
            'universe_age_years': self.uncorrected.get_universe_age(),
            'expansion_factor': self.uncorrected.get_expansion_factor(),
            'improvement_factor': uncorrected / corrected if corrected > 0 else float('inf'),
            'success': corrected < uncorrected,
        }

    def get_summary(self) -> str:
        """Get human-readable summary."""
        if not self.results:
            return "Scenario not yet run."

        r = self.results
        return f"""
Clock Correction Scenario Summary
=================================
Physics steps: {r['steps']}
Coordinate time: {r['simulation_time']:.3f}
Delta: {r['delta']:.6e}

Drift (max |clock - t|):
  Uncorrected: {r['uncorrected_drift']:.6e}
  Corrected:   {r['corrected_drift']:.6e}

Position error estimate (exaggerated):
  Uncorrected: {r['uncorrected_position_error']:.3e}
  Corrected:   {r['corrected_position_error']:.3e}

Universe age: {r['universe_age_years']:.3e} years
Expansion factor: {r['expansion_factor']:.4f}

Result: {'SUCCESS' if r['success'] else 'FAILED'}
"""


def _worst_offset(model: OrbitalDilationModel) -> float:
    offsets = model.get_clock_offsets()
    return float(np.max(np.abs(offsets))) if offsets else 0.0
