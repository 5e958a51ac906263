"""
Orbital Time-Dilation Simulation
================================

Deterministic simulation core for visualizing gravitational and
velocity time dilation of satellites around a central mass.

Components:
- Fixed-timestep simulation clock (pause/resume/reset safe)
- Orbital dilation model (positions, proper-time clocks, expansion)
- Spacetime grid deformation
- Scenarios (clock correction, mass sweep)
"""

__version__ = "1.0.0"

from dilation.core.model import OrbitalDilationModel
from dilation.core.satellite import Satellite
from dilation.core.time_manager import SimulationClock

__all__ = [
    'OrbitalDilationModel',
    'Satellite',
    'SimulationClock',
]
