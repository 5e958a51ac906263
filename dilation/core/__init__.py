"""
Simulation Core Module
======================

Fixed-timestep clock, satellite state and the dilation model.
"""

from .config import SimulationConfig
from .model import OrbitalDilationModel, SimulationSnapshot
from .satellite import Satellite, create_ring
from .time_manager import SimulationClock

__all__ = [
    'OrbitalDilationModel',
    'SimulationSnapshot',
    'Satellite',
    'create_ring',
    'SimulationClock',
    'SimulationConfig',
]
