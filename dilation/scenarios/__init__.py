"""
Simulation Scenarios
====================

Pre-configured runs of the dilation model.
"""

from .clock_correction import ClockCorrectionScenario
from .mass_sweep import MassSweepScenario

__all__ = [
    'ClockCorrectionScenario',
    'MassSweepScenario',
]
