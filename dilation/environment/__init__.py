"""
Environment Models
==================

Presentation-side geometry driven by the simulation state.
"""

from .spacetime_grid import SpacetimeGrid

__all__ = [
    'SpacetimeGrid',
]
