"""
Satellite
=========

Clock-bearing body on a circular orbit around the central mass.
"""

import numpy as np
from typing import Optional, Sequence


class Satellite:
    """
    Orbiting clock.

    The position is plain data written by the model each physics step;
    the rendering side copies it into its own scene node.
    """

    def __init__(self,
                 position: Optional[Sequence[float]] = None,
                 clock_rate: float = 1.0):
        """
        Initialize satellite.

        Args:
            position: Initial position [x, y, z]
            clock_rate: Proper-time multiplier
        """
        if position is None:
            position = np.zeros(3)
        self.position = np.array(position, dtype=float).reshape(3)
        self.initial_position = self.position.copy()

        self.clock = 0.0  # Accumulated proper time
        self.clock_rate = clock_rate

    def set_position(self, x: float, y: float, z: float):
        """Write position in place."""
        self.position[0] = x
        self.position[1] = y
        self.position[2] = z

    @property
    def distance(self) -> float:
        """Distance from the central body."""
        return float(np.linalg.norm(self.position))

    def reset(self):
        """Restore seeded position and zero the clock. Clock rate is kept."""
        self.position = self.initial_position.copy()
        self.clock = 0.0

    @classmethod
    def from_dict(cls, data: dict) -> 'Satellite':
        """Build from serialized {'position': {'x', 'y', 'z'}} data."""
        pos = data['position']
        return cls(position=[pos['x'], pos['y'], pos['z']])

    def to_dict(self) -> dict:
        """Serialize position for the worker channel."""
        return {'position': vector_to_dict(self.position)}

    def __repr__(self) -> str:
        return (f"Satellite(position={self.position.tolist()}, "
                f"clock={self.clock:.6f}, rate={self.clock_rate})")


def vector_to_dict(v: np.ndarray) -> dict:
    """Convert a 3-vector to a JSON-friendly {'x', 'y', 'z'} mapping."""
    return {'x': float(v[0]), 'y': float(v[1]), 'z': float(v[2])}


def create_ring(count: int, radius: float) -> list:
    """
    Create satellites evenly spaced on a circle in the orbital plane.

    Args:
        count: Number of satellites
        radius: Orbit radius

    Returns:
        List of Satellite
    """
    satellites = []
    for i in range(count):
        theta = 2 * np.pi * i / count
        satellites.append(Satellite([radius * np.cos(theta), 0.0, radius * np.sin(theta)]))
    return satellites
