"""
Orbital Dilation Model
======================

Fixed-step integrator for satellite positions, proper-time clocks,
expansion factor and central-body rotation.

Per step:
    dt        = fixed_time_step * time_speed / 1000
    orbit_dt  = fixed_time_step * orbit_speed / 1000
    theta_i   = 2*pi*i/N + orbit_time * orbit_angular_rate
    delta_i   = (phi_sat - phi_rx) / c^2 - v^2 / (2 c^2)
    clock_i  += clock_rate_i * (1 + delta_i) * dt
"""

import logging
import math
import numpy as np
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .config import SimulationConfig
from .satellite import Satellite, vector_to_dict
from .time_manager import SimulationClock

logger = logging.getLogger(__name__)


@dataclass
class SimulationSnapshot:
    """Read-only view of the model handed to the rendering side."""
    positions: List[np.ndarray] = field(default_factory=list)
    rotation: float = 0.0
    expansion: float = 1.0
    universe_age: float = 0.0
    simulation_time: float = 0.0
    clocks: List[float] = field(default_factory=list)

    def to_payload(self) -> dict:
        """Outbound worker payload."""
        return {
            'positions': [vector_to_dict(p) for p in self.positions],
            'rotation': self.rotation,
            'expansion': self.expansion,
            'universeAge': self.universe_age,
        }


class OrbitalDilationModel:
    """
    Time-dilation simulation core.

    Owns all physical state. Mass is an input to every update and is
    never persisted, so a stale value cannot survive a worker round trip.
    """

    def __init__(self,
                 satellites: Sequence[Satellite],
                 config: SimulationConfig = None):
        """
        Initialize model.

        Args:
            satellites: Initial satellites (ownership passes to the model)
            config: Simulation configuration
        """
        self.config = config or SimulationConfig()
        self.satellites: List[Satellite] = list(satellites)

        self.clock = SimulationClock(
            fixed_time_step=self.config.timing.fixed_time_step,
            on_step=self._on_clock_step,
        )

        self.earth_rotation_speed = self.config.timing.earth_rotation_speed

        self.simulation_time = 0.0
        self.orbit_time = 0.0
        self.expansion_factor = 1.0
        self.earth_rotation_angle = 0.0

        self._step_mass: Optional[float] = None

    # ------------------------------------------------------------------
    # Driving
    # ------------------------------------------------------------------

    @property
    def is_paused(self) -> bool:
        return self.clock.is_paused

    def set_paused(self, paused: bool, now_ms: Optional[float] = None):
        """Pause or resume. Paused wall time never turns into steps."""
        self.clock.set_paused(paused, now_ms)
        logger.debug("Model %s", "paused" if paused else "resumed")

    def update(self, now_ms: float, mass: float) -> int:
        """
        Advance by the wall time elapsed since the previous update.

        Args:
            now_ms: Monotonic timestamp in milliseconds
            mass: Gravitating mass [kg]

        Returns:
            Number of physics steps executed
        """
        _validate_mass(mass)
        self._step_mass = mass
        try:
            return self.clock.update(now_ms)
        finally:
            self._step_mass = None

    def step(self, mass: float):
        """Apply exactly one fixed physics step, bypassing the wall clock."""
        _validate_mass(mass)
        self._fixed_update(mass)

    def _on_clock_step(self):
        self._fixed_update(self._step_mass)

    def _fixed_update(self, mass: float):
        timing = self.config.timing
        dt = timing.coordinate_dt
        orbit_dt = timing.orbit_dt

        self.simulation_time += dt
        self.orbit_time += orbit_dt
        self.expansion_factor += self.config.cosmology.expansion_rate * dt
        cap = self.config.cosmology.max_expansion_factor
        if cap is not None and self.expansion_factor > cap:
            self.expansion_factor = cap

        positions = self.compute_positions(self.orbit_time)
        for sat, pos in zip(self.satellites, positions):
            sat.set_position(*pos)

            delta = self.calculate_delta(sat, mass)
            dtau = (1 + delta) * dt
            sat.clock += sat.clock_rate * dtau

        self.earth_rotation_angle += self.earth_rotation_speed * dt

    # ------------------------------------------------------------------
    # Physics
    # ------------------------------------------------------------------

    def compute_positions(self, orbit_time: float) -> np.ndarray:
        """
        Circular-orbit positions for every satellite.

        Args:
            orbit_time: Orbit time accumulator value

        Returns:
            (N, 3) array, y = 0
        """
        n = len(self.satellites)
        if n == 0:
            return np.zeros((0, 3))

        orbit = self.config.orbit
        theta = 2 * np.pi * np.arange(n) / n + orbit_time * orbit.orbit_angular_rate
        positions = np.zeros((n, 3))
        positions[:, 0] = orbit.satellite_radius * np.cos(theta)
        positions[:, 2] = orbit.satellite_radius * np.sin(theta)
        return positions

    def calculate_delta(self, satellite: Satellite, mass: float) -> float:
        """
        Fractional clock-rate offset of a satellite against the receiver.

        Positive means the satellite clock runs fast (gravitational term
        dominating the velocity term).

        Args:
            satellite: Satellite at its current position
            mass: Gravitating mass [kg]

        Returns:
            Unscaled delta

        Raises:
            ValueError: Satellite at the central body
        """
        G = self.config.constants.gravitational_constant
        c = self.config.constants.speed_of_light

        r = satellite.distance
        if not r > 0:
            raise ValueError(f"satellite distance must be positive, got {r!r}")
        phi_sat = -G * mass / r
        phi_receiver = -G * mass / self.config.orbit.earth_radius
        v = self.config.orbit.scaled_speed

        return (phi_sat - phi_receiver) / (c * c) - (v * v) / (2 * c * c)

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def reset(self):
        """
        Return to time zero.

        Satellite identities, clock rates and the pause flag are kept.
        """
        self.simulation_time = 0.0
        self.orbit_time = 0.0
        self.expansion_factor = 1.0
        self.earth_rotation_angle = 0.0
        self.clock.reset()
        for sat in self.satellites:
            sat.reset()
        logger.debug("Model reset (%d satellites)", len(self.satellites))

    def set_earth_rotation_speed(self, speed: float):
        """Set central-body angular rate [rad per unit coordinate time]."""
        if not math.isfinite(speed):
            raise ValueError(f"earth rotation speed must be finite, got {speed!r}")
        self.earth_rotation_speed = speed

    def set_clock_rate(self, rate: float):
        """Set the same clock rate on every satellite."""
        if not (math.isfinite(rate) and rate > 0):
            raise ValueError(f"clock rate must be positive, got {rate!r}")
        for sat in self.satellites:
            sat.clock_rate = rate

    def apply_clock_correction(self, mass: float) -> List[float]:
        """
        Set each satellite's rate to 1 - delta so its clock tracks
        coordinate time at the current position.

        Returns:
            Applied clock rates
        """
        _validate_mass(mass)
        rates = []
        for sat in self.satellites:
            sat.clock_rate = 1.0 - self.calculate_delta(sat, mass)
            rates.append(sat.clock_rate)
        logger.info("Clock correction applied for mass %.3e kg", mass)
        return rates

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get_universe_age(self) -> float:
        """Presentation age in years, clamped to the real universe age."""
        cosmo = self.config.cosmology
        age = self.simulation_time / cosmo.universe_simulation_duration * cosmo.real_universe_age_years
        return min(age, cosmo.real_universe_age_years)

    def get_expansion_factor(self) -> float:
        return self.expansion_factor

    def get_satellite_positions(self) -> List[np.ndarray]:
        """Copies of satellite positions."""
        return [sat.position.copy() for sat in self.satellites]

    def get_earth_rotation(self) -> float:
        return self.earth_rotation_angle

    def get_satellite_clocks(self) -> List[float]:
        return [sat.clock for sat in self.satellites]

    def get_clock_offsets(self) -> List[float]:
        """Proper time minus coordinate time, per satellite."""
        return [sat.clock - self.simulation_time for sat in self.satellites]

    def estimate_position_error(self) -> float:
        """
        Receiver ranging error implied by the worst clock offset,
        exaggerated for display.
        """
        offsets = self.get_clock_offsets()
        if not offsets:
            return 0.0
        c = self.config.constants.speed_of_light
        worst = max(abs(o) for o in offsets)
        return c * worst * self.config.presentation.position_error_exaggeration

    def snapshot(self) -> SimulationSnapshot:
        """Capture current state."""
        return SimulationSnapshot(
            positions=self.get_satellite_positions(),
            rotation=self.earth_rotation_angle,
            expansion=self.expansion_factor,
            universe_age=self.get_universe_age(),
            simulation_time=self.simulation_time,
            clocks=self.get_satellite_clocks(),
        )

    def __repr__(self) -> str:
        return (f"OrbitalDilationModel(satellites={len(self.satellites)}, "
                f"t={self.simulation_time:.3f}, expansion={self.expansion_factor:.4f}, "
                f"paused={self.is_paused})")


def _validate_mass(mass: float):
    if not (math.isfinite(mass) and mass > 0):
        raise ValueError(f"mass must be a positive finite number, got {mass!r}")
