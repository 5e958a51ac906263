"""
Simulation Configuration
========================

Physical constants, orbit layout, timing and presentation parameters
for the time-dilation simulation.
"""

import math
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class PhysicalConstants:
    """Constants used by the dilation model (SI)."""
    gravitational_constant: float = 6.6743e-11  # m³ kg⁻¹ s⁻²
    speed_of_light: float = 299792458.0  # m/s
    earth_mass_kg: float = 5.972e24  # Default central mass


@dataclass
class OrbitParameters:
    """Orbit layout in visual units."""
    earth_radius: float = 1.0  # Receiver sits on the surface
    satellite_radius: float = 6.0  # Circular orbit radius
    base_satellite_speed_m_s: float = 3870.0  # GPS satellite speed
    satellite_speed_scale: float = 1e6  # Speed is divided by this for the model
    orbit_angular_rate: float = 0.5  # rad per unit of orbit time

    @property
    def scaled_speed(self) -> float:
        """Satellite speed fed into the velocity term."""
        return self.base_satellite_speed_m_s / self.satellite_speed_scale


@dataclass
class TimingParameters:
    """Fixed-timestep and time-axis tuning."""
    fixed_time_step: float = 1.0 / 60.0  # 60 Hz physics
    time_speed: float = 4132.2  # Coordinate time multiplier
    orbit_speed: float = 10.0  # Orbit time multiplier
    earth_rotation_speed: float = 0.001  # rad per unit of coordinate time

    @property
    def coordinate_dt(self) -> float:
        """Coordinate time added per physics step."""
        return self.fixed_time_step * self.time_speed / 1e3

    @property
    def orbit_dt(self) -> float:
        """Orbit time added per physics step."""
        return self.fixed_time_step * self.orbit_speed / 1e3


@dataclass
class CosmologyParameters:
    """Expansion and universe-age mapping."""
    expansion_rate: float = 0.02
    max_expansion_factor: Optional[float] = None  # None disables the cap
    real_universe_age_years: float = 13.8e9
    universe_simulation_duration: float = 300.0  # Coordinate time mapped onto the full age


@dataclass
class PresentationParameters:
    """Visibility exaggerations consumed by the rendering side."""
    position_error_exaggeration: float = 1e6
    grid_size: float = 10.0
    grid_step: float = 0.1
    grid_smoothing: float = 0.5  # Softening added to r
    grid_depth_scale: float = 5e2

    @property
    def grid_segments(self) -> int:
        """Number of segments along one grid edge."""
        return int(round(self.grid_size / self.grid_step))


@dataclass
class SimulationConfig:
    """Complete simulation configuration."""
    name: str = "orbital-time-dilation"

    constants: PhysicalConstants = field(default_factory=PhysicalConstants)
    orbit: OrbitParameters = field(default_factory=OrbitParameters)
    timing: TimingParameters = field(default_factory=TimingParameters)
    cosmology: CosmologyParameters = field(default_factory=CosmologyParameters)
    presentation: PresentationParameters = field(default_factory=PresentationParameters)

    def __post_init__(self):
        """Validate configuration."""
        _require_positive("fixed_time_step", self.timing.fixed_time_step)
        _require_positive("time_speed", self.timing.time_speed)
        _require_positive("orbit_speed", self.timing.orbit_speed)
        _require_positive("speed_of_light", self.constants.speed_of_light)
        _require_positive("gravitational_constant", self.constants.gravitational_constant)
        _require_positive("earth_mass_kg", self.constants.earth_mass_kg)
        _require_positive("earth_radius", self.orbit.earth_radius)
        _require_positive("satellite_radius", self.orbit.satellite_radius)
        _require_positive("satellite_speed_scale", self.orbit.satellite_speed_scale)
        _require_positive("universe_simulation_duration",
                          self.cosmology.universe_simulation_duration)
        _require_positive("real_universe_age_years", self.cosmology.real_universe_age_years)
        _require_positive("grid_step", self.presentation.grid_step)
        _require_positive("grid_size", self.presentation.grid_size)

        if self.cosmology.expansion_rate < 0:
            raise ValueError("expansion_rate must be non-negative")
        cap = self.cosmology.max_expansion_factor
        if cap is not None and not cap >= 1.0:
            raise ValueError("max_expansion_factor must be >= 1.0")


def _require_positive(name: str, value: float):
    if not (math.isfinite(value) and value > 0):
        raise ValueError(f"{name} must be positive, got {value!r}")


# Pre-defined configurations
def create_default_config() -> SimulationConfig:
    """Create the configuration used by the visualizer."""
    return SimulationConfig()


def create_capped_expansion_config(max_expansion_factor: float = 2.0) -> SimulationConfig:
    """Create configuration with the expansion factor bounded by a cap."""
    return SimulationConfig(
        cosmology=CosmologyParameters(max_expansion_factor=max_expansion_factor),
    )
