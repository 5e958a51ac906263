#!/usr/bin/env python3
"""
Time-Dilation Simulation Example
================================

Example script demonstrating the simulation core.
"""

import logging
import time

# Add parent directory to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from dilation.core.config import SimulationConfig
from dilation.core.model import OrbitalDilationModel
from dilation.core.satellite import create_ring
from dilation.logging_config import setup_logging


def run_quick_simulation(num_satellites: int = 4, seconds: float = 5.0):
    """Drive the model with synthetic 60 Hz frames."""
    print("=" * 60)
    print("Orbital Time-Dilation Quick Simulation")
    print("=" * 60)

    config = SimulationConfig()
    mass = config.constants.earth_mass_kg
    model = OrbitalDilationModel(create_ring(num_satellites, config.orbit.satellite_radius), config)

    print(f"\nSimulation Configuration:")
    print(f"  Satellites: {num_satellites}")
    print(f"  Fixed step: {config.timing.fixed_time_step:.5f} s")
    print(f"  Orbit radius: {config.orbit.satellite_radius}")
    print(f"  Mass: {mass:.3e} kg")

    start_time = time.time()
    frame_ms = 1000.0 / 60.0
    for frame in range(int(seconds * 60) + 1):
        model.update(frame * frame_ms, mass)
    elapsed = time.time() - start_time

    print(f"\nSimulation complete in {elapsed:.3f}s")
    print(f"  Physics steps: {model.clock.step_count}")

    print(f"\nFinal State:")
    print(f"  Coordinate time: {model.simulation_time:.4f}")
    print(f"  Universe age: {model.get_universe_age():.3e} years")
    print(f"  Expansion factor: {model.get_expansion_factor():.4f}")
    print(f"  Earth rotation: {model.get_earth_rotation():.5f} rad")
    for i, (pos, sat) in enumerate(zip(model.get_satellite_positions(), model.satellites)):
        print(f"  Sat {i}: [{pos[0]:6.3f}, {pos[1]:6.3f}, {pos[2]:6.3f}] "
              f"clock={sat.clock:.6f} drift={sat.clock - model.simulation_time:.3e}")
    print(f"  Position error estimate: {model.estimate_position_error():.3e}")


def run_clock_correction():
    """Run clock correction scenario."""
    print("\n" + "=" * 60)
    print("Clock Correction Scenario")
    print("=" * 60)

    from dilation.scenarios.clock_correction import (
        ClockCorrectionScenario, ClockCorrectionScenarioConfig)

    scenario = ClockCorrectionScenario(ClockCorrectionScenarioConfig(duration_s=5.0))
    scenario.run()
    print(scenario.get_summary())


def run_mass_sweep():
    """Run mass sweep scenario."""
    print("\n" + "=" * 60)
    print("Mass Sweep")
    print("=" * 60)

    from dilation.scenarios.mass_sweep import MassSweepScenario

    scenario = MassSweepScenario()
    scenario.run()
    print(scenario.get_summary())


def demonstrate_worker():
    """Drive the model through the threaded worker."""
    print("\n" + "=" * 60)
    print("Physics Worker Demonstration")
    print("=" * 60)

    from worker.bridge import SimulationBridge

    config = SimulationConfig()
    mass = config.constants.earth_mass_kg
    bridge = SimulationBridge(create_ring(4, config.orbit.satellite_radius), config)
    print(f"\n  Threaded: {bridge.threaded}")

    frame_ms = 1000.0 / 60.0
    try:
        for frame in range(121):
            bridge.update(frame * frame_ms, mass)
        bridge.flush()
    finally:
        bridge.close()

    reply = bridge.latest
    if reply is not None:
        print(f"  Rotation: {reply.rotation:.5f} rad")
        print(f"  Expansion: {reply.expansion:.4f}")
        print(f"  Universe age: {reply.universe_age:.3e} years")
        for i, pos in enumerate(reply.positions):
            print(f"  Sat {i}: [{pos['x']:6.3f}, {pos['y']:6.3f}, {pos['z']:6.3f}]")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Time-Dilation Simulation Examples")
    parser.add_argument('--all', action='store_true', help='Run all examples')
    parser.add_argument('--quick', action='store_true', help='Run quick simulation')
    parser.add_argument('--correction', action='store_true', help='Run clock correction scenario')
    parser.add_argument('--sweep', action='store_true', help='Run mass sweep')
    parser.add_argument('--worker', action='store_true', help='Demonstrate physics worker')
    parser.add_argument('--verbose', action='store_true', help='Debug logging')

    args = parser.parse_args()
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    # Default to quick if no args
    if not any(v for k, v in vars(args).items() if k != 'verbose'):
        args.quick = True

    if args.all or args.quick:
        run_quick_simulation()

    if args.all or args.correction:
        run_clock_correction()

    if args.all or args.sweep:
        run_mass_sweep()

    if args.all or args.worker:
        demonstrate_worker()
