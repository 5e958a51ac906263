#!/usr/bin/env python3
"""Run *complete* time-dilation validations.

This script executes:
- Python unit tests (pytest)
- Quick simulation + scenarios
- Physics worker demo

It writes full logs + data + images into build/reports/.

Usage:
  python3 tools/run_all.py
  python3 tools/run_all.py --out build/reports
"""

from __future__ import annotations

import argparse
import contextlib
import csv
import io
import json
import logging
import os
import shutil
import subprocess
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

# Force headless plotting
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np


REPO_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_OUT_ROOT = REPO_ROOT / "build" / "reports"


def _utc_stamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%SZ")


def _run_cmd(cmd: list[str], log_path: Path) -> int:
    """Run from the repo root with the repo on PYTHONPATH, output to log_path."""
    log_path.parent.mkdir(parents=True, exist_ok=True)
    env = {**os.environ, "PYTHONPATH": str(REPO_ROOT)}
    with log_path.open("w", encoding="utf-8") as log:
        log.write(f"$ {' '.join(cmd)}\n\n")
        log.flush()
        return subprocess.run(cmd, cwd=REPO_ROOT, env=env, stdout=log,
                              stderr=subprocess.STDOUT).returncode


def _write_json(path: Path, obj: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)

    def _numpy(o: Any):
        if isinstance(o, (np.ndarray, np.generic)):
            return o.tolist()
        raise TypeError(f"not JSON serializable: {type(o).__name__}")

    with path.open("w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, sort_keys=True, default=_numpy)
        f.write("\n")


def _write_csv(path: Path, rows: list[dict[str, Any]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        if rows:
            writer = csv.DictWriter(f, fieldnames=list(rows[0]))
            writer.writeheader()
            writer.writerows(rows)



def _plot_drift(rows: list[dict[str, Any]], out_png: Path, title: str) -> None:
    out_png.parent.mkdir(parents=True, exist_ok=True)
    if not rows:
        return

    t = np.array([r["simulation_time"] for r in rows])
    uncorrected = np.array([r["uncorrected_drift"] for r in rows])
    corrected = np.array([r["corrected_drift"] for r in rows])

    fig, axs = plt.subplots(2, 1, figsize=(12, 8), sharex=True)
    fig.suptitle(title)

    axs[0].plot(t, uncorrected)
    axs[0].set_ylabel("Uncorrected drift")
    axs[0].grid(True)

    axs[1].plot(t, corrected)
    axs[1].set_ylabel("Corrected drift")
    axs[1].set_xlabel("Coordinate time")
    axs[1].grid(True)

    fig.tight_layout(rect=(0, 0, 1, 0.96))
    fig.savefig(out_png, dpi=160)
    plt.close(fig)


def _plot_sweep(results: dict[str, Any], out_png: Path) -> None:
    out_png.parent.mkdir(parents=True, exist_ok=True)
    mass = np.array(results["mass_kg"])

    fig, axs = plt.subplots(3, 1, figsize=(12, 10), sharex=True)
    fig.suptitle("Mass sweep")

    axs[0].plot(mass, results["delta"], marker="o")
    axs[0].set_ylabel("Delta")
    axs[0].grid(True)

    axs[1].plot(mass, results["clock_drift"], marker="o")
    axs[1].set_ylabel("Clock drift")
    axs[1].grid(True)

    axs[2].plot(mass, results["grid_center_depth"], marker="o")
    axs[2].set_ylabel("Grid depth")
    axs[2].set_xlabel("Mass (kg)")
    axs[2].grid(True)

    fig.tight_layout(rect=(0, 0, 1, 0.96))
    fig.savefig(out_png, dpi=160)
    plt.close(fig)


def _run_simulation_bundle(out_dir: Path, *, profile: str) -> dict[str, Any]:
    # Import here so repo root is on sys.path
    sys.path.insert(0, str(REPO_ROOT))

    from dilation.logging_config import setup_logging
    from dilation.scenarios.clock_correction import ClockCorrectionScenario, ClockCorrectionScenarioConfig
    from dilation.scenarios.mass_sweep import MassSweepScenario, MassSweepScenarioConfig

    setup_logging(logging.INFO, log_file=str(out_dir / "logs" / "simulation.log"))

    results: dict[str, Any] = {}

    def _capture(name: str, fn):
        buf = io.StringIO()
        with contextlib.redirect_stdout(buf), contextlib.redirect_stderr(buf):
            out = fn()
        (out_dir / "logs").mkdir(parents=True, exist_ok=True)
        (out_dir / "logs" / f"simulation_{name}.log").write_text(buf.getvalue(), encoding="utf-8")
        return out

    if profile == "full":
        correction_cfg = ClockCorrectionScenarioConfig(num_satellites=24, duration_s=120.0)
        sweep_cfg = MassSweepScenarioConfig(num_points=50, steps_per_point=3600)
    else:
        correction_cfg = ClockCorrectionScenarioConfig(num_satellites=4, duration_s=10.0)
        sweep_cfg = MassSweepScenarioConfig(num_points=10, steps_per_point=600)

    correction = ClockCorrectionScenario(correction_cfg)
    results["clock_correction"] = _capture("clock_correction", correction.run)
    _write_json(out_dir / "data" / "clock_correction_results.json", results["clock_correction"])

    rows = [
        {"simulation_time": t, "uncorrected_drift": u, "corrected_drift": c}
        for t, u, c in zip(correction.time_history, correction.uncorrected_drift, correction.corrected_drift)
    ]
    _write_csv(out_dir / "data" / "clock_correction_timeseries.csv", rows)
    _plot_drift(rows, out_dir / "images" / "clock_correction_drift.png", "Clock correction")

    sweep = MassSweepScenario(sweep_cfg)
    results["mass_sweep"] = _capture("mass_sweep", sweep.run)
    _write_json(out_dir / "data" / "mass_sweep_results.json", results["mass_sweep"])
    _write_csv(
        out_dir / "data" / "mass_sweep.csv",
        [dict(zip(results["mass_sweep"].keys(), values)) for values in zip(*results["mass_sweep"].values())],
    )
    _plot_sweep(results["mass_sweep"], out_dir / "images" / "mass_sweep.png")

    return results


def main() -> int:
    parser = argparse.ArgumentParser(description="Run complete tests + simulations and write artifacts into build/")
    parser.add_argument("--out", default=str(DEFAULT_OUT_ROOT), help="Output root (default: build/reports)")
    parser.add_argument("--skip-pytests", action="store_true", help="Skip pytest")
    parser.add_argument("--skip-sim", action="store_true", help="Skip simulations")
    parser.add_argument("--skip-worker", action="store_true", help="Skip worker example")
    parser.add_argument(
        "--profile",
        choices=["smoke", "full"],
        default="smoke",
        help="Simulation workload profile (default: smoke)",
    )
    args = parser.parse_args()

    out_root = Path(args.out)
    stamp = _utc_stamp()
    run_dir = out_root / stamp
    latest_dir = out_root / "latest"

    run_dir.mkdir(parents=True, exist_ok=True)
    (run_dir / "logs").mkdir(exist_ok=True)
    (run_dir / "data").mkdir(exist_ok=True)
    (run_dir / "images").mkdir(exist_ok=True)

    meta = {
        "timestamp_utc": stamp,
        "python": sys.version,
        "repo": str(REPO_ROOT),
    }
    _write_json(run_dir / "meta.json", meta)

    summary: dict[str, Any] = {"meta": meta, "steps": {}}

    # Pytests
    if not args.skip_pytests:
        junit = run_dir / "data" / "pytest-junit.xml"
        code = _run_cmd(
            [sys.executable, "-m", "pytest", "-q", "--maxfail=1", f"--junitxml={junit}", "tests"],
            run_dir / "logs" / "pytest.log",
        )
        summary["steps"]["pytest"] = {"exit_code": code}

    # Simulations
    if not args.skip_sim:
        try:
            sim_results = _run_simulation_bundle(run_dir, profile=args.profile)
            _write_json(run_dir / "data" / "simulation_summary.json", sim_results)
            summary["steps"]["simulations"] = {"ok": True, "scenarios": list(sim_results.keys())}
        except KeyboardInterrupt:
            (run_dir / "logs" / "simulation_runner_error.log").write_text("KeyboardInterrupt\n", encoding="utf-8")
            summary["steps"]["simulations"] = {"ok": False, "error": "KeyboardInterrupt"}
        except Exception as e:
            (run_dir / "logs" / "simulation_runner_error.log").write_text(str(e) + "\n", encoding="utf-8")
            summary["steps"]["simulations"] = {"ok": False, "error": str(e)}

    # Worker example (subprocess to keep output identical to user-facing demo)
    if not args.skip_worker:
        code = _run_cmd(
            [sys.executable, "-m", "dilation.examples.run_simulation", "--worker"],
            run_dir / "logs" / "worker_example.log",
        )
        summary["steps"]["worker"] = {"exit_code": code}

    _write_json(run_dir / "summary.json", summary)

    # Human-readable summary
    lines = [
        f"Time-Dilation Validation Report ({stamp})",
        f"Output: {run_dir}",
        "",
        "Steps:",
    ]
    for k, v in summary["steps"].items():
        lines.append(f"- {k}: {v}")
    (run_dir / "summary.txt").write_text("\n".join(lines) + "\n", encoding="utf-8")

    # Refresh latest/
    if latest_dir.exists():
        shutil.rmtree(latest_dir)
    shutil.copytree(run_dir, latest_dir)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
