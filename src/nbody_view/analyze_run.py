"""Analyze a recorded viewer run and generate diagnostic figures."""
from __future__ import annotations

import argparse
import csv
import json
from pathlib import Path
from typing import Dict, List

import numpy as np

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from nbody_view.core.units import make_time, make_unit


TIMESERIES_FILENAME = "timeseries.csv"
EVENTS_FILENAME = "events.csv"
META_FILENAME = "meta.json"
FIGS_SUBDIR = "figs"
TEXT_COLUMNS = {"frame"}


def load_timeseries(path: Path) -> Dict[str, np.ndarray]:
    with path.open("r", newline="", encoding="utf-8") as fh:
        reader = csv.DictReader(fh)
        columns: Dict[str, list] = {name: [] for name in reader.fieldnames or []}
        for row in reader:
            for key, value in row.items():
                if key is None:
                    continue
                if key in TEXT_COLUMNS:
                    columns.setdefault(key, []).append(value)
                else:
                    columns.setdefault(key, []).append(float(value))
    return {key: np.asarray(values) for key, values in columns.items()}


def load_events(path: Path) -> List[dict]:
    with path.open("r", newline="", encoding="utf-8") as fh:
        reader = csv.DictReader(fh)
        events: List[dict] = []
        for row in reader:
            if not row:
                continue
            event = {"t": float(row["t"]), "type": row["type"]}
            details_raw = row.get("details", "")
            if details_raw:
                try:
                    event["details"] = json.loads(details_raw)
                except json.JSONDecodeError:
                    event["details"] = details_raw
            events.append(event)
    return events


def ensure_fig_dir(run_dir: Path) -> Path:
    fig_dir = run_dir / FIGS_SUBDIR
    fig_dir.mkdir(parents=True, exist_ok=True)
    return fig_dir


def summarize_events(events: List[dict]) -> Dict[str, int]:
    summary: Dict[str, int] = {"frame": 0, "pause": 0, "resume": 0, "rejected_tick": 0}
    for event in events:
        summary[event["type"]] = summary.get(event["type"], 0) + 1
    return summary


def momentum_drift(ts: Dict[str, np.ndarray]) -> float:
    """Change of total momentum magnitude over the run, relative to the bodies' momenta.

    Scenarios start with the net momentum removed, so the first sample is
    round-off and cannot serve as the reference. The summed magnitude of the
    individual body momenta at the first sample is used instead; without that
    column the absolute drift is returned.
    """

    momentum = ts.get("momentum", np.array([]))
    if momentum.size == 0:
        return 0.0
    drift = float(momentum[-1] - momentum[0])
    reference = ts.get("momentum_scale", np.array([]))
    if reference.size == 0 or not reference[0] > 0.0:
        return drift
    return drift / float(reference[0])


def barycenter_drift(ts: Dict[str, np.ndarray]) -> np.ndarray:
    """Distance of the barycenter from its first recorded position, per sample."""

    positions = np.column_stack([ts["bary_x"], ts["bary_y"], ts["bary_z"]])
    return np.linalg.norm(positions - positions[0], axis=1)


def plot_momentum(fig_dir: Path, ts: Dict[str, np.ndarray], rel_drift: float) -> None:
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(ts["t"], ts["momentum"], color="#ffa94d")
    ax.set_xlabel("t [s]")
    ax.set_ylabel("|p| [kg m/s]")
    ax.set_title(f"Total momentum – relative drift Δ|p| / Σ|p_i| = {rel_drift:.2e}")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(fig_dir / "momentum.png", dpi=150)
    plt.close(fig)


def plot_barycenter_drift(fig_dir: Path, ts: Dict[str, np.ndarray], events: List[dict]) -> None:
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(ts["t"], barycenter_drift(ts), color="#4dabf7")
    for event in events:
        if event["type"] == "frame":
            ax.axvline(event["t"], color="#9775fa", linestyle=":", alpha=0.5)
    ax.set_xlabel("t [s]")
    ax.set_ylabel("Barycenter drift [m]")
    ax.set_title("Barycenter drift over time")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(fig_dir / "barycenter_drift.png", dpi=150)
    plt.close(fig)


def print_summary(
    run_dir: Path,
    meta: dict,
    ts: Dict[str, np.ndarray],
    rel_drift: float,
    event_summary: Dict[str, int],
) -> None:
    print(f"Run: {run_dir.name}")
    print(f" Scenario: {meta.get('scenario_name', 'unknown')}")
    duration = float(ts["t"][-1]) if ts["t"].size else 0.0
    print(f" Simulated time: {make_time(duration)}")
    drift = float(barycenter_drift(ts)[-1])
    if drift > 0.0:
        value, prefix = make_unit(drift)
        print(f" Barycenter drift: {value:.3f} {prefix}m")
    else:
        print(" Barycenter drift: 0 m")
    print(f" Relative momentum drift Δ|p| / Σ|p_i| = {rel_drift:.3e}")
    print(
        " Events:" +
        ",".join(f" {etype}: {count}" for etype, count in event_summary.items())
    )


def resolve_run_dir(run_dir: str | None, runs_root: Path) -> Path | None:
    """Locate a run by path, by id under ``runs_root`` or via ``last_run.txt``."""

    if run_dir:
        candidate = Path(run_dir)
        return candidate if candidate.is_dir() else runs_root / run_dir
    marker = runs_root / "last_run.txt"
    if not marker.exists():
        return None
    return runs_root / marker.read_text(encoding="utf-8").strip()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Analyze a recorded viewer run and produce figures.")
    parser.add_argument("run_dir", nargs="?", help="Run directory or run id (default: last run)")
    parser.add_argument(
        "--runs-root",
        type=Path,
        default=Path("data") / "runs",
        help="Folder holding recorded runs",
    )
    args = parser.parse_args(argv)

    run_path = resolve_run_dir(args.run_dir, args.runs_root)
    if run_path is None:
        parser.error("No run given and last_run.txt is missing.")
    if not run_path.is_dir():
        parser.error(f"Run directory not found: {run_path}")

    paths = {name: run_path / name for name in (META_FILENAME, TIMESERIES_FILENAME, EVENTS_FILENAME)}
    missing = [name for name, path in paths.items() if not path.exists()]
    if missing:
        parser.error(f"Run directory is missing {', '.join(missing)}")

    meta = json.loads(paths[META_FILENAME].read_text(encoding="utf-8"))
    ts = load_timeseries(paths[TIMESERIES_FILENAME])
    events = load_events(paths[EVENTS_FILENAME])
    if ts.get("t") is None or ts["t"].size == 0:
        parser.error("timeseries.csv is empty, nothing to analyze.")

    fig_dir = ensure_fig_dir(run_path)
    rel_drift = momentum_drift(ts)
    plot_momentum(fig_dir, ts, rel_drift)
    plot_barycenter_drift(fig_dir, ts, events)
    print_summary(run_path, meta, ts, rel_drift, summarize_events(events))


if __name__ == "__main__":
    main()
