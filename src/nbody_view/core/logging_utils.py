"""Buffered run logging for the N-body viewer.

Each run gets its own folder under ``root_dir`` holding ``timeseries.csv``
(one row per logged tick), ``events.csv`` (frame switches, pauses, rejected
ticks) and ``meta.json``. The most recent run id is kept in ``last_run.txt``
so :mod:`nbody_view.analyze_run` can find it without arguments.
"""
from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence, TextIO


class _CsvSink:
    """Header-first CSV file with rows buffered in memory."""

    def __init__(self, path: Path, header: Sequence[str], threshold: int) -> None:
        self.path = path
        self._fh: TextIO = path.open("w", newline="", encoding="utf-8")
        self._fh.write(",".join(header) + "\n")
        self._fh.flush()
        self._rows: list[str] = []
        self._threshold = max(1, threshold)

    def append(self, row: str) -> None:
        self._rows.append(row)
        if len(self._rows) >= self._threshold:
            self.flush()

    def flush(self) -> None:
        if not self._rows:
            return
        self._fh.write("\n".join(self._rows) + "\n")
        self._fh.flush()
        self._rows.clear()

    def close(self) -> None:
        self.flush()
        self._fh.close()


class RunLogger:
    """Writes per-tick telemetry and discrete events for one viewer run.

    Parameters
    ----------
    root_dir:
        Folder that collects all runs.
    run_id:
        Folder name for this run. Defaults to ``YYYYmmdd_HHMMSS_run``; a
        numeric suffix is added when the folder already exists.
    timeseries_flush_threshold, events_flush_threshold:
        Buffered rows kept before writing to disk.
    """

    TIMESERIES_HEADER = [
        "t",
        "frame",
        "momentum",
        "momentum_scale",
        "bary_x",
        "bary_y",
        "bary_z",
        "scale",
        "overlay_scale",
    ]
    EVENTS_HEADER = ["t", "type", "details"]

    def __init__(
        self,
        root_dir: str | Path = "data/runs",
        run_id: Optional[str] = None,
        *,
        timeseries_flush_threshold: int = 200,
        events_flush_threshold: int = 50,
    ) -> None:
        self.root_dir = Path(root_dir)
        self.root_dir.mkdir(parents=True, exist_ok=True)

        self.run_id = self._unique_run_id(run_id)
        self.run_dir = self.root_dir / self.run_id
        self.run_dir.mkdir(parents=True, exist_ok=False)

        self.timeseries_path = self.run_dir / "timeseries.csv"
        self.events_path = self.run_dir / "events.csv"
        self.meta_path = self.run_dir / "meta.json"

        self._timeseries = _CsvSink(
            self.timeseries_path, self.TIMESERIES_HEADER, timeseries_flush_threshold
        )
        self._events = _CsvSink(self.events_path, self.EVENTS_HEADER, events_flush_threshold)

        (self.root_dir / "last_run.txt").write_text(self.run_id, encoding="utf-8")

    def _unique_run_id(self, run_id: Optional[str]) -> str:
        base = run_id or datetime.now().strftime("%Y%m%d_%H%M%S") + "_run"
        candidate = base
        suffix = 1
        while (self.root_dir / candidate).exists():
            candidate = f"{base}_{suffix}" if run_id else f"{base}_{suffix:02d}"
            suffix += 1
        return candidate

    def write_meta(self, meta: dict) -> None:
        with self.meta_path.open("w", encoding="utf-8") as fh:
            json.dump(meta, fh, indent=2, sort_keys=True)

    def log_ts(self, values: Sequence[object]) -> None:
        """Buffer one row in :attr:`TIMESERIES_HEADER` order."""

        self._timeseries.append(",".join(self._format_value(v) for v in values))

    def log_event(self, t: float, event_type: str, details: dict | None = None) -> None:
        row = [self._format_value(t), event_type, self._format_details(details)]
        self._events.append(",".join(row))

    def close(self) -> None:
        self._timeseries.close()
        self._events.close()

    @staticmethod
    def _format_value(value: object) -> str:
        if isinstance(value, (int, float)):
            return f"{value:.10g}"
        return str(value)

    @staticmethod
    def _format_details(details: dict | None) -> str:
        if not details:
            return ""
        # Quoted so the embedded commas survive csv.DictReader.
        text = json.dumps(details, sort_keys=True).replace('"', '""')
        return f'"{text}"'

    def __enter__(self) -> "RunLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.close()
        return None


__all__ = ["RunLogger"]
