# hillchart/core/reporting.py
"""
Create reports/<run_name>/ and write layout.json (placements + summary) and run_metadata.json.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path

from hillchart.core.config import DEFAULT_CONFIG, REPORTS_DIR, ChartConfig
from hillchart.core.curve import compute_phase
from hillchart.core.layout import LayoutSummary
from hillchart.core.types import Marker, Placement


def placement_to_dict(placement: Placement) -> dict:
    """Serialized placement: anchor, box, orientation and connector info."""
    w, h = placement.box_size
    end = placement.connector_end
    return {
        "key": placement.key,
        "anchor": {"x": placement.anchor.x, "y": placement.anchor.y},
        "box": {"x": placement.box_origin.x, "y": placement.box_origin.y, "width": w, "height": h},
        "orientation": placement.orientation,
        "quadrant": placement.quadrant,
        "is_default": placement.is_default,
        "strategy": placement.strategy,
        "lines": list(placement.lines),
        "connector": {"x": end.x, "y": end.y} if placement.draws_connector else None,
    }


def layout_to_dict(
    markers: list[Marker],
    placements: dict[str, Placement],
    summary: LayoutSummary,
) -> dict:
    """Structure for layout.json: markers with phase, placements in input order, summary."""
    return {
        "markers": [
            {"key": m.key, "progress": m.progress, "text": m.text, "phase": compute_phase(m.progress)}
            for m in markers
        ],
        "placements": [placement_to_dict(p) for p in placements.values()],
        "summary": asdict(summary),
    }


def run_metadata_dict(
    run_name: str,
    markers_source: str,
    n_markers: int,
    config: ChartConfig = DEFAULT_CONFIG,
) -> dict:
    """Timestamp and config snapshot for run_metadata.json."""
    return {
        "run_name": run_name,
        "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        "markers_source": markers_source,
        "n_markers": n_markers,
        "config": asdict(config),
    }


def ensure_report_dir(
    repo_root: Path,
    run_name: str,
    output_dir: str | None = None,
) -> Path:
    """Create output_dir/<run_name>/ under repo_root; return path. Default output_dir from config."""
    base = output_dir if output_dir is not None else REPORTS_DIR
    out = (repo_root / base).resolve() / run_name
    out.mkdir(parents=True, exist_ok=True)
    return out


def write_layout_json(
    report_dir: Path,
    markers: list[Marker],
    placements: dict[str, Placement],
    summary: LayoutSummary,
) -> Path:
    """Write layout.json to report_dir. Returns path to file."""
    path = report_dir / "layout.json"
    data = layout_to_dict(markers, placements, summary)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def write_run_metadata_json(
    report_dir: Path,
    run_name: str,
    markers_source: str,
    n_markers: int,
    config: ChartConfig = DEFAULT_CONFIG,
) -> Path:
    """Write run_metadata.json to report_dir."""
    path = report_dir / "run_metadata.json"
    data = run_metadata_dict(run_name, markers_source, n_markers, config)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path
