# hillchart/core/runner.py
"""
CLI entrypoint: load markers, lay out labels, write layout.json and render chart.svg / chart.png.
Without --markers the built-in sample set is used.
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from hillchart.core.config import DEFAULT_CONFIG, LOG_LEVEL, REPORTS_DIR
from hillchart.core.io import SAMPLE_MARKERS, load_markers
from hillchart.core.layout import layout_labels, summarize_layout
from hillchart.core.reporting import (
    ensure_report_dir,
    write_layout_json,
    write_run_metadata_json,
)
from hillchart.core.types import Marker

logger = logging.getLogger(__name__)

MARKERS_NOT_FOUND_MESSAGE = "Markers file not found. Check the --markers path."
MARKERS_INVALID_MESSAGE = (
    "Markers file is not valid. Expected a JSON list of {key, progress, text} or {'scopes': [...]}."
)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Hill chart label layout and rendering.")
    p.add_argument("--markers", type=str, default=None, help="Markers JSON path (repo-relative); sample set if omitted")
    p.add_argument("--title", type=str, default="", help="Chart title shown in the bottom band")
    p.add_argument("--date", type=str, default=None, dest="date_text", help="Date text for the band (default: today, UTC)")
    p.add_argument("--run-name", type=str, default="run", dest="run_name", help="Reports subdir name")
    p.add_argument("--output-dir", type=str, default=REPORTS_DIR, dest="output_dir", help="Output directory (repo-relative)")
    p.add_argument("--repo-root", type=str, default=None, dest="repo_root", help="Repo root (default: cwd)")
    p.add_argument("--no-png", action="store_true", dest="no_png", help="Skip the matplotlib PNG render")
    return p.parse_args(argv)


def _load(args: argparse.Namespace, repo_root: Path) -> list[Marker]:
    if args.markers is None:
        return list(SAMPLE_MARKERS)
    return load_markers(args.markers, repo_root=repo_root)


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO))
    args = _parse_args(argv)
    repo_root = Path(args.repo_root).resolve() if args.repo_root else Path.cwd().resolve()

    try:
        markers = _load(args, repo_root)
    except FileNotFoundError as e:
        logger.error(str(e))
        print(MARKERS_NOT_FOUND_MESSAGE, file=sys.stderr)
        return 2
    except ValueError as e:
        logger.error(str(e))
        print(MARKERS_INVALID_MESSAGE, file=sys.stderr)
        return 2

    config = DEFAULT_CONFIG
    placements = layout_labels(markers, config)
    summary = summarize_layout(placements)
    logger.info(
        f"Placed {summary.n_labels} labels: {summary.default_count} default, "
        f"{summary.connector_count} with connector, {summary.overlap_count} overlapping pairs"
    )

    date_text = args.date_text
    if date_text is None:
        date_text = datetime.now(timezone.utc).strftime("%Y-%m-%d")

    report_dir = ensure_report_dir(repo_root, args.run_name, output_dir=args.output_dir)
    layout_path = write_layout_json(report_dir, markers, placements, summary)
    write_run_metadata_json(
        report_dir,
        args.run_name,
        args.markers or "sample",
        len(markers),
        config,
    )

    from hillchart.core.render_svg import export_chart_svg
    svg_path = export_chart_svg(
        markers, placements, report_dir / "chart.svg",
        title=args.title, date_text=date_text, config=config,
    )
    outputs = [layout_path, svg_path]
    if not args.no_png:
        from hillchart.core.render import render_chart
        png_path = report_dir / "chart.png"
        render_chart(markers, placements, png_path, title=args.title, date_text=date_text, config=config)
        outputs.append(png_path)

    for p in outputs:
        print(p)
    return 0


if __name__ == "__main__":
    sys.exit(main())
