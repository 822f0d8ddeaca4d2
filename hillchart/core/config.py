# hillchart/core/config.py
"""
Central configuration for hill chart layout and rendering.
All tunable values live here; no magic numbers in other modules.
ChartConfig bundles the values the algorithm needs into one immutable record.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

# ----- Paths (repo-relative) -----
REPORTS_DIR: str = "reports"

# ----- Canvas geometry -----
CANVAS_WIDTH: float = 800.0
CANVAS_HEIGHT: float = 400.0
MARGIN_X: float = 40.0
MARGIN_Y: float = 40.0

BAND_HEIGHT: float = 50.0
"""Reserved bottom band for chart title/date; labels never go there. Allowed 40-60."""

CURVE_HEADROOM: float = 70.0
"""Space kept free above the apex so crest markers can carry a label above them."""

CURVE_SAMPLE_STEPS: int = 50
"""Segments used when sampling the curve for drawing."""

# ----- Markers -----
MARKER_RADIUS: float = 10.0
MIN_SPACING: float = 8.0
"""Clearance (logical units) between a label box and markers / other labels."""

# ----- Text metrics -----
WRAP_CHARS: int = 18
CHAR_WIDTH: float = 6.5
"""Estimated width of one character at the 11px label font."""

LINE_HEIGHT: float = 14.0
PADDING_X: float = 6.0
PADDING_Y: float = 4.0
FONT_SIZE: float = 11.0

# ----- Label search -----
LABEL_GAP: float = 20.0
"""Distance between anchor and the near edge of a default label box."""

EDGE_INSET: float = 5.0
"""Labels stay this far inside the vertical drawable band."""

SEARCH_STEP: float = 5.0
SEARCH_MAX_STEPS: int = 100
NEARBY_THRESHOLD: float = 100.0
"""Horizontal distance within which placed neighbours bias the preferred side."""

DIAGONAL_OFFSET_X: float = 15.0
DIAGONAL_OFFSET_Y: float = 10.0

# ----- Phases -----
PHASE_LIMITS: tuple[tuple[float, str], ...] = (
    (25.0, "UPHILL"),
    (50.0, "CREST"),
    (80.0, "DOWNHILL"),
)
"""Upper (exclusive) progress bound per phase; anything above is DONE."""

PHASE_COLORS: dict[str, str] = {
    "UPHILL": "#f97316",
    "CREST": "#eab308",
    "DOWNHILL": "#22c55e",
    "DONE": "#0ea5e9",
}

# ----- Rendering -----
RENDER_WIDTH_PX: int = 800
RENDER_HEIGHT_PX: int = 400
BACKGROUND_COLOR: str = "#fafafa"
CURVE_COLOR: str = "#4b6fff"
BASELINE_COLOR: str = "#d1d5db"
MARKER_STROKE: str = "#1f2933"
LABEL_FILL: str = "#ffffff"
LABEL_STROKE: str = "#d1d5db"
TEXT_COLOR: str = "#111827"
CONNECTOR_COLOR: str = "#6b7280"
DEFAULT_FONT_FAMILY: str = "DejaVu Sans"

# ----- Logging -----
LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()
"""CLI log level. Set env LOG_LEVEL=DEBUG to trace placement decisions."""


@dataclass(frozen=True)
class ChartConfig:
    """Immutable canvas, text and search settings passed into every layout call."""
    width: float = CANVAS_WIDTH
    height: float = CANVAS_HEIGHT
    margin_x: float = MARGIN_X
    margin_y: float = MARGIN_Y
    band: float = BAND_HEIGHT
    curve_headroom: float = CURVE_HEADROOM
    marker_radius: float = MARKER_RADIUS
    min_spacing: float = MIN_SPACING
    wrap_chars: int = WRAP_CHARS
    char_width: float = CHAR_WIDTH
    line_height: float = LINE_HEIGHT
    padding_x: float = PADDING_X
    padding_y: float = PADDING_Y
    label_gap: float = LABEL_GAP
    edge_inset: float = EDGE_INSET
    search_step: float = SEARCH_STEP
    search_max_steps: int = SEARCH_MAX_STEPS
    nearby_threshold: float = NEARBY_THRESHOLD
    diagonal_offset_x: float = DIAGONAL_OFFSET_X
    diagonal_offset_y: float = DIAGONAL_OFFSET_Y

    @property
    def baseline_y(self) -> float:
        """y of the curve at both ends (zero height)."""
        return self.height - self.margin_y - self.band

    @property
    def label_top(self) -> float:
        return self.margin_y + self.edge_inset

    @property
    def label_bottom(self) -> float:
        return self.height - self.margin_y - self.band - self.edge_inset

    @property
    def label_left(self) -> float:
        return self.margin_x

    @property
    def label_right(self) -> float:
        return self.width - self.margin_x

    @property
    def marker_clearance(self) -> float:
        return self.marker_radius + self.min_spacing


DEFAULT_CONFIG = ChartConfig()
