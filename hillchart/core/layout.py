# hillchart/core/layout.py
"""
Label layout engine: one greedy pass over markers sorted by x.
Each label tries its preferred side (default spot, then a vertical search),
then the opposite side, then four diagonals, and finally a clamp into the label band.
A label only avoids labels placed before it; it avoids every marker circle.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass, field

from shapely.geometry import Polygon

from hillchart.core.config import DEFAULT_CONFIG, ChartConfig
from hillchart.core.curve import map_to_canvas
from hillchart.core.geometry import (
    clamp_to_label_band,
    clears_marker,
    inside_label_band,
    label_box,
    overlaps_label,
)
from hillchart.core.text_metrics import measure_text_block
from hillchart.core.types import (
    CanvasPoint,
    Marker,
    Orientation,
    Placement,
    PlacementStrategy,
    Quadrant,
    TextBlock,
)

logger = logging.getLogger(__name__)

# (quadrant, x sign, y sign); y grows downward so "top" is negative.
_DIAGONALS: tuple[tuple[Quadrant, float, float], ...] = (
    ("top_right", 1.0, -1.0),
    ("top_left", -1.0, -1.0),
    ("bottom_right", 1.0, 1.0),
    ("bottom_left", -1.0, 1.0),
)


@dataclass(frozen=True)
class _Entry:
    """Per-marker inputs, addressed by input index."""
    index: int
    marker: Marker
    anchor: CanvasPoint
    block: TextBlock


@dataclass
class LayoutSummary:
    """Summary of a layout pass, for reports and logs."""
    n_labels: int
    default_count: int
    connector_count: int
    overlap_count: int
    strategy_counts: dict[str, int] = field(default_factory=dict)


def _is_finite(p: CanvasPoint) -> bool:
    return math.isfinite(p.x) and math.isfinite(p.y)


def _opposite(side: Orientation) -> Orientation:
    return "below" if side == "above" else "above"


def _default_y(entry: _Entry, side: Orientation, config: ChartConfig) -> float:
    """Top edge of the default box: gap + half a line per extra line away from the anchor."""
    extra = (entry.block.line_count - 1) * (config.line_height / 2.0)
    offset = config.label_gap + extra
    if side == "above":
        return entry.anchor.y - offset - entry.block.height
    return entry.anchor.y + offset


def _preferred_side(
    entry: _Entry,
    entries: list[_Entry],
    committed: list[int],
    placed: list[Placement | None],
    config: ChartConfig,
) -> Orientation:
    """Go against the majority of nearby placed labels; ties keep above."""
    above = below = 0
    for j in committed:
        if not _is_finite(entries[j].anchor):
            continue
        if abs(entries[j].anchor.x - entry.anchor.x) > config.nearby_threshold:
            continue
        orientation = placed[j].orientation  # type: ignore[union-attr]
        if orientation == "above":
            above += 1
        elif orientation == "below":
            below += 1
    return "below" if above > below else "above"


def _is_valid(
    rect: Polygon,
    entry: _Entry,
    entries: list[_Entry],
    obstacles: list[Polygon],
    config: ChartConfig,
    check_horizontal: bool = False,
) -> bool:
    if not inside_label_band(rect, check_horizontal=check_horizontal, config=config):
        return False
    if not clears_marker(rect, entry.anchor, config.marker_clearance):
        return False
    if any(overlaps_label(rect, ob, config.min_spacing) for ob in obstacles):
        return False
    return all(
        clears_marker(rect, other.anchor, config.marker_clearance)
        for other in entries
        if other.index != entry.index and _is_finite(other.anchor)
    )


def _search_side(
    entry: _Entry,
    side: Orientation,
    entries: list[_Entry],
    obstacles: list[Polygon],
    config: ChartConfig,
) -> tuple[float, int] | None:
    """
    Step the box away from the anchor until valid. Returns (y, steps taken) or None.
    Step 0 is the default position. Stops once the box leaves the band on the far edge.
    """
    x = entry.anchor.x - entry.block.width / 2.0
    y0 = _default_y(entry, side, config)
    direction = -1.0 if side == "above" else 1.0
    for step in range(config.search_max_steps + 1):
        y = y0 + direction * step * config.search_step
        if side == "above" and y < config.label_top:
            break
        if side == "below" and y + entry.block.height > config.label_bottom:
            break
        rect = label_box(x, y, entry.block.width, entry.block.height)
        if _is_valid(rect, entry, entries, obstacles, config):
            return y, step
    return None


def _diagonal_origin(entry: _Entry, sx: float, sy: float, config: ChartConfig) -> tuple[float, float]:
    w, h = entry.block.width, entry.block.height
    cx = entry.anchor.x + sx * (w / 2.0 + config.diagonal_offset_x)
    cy = entry.anchor.y + sy * (h / 2.0 + config.diagonal_offset_y)
    return (cx - w / 2.0, cy - h / 2.0)


def _make_placement(
    entry: _Entry,
    x: float,
    y: float,
    orientation: Orientation,
    strategy: PlacementStrategy,
    quadrant: Quadrant | None = None,
) -> Placement:
    return Placement(
        key=entry.marker.key,
        anchor=entry.anchor,
        box_origin=CanvasPoint(x, y),
        box_size=(entry.block.width, entry.block.height),
        orientation=orientation,
        is_default=(strategy == "default" and orientation == "above"),
        strategy=strategy,
        quadrant=quadrant,
        lines=entry.block.lines,
    )


def _clamp_unplotted(entry: _Entry, config: ChartConfig) -> Placement:
    """Anchor is NaN or infinite: no geometry from it, clamp straight into the label band."""
    x = entry.anchor.x - entry.block.width / 2.0
    y = _default_y(entry, "above", config)
    if math.isnan(x):
        x = config.label_left
    if math.isnan(y):
        y = config.label_top
    x, y = clamp_to_label_band(x, y, entry.block.width, entry.block.height, config)
    logger.warning(f"{entry.marker.key}: anchor not finite ({entry.anchor.x}, {entry.anchor.y}); label clamped")
    return _make_placement(entry, x, y, "angled", "clamped")


def _place_one(
    entry: _Entry,
    entries: list[_Entry],
    committed: list[int],
    placed: list[Placement | None],
    config: ChartConfig,
) -> Placement:
    if not _is_finite(entry.anchor):
        return _clamp_unplotted(entry, config)

    obstacles = [
        label_box(p.box_origin.x, p.box_origin.y, p.box_size[0], p.box_size[1])
        for p in (placed[j] for j in committed)
        if p is not None
    ]
    preferred = _preferred_side(entry, entries, committed, placed, config)

    for side, is_preferred in ((preferred, True), (_opposite(preferred), False)):
        found = _search_side(entry, side, entries, obstacles, config)
        if found is None:
            logger.debug(f"{entry.marker.key}: no room {side}")
            continue
        y, steps = found
        if not is_preferred:
            strategy: PlacementStrategy = "opposite"
        elif steps == 0:
            strategy = "default"
        else:
            strategy = "search"
        x = entry.anchor.x - entry.block.width / 2.0
        return _make_placement(entry, x, y, side, strategy)

    x = y = 0.0
    quadrant: Quadrant = "bottom_left"
    for quadrant, sx, sy in _DIAGONALS:
        x, y = _diagonal_origin(entry, sx, sy, config)
        rect = label_box(x, y, entry.block.width, entry.block.height)
        if _is_valid(rect, entry, entries, obstacles, config, check_horizontal=True):
            logger.debug(f"{entry.marker.key}: placed diagonally ({quadrant})")
            return _make_placement(entry, x, y, "angled", "diagonal", quadrant)

    x, y = clamp_to_label_band(x, y, entry.block.width, entry.block.height, config)
    logger.warning(f"{entry.marker.key}: no free spot for label; clamped at ({x:.1f}, {y:.1f}), overlap possible")
    return _make_placement(entry, x, y, "angled", "clamped", quadrant)


def layout_labels(
    markers: list[Marker],
    config: ChartConfig = DEFAULT_CONFIG,
) -> dict[str, Placement]:
    """
    Place every marker's label. Pure and deterministic for a given input order.
    Returns {key: Placement} in input order; never raises, empty input gives {}.
    """
    entries = [
        _Entry(i, m, map_to_canvas(m.progress, config), measure_text_block(m.text, config))
        for i, m in enumerate(markers)
    ]
    def _sort_key(i: int) -> tuple[bool, float]:
        anchor = entries[i].anchor
        return (False, anchor.x) if _is_finite(anchor) else (True, 0.0)

    # sorted() is stable, so equal x keeps input order; non-finite anchors go last.
    order = sorted(range(len(entries)), key=_sort_key)
    placed: list[Placement | None] = [None] * len(entries)
    committed: list[int] = []
    for i in order:
        placed[i] = _place_one(entries[i], entries, committed, placed, config)
        committed.append(i)
    return {entries[i].marker.key: placed[i] for i in range(len(entries))}  # type: ignore[misc]


def _boxes_overlap(a: Placement, b: Placement) -> bool:
    ra = label_box(a.box_origin.x, a.box_origin.y, a.box_size[0], a.box_size[1])
    rb = label_box(b.box_origin.x, b.box_origin.y, b.box_size[0], b.box_size[1])
    inter = ra.intersection(rb)
    return not inter.is_empty and inter.area > 0.0


def summarize_layout(placements: dict[str, Placement]) -> LayoutSummary:
    """Counts per strategy, connectors, and label pairs whose boxes overlap."""
    items = list(placements.values())
    overlap_count = sum(
        1
        for i, a in enumerate(items)
        for b in items[i + 1:]
        if _boxes_overlap(a, b)
    )
    return LayoutSummary(
        n_labels=len(items),
        default_count=sum(1 for p in items if p.is_default),
        connector_count=sum(1 for p in items if p.draws_connector),
        overlap_count=overlap_count,
        strategy_counts=dict(Counter(p.strategy for p in items)),
    )
