# hillchart/core/geometry.py
"""
Geometry helpers for label boxes: shapely boxes, marker clearance,
label-label overlap and band containment.
"""

from __future__ import annotations

from shapely.geometry import Point, Polygon, box

from hillchart.core.config import DEFAULT_CONFIG, ChartConfig
from hillchart.core.types import CanvasPoint


def label_box(x: float, y: float, width: float, height: float) -> Polygon:
    """Axis-aligned box from top-left corner (x, y) and size."""
    return box(x, y, x + width, y + height)


def box_bounds(geom: Polygon) -> tuple[float, float, float, float]:
    """Return (minx, miny, maxx, maxy)."""
    if geom is None or geom.is_empty:
        return (0.0, 0.0, 0.0, 0.0)
    b = geom.bounds
    return (b[0], b[1], b[2], b[3])


def clears_marker(rect: Polygon, center: CanvasPoint, clearance: float) -> bool:
    """
    True if the box keeps at least clearance from the marker center.
    Shapely's distance is the closest-point distance, 0 when the center is inside.
    """
    return rect.distance(Point(center.x, center.y)) >= clearance


def overlaps_label(rect: Polygon, other: Polygon, spacing: float) -> bool:
    """True if rect, inflated vertically by spacing, overlaps other with positive area."""
    minx, miny, maxx, maxy = box_bounds(rect)
    inflated = box(minx, miny - spacing, maxx, maxy + spacing)
    inter = inflated.intersection(other)
    return not inter.is_empty and inter.area > 0.0


def inside_label_band(
    rect: Polygon,
    check_horizontal: bool = False,
    config: ChartConfig = DEFAULT_CONFIG,
) -> bool:
    """Vertical drawable band always; horizontal drawable range only for sideways offsets."""
    minx, miny, maxx, maxy = box_bounds(rect)
    if miny < config.label_top or maxy > config.label_bottom:
        return False
    if check_horizontal and (minx < config.label_left or maxx > config.label_right):
        return False
    return True


def clamp_to_label_band(
    x: float,
    y: float,
    width: float,
    height: float,
    config: ChartConfig = DEFAULT_CONFIG,
) -> tuple[float, float]:
    """Nearest top-left corner that keeps the box inside the label band (top edge wins if too tall)."""
    y = max(config.label_top, min(y, config.label_bottom - height))
    x = max(config.label_left, min(x, config.label_right - width))
    return (x, y)
