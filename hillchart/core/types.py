# hillchart/core/types.py
"""
Dataclasses for markers, text blocks and label placements.
Schema of the serialized form lives in reporting.placement_to_dict.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


Phase = Literal["UPHILL", "CREST", "DOWNHILL", "DONE"]
Orientation = Literal["above", "below", "angled"]
Quadrant = Literal["top_right", "top_left", "bottom_right", "bottom_left"]
PlacementStrategy = Literal["default", "search", "opposite", "diagonal", "clamped"]


@dataclass(frozen=True)
class Marker:
    """One tracked work item. key must be unique within a layout call."""
    key: str
    progress: float
    text: str = ""


@dataclass(frozen=True)
class CanvasPoint:
    x: float
    y: float


@dataclass(frozen=True)
class TextBlock:
    """Wrapped label text with its estimated box size (padding included)."""
    lines: tuple[str, ...]
    width: float
    height: float

    @property
    def line_count(self) -> int:
        return len(self.lines)


@dataclass
class Placement:
    """
    Chosen geometry for one label. Produced fresh by every layout call.
    box_origin is the top-left corner; y grows downward.
    """
    key: str
    anchor: CanvasPoint
    box_origin: CanvasPoint
    box_size: tuple[float, float]  # (width, height)
    orientation: Orientation
    is_default: bool
    strategy: PlacementStrategy
    quadrant: Quadrant | None = None
    lines: tuple[str, ...] = field(default_factory=tuple)

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        """(minx, miny, maxx, maxy) of the label box."""
        w, h = self.box_size
        return (self.box_origin.x, self.box_origin.y, self.box_origin.x + w, self.box_origin.y + h)

    @property
    def center(self) -> CanvasPoint:
        w, h = self.box_size
        return CanvasPoint(self.box_origin.x + w / 2.0, self.box_origin.y + h / 2.0)

    @property
    def draws_connector(self) -> bool:
        return not self.is_default

    @property
    def connector_end(self) -> CanvasPoint:
        """Point on the label the connector runs to: box center when angled, else nearest edge midpoint."""
        if self.orientation == "angled":
            return self.center
        minx, miny, maxx, maxy = self.bounds
        cx = (minx + maxx) / 2.0
        if self.orientation == "above":
            return CanvasPoint(cx, maxy)
        return CanvasPoint(cx, miny)
