# hillchart/core/render_svg.py
"""
Export the hill chart as a self-contained SVG: baseline, curve, markers colored by phase,
label boxes with wrapped text, dashed connectors for displaced labels, title/date in the band.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from hillchart.core.config import (
    BACKGROUND_COLOR,
    BASELINE_COLOR,
    CONNECTOR_COLOR,
    CURVE_COLOR,
    DEFAULT_CONFIG,
    DEFAULT_FONT_FAMILY,
    FONT_SIZE,
    LABEL_FILL,
    LABEL_STROKE,
    MARKER_STROKE,
    TEXT_COLOR,
    ChartConfig,
)
from hillchart.core.curve import phase_color, sample_curve
from hillchart.core.types import CanvasPoint, Marker, Placement

SVG_NS = "http://www.w3.org/2000/svg"


def _points_to_svg_d(points: list[CanvasPoint]) -> str:
    """Polyline to SVG path d (M L L ...)."""
    if not points:
        return ""
    parts = [f"M {points[0].x:.2f} {points[0].y:.2f}"]
    for p in points[1:]:
        parts.append(f"L {p.x:.2f} {p.y:.2f}")
    return " ".join(parts)


def _text_baseline(placement: Placement, config: ChartConfig) -> float:
    """y of the first text baseline inside the box."""
    return placement.box_origin.y + config.padding_y + config.line_height - 2.0


def _add_label(parent: ET.Element, placement: Placement, config: ChartConfig) -> None:
    w, h = placement.box_size
    cx = placement.box_origin.x + w / 2.0
    ET.SubElement(
        parent,
        "rect",
        {
            "x": f"{placement.box_origin.x:.2f}",
            "y": f"{placement.box_origin.y:.2f}",
            "width": f"{w:.2f}",
            "height": f"{h:.2f}",
            "rx": "4",
            "ry": "4",
            "fill": LABEL_FILL,
            "fill-opacity": "0.9",
            "stroke": LABEL_STROKE,
            "stroke-width": "1",
        },
    )
    text = ET.SubElement(
        parent,
        "text",
        {
            "x": f"{cx:.2f}",
            "y": f"{_text_baseline(placement, config):.2f}",
            "text-anchor": "middle",
            "font-family": DEFAULT_FONT_FAMILY,
            "font-size": f"{FONT_SIZE:g}",
            "font-weight": "500",
            "fill": TEXT_COLOR,
        },
    )
    for i, line in enumerate(placement.lines):
        tspan = ET.SubElement(
            text,
            "tspan",
            {"x": f"{cx:.2f}", "dy": "0" if i == 0 else f"{config.line_height:g}"},
        )
        tspan.text = line


def build_chart_svg(
    markers: list[Marker],
    placements: dict[str, Placement],
    title: str = "",
    date_text: str = "",
    config: ChartConfig = DEFAULT_CONFIG,
) -> ET.Element:
    """Build the chart as an <svg> element. Markers without a placement are drawn without a label."""
    root = ET.Element(
        "svg",
        {
            "xmlns": SVG_NS,
            "width": f"{config.width:g}",
            "height": f"{config.height:g}",
            "viewBox": f"0 0 {config.width:g} {config.height:g}",
        },
    )
    ET.SubElement(root, "rect", {"x": "0", "y": "0", "width": "100%", "height": "100%", "fill": BACKGROUND_COLOR})
    ET.SubElement(
        root,
        "line",
        {
            "x1": f"{config.margin_x:g}",
            "y1": f"{config.baseline_y:g}",
            "x2": f"{config.width - config.margin_x:g}",
            "y2": f"{config.baseline_y:g}",
            "stroke": BASELINE_COLOR,
            "stroke-width": "2",
        },
    )
    ET.SubElement(
        root,
        "path",
        {
            "id": "hill",
            "d": _points_to_svg_d(sample_curve(config=config)),
            "fill": "none",
            "stroke": CURVE_COLOR,
            "stroke-width": "4",
        },
    )

    # Connectors below markers and labels.
    g_connectors = ET.SubElement(root, "g", {"id": "connectors"})
    g_markers = ET.SubElement(root, "g", {"id": "markers"})
    g_labels = ET.SubElement(root, "g", {"id": "labels"})

    for marker in markers:
        placement = placements.get(marker.key)
        if placement is None:
            continue
        if placement.draws_connector:
            end = placement.connector_end
            ET.SubElement(
                g_connectors,
                "line",
                {
                    "x1": f"{placement.anchor.x:.2f}",
                    "y1": f"{placement.anchor.y:.2f}",
                    "x2": f"{end.x:.2f}",
                    "y2": f"{end.y:.2f}",
                    "stroke": CONNECTOR_COLOR,
                    "stroke-width": "1",
                    "stroke-dasharray": "4 3",
                },
            )
        ET.SubElement(
            g_markers,
            "circle",
            {
                "cx": f"{placement.anchor.x:.2f}",
                "cy": f"{placement.anchor.y:.2f}",
                "r": f"{config.marker_radius:g}",
                "fill": phase_color(marker.progress),
                "stroke": MARKER_STROKE,
                "stroke-width": "1.5",
                "data-key": marker.key,
            },
        )
        _add_label(g_labels, placement, config)

    band_text = " · ".join(part for part in (title, date_text) if part)
    if band_text:
        caption = ET.SubElement(
            root,
            "text",
            {
                "x": f"{config.width / 2.0:g}",
                "y": f"{config.height - config.margin_y - config.band / 2.0:g}",
                "text-anchor": "middle",
                "dominant-baseline": "middle",
                "font-family": DEFAULT_FONT_FAMILY,
                "font-size": "13",
                "fill": TEXT_COLOR,
            },
        )
        caption.text = band_text
    return root


def chart_svg_string(
    markers: list[Marker],
    placements: dict[str, Placement],
    title: str = "",
    date_text: str = "",
    config: ChartConfig = DEFAULT_CONFIG,
) -> str:
    root = build_chart_svg(markers, placements, title=title, date_text=date_text, config=config)
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + ET.tostring(root, encoding="unicode", method="xml")


def export_chart_svg(
    markers: list[Marker],
    placements: dict[str, Placement],
    out_path: str | Path,
    title: str = "",
    date_text: str = "",
    config: ChartConfig = DEFAULT_CONFIG,
) -> Path:
    """Write the chart SVG to out_path and return it."""
    path = Path(out_path)
    path.write_text(chart_svg_string(markers, placements, title, date_text, config), encoding="utf-8")
    return path
