# tests/test_render.py
"""
SVG export and PNG render of the chart scene.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from hillchart.core.io import SAMPLE_MARKERS
from hillchart.core.layout import layout_labels, summarize_layout
from hillchart.core.render import render_chart
from hillchart.core.render_svg import SVG_NS, build_chart_svg, export_chart_svg
from hillchart.core.types import Marker

_NS = {"svg": SVG_NS}


def _crowded() -> list[Marker]:
    return [Marker(key=f"K{i}", progress=50, text=f"Scope {i}") for i in range(1, 6)]


def test_svg_has_marker_per_placement_and_connectors() -> None:
    markers = _crowded()
    placements = layout_labels(markers)
    root = ET.fromstring(ET.tostring(build_chart_svg(markers, placements, title="Q3", date_text="2026-10-18")))
    circles = root.findall(".//svg:g[@id='markers']/svg:circle", _NS)
    assert len(circles) == len(markers)
    connectors = root.findall(".//svg:g[@id='connectors']/svg:line", _NS)
    assert len(connectors) == summarize_layout(placements).connector_count
    labels = root.findall(".//svg:g[@id='labels']/svg:rect", _NS)
    assert len(labels) == len(markers)
    texts = ["".join(t.itertext()) for t in root.iter(f"{{{SVG_NS}}}text")]
    assert "Q3 · 2026-10-18" in texts


def test_svg_wraps_label_lines_into_tspans() -> None:
    markers = [Marker(key="A", progress=30, text="Teacher messaging improvements")]
    root = ET.fromstring(ET.tostring(build_chart_svg(markers, layout_labels(markers))))
    tspans = root.findall(".//svg:g[@id='labels']/svg:text/svg:tspan", _NS)
    assert [t.text for t in tspans] == ["Teacher messaging", "improvements"]


def test_export_chart_svg_writes_file(tmp_path: Path) -> None:
    markers = list(SAMPLE_MARKERS)
    out = export_chart_svg(markers, layout_labels(markers), tmp_path / "chart.svg")
    content = out.read_text(encoding="utf-8")
    assert content.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert "<path" in content


def test_render_chart_png(tmp_path: Path) -> None:
    markers = _crowded()
    out = tmp_path / "chart.png"
    render_chart(markers, layout_labels(markers), out, title="Q3")
    assert out.exists()
    assert out.stat().st_size > 0


def test_svg_uses_chart_palette() -> None:
    markers = list(SAMPLE_MARKERS)
    root = ET.fromstring(ET.tostring(build_chart_svg(markers, layout_labels(markers))))
    background = root.find("svg:rect", _NS)
    assert background is not None and background.get("fill") == "#fafafa"
    hill = root.find("svg:path[@id='hill']", _NS)
    assert hill is not None and hill.get("stroke") == "#4b6fff"
    baseline = root.find("svg:line", _NS)
    assert baseline is not None and baseline.get("stroke") == "#d1d5db"
    label_text = root.find(".//svg:g[@id='labels']/svg:text", _NS)
    assert label_text is not None and label_text.get("fill") == "#111827"
