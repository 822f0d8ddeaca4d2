# tests/test_layout.py
"""
Label layout engine: one placement per key, determinism, order dependence,
side bias, search / opposite / diagonal / clamp fallbacks.
"""

from __future__ import annotations

import pytest

from hillchart.core.config import DEFAULT_CONFIG
from hillchart.core.io import SAMPLE_MARKERS
from hillchart.core.layout import layout_labels, summarize_layout
from hillchart.core.types import Marker


def _crest_stack(n: int) -> list[Marker]:
    """n single-character markers all on the crest."""
    return [Marker(key=f"K{i + 1}", progress=50, text=chr(ord("a") + i)) for i in range(n)]


def test_empty_input_gives_empty_layout() -> None:
    assert layout_labels([]) == {}


def test_single_crest_marker_sits_above_by_default() -> None:
    out = layout_labels([Marker(key="A", progress=50, text="x")])
    p = out["A"]
    assert p.orientation == "above"
    assert p.is_default is True
    assert p.draws_connector is False
    assert p.strategy == "default"
    assert p.box_size == pytest.approx((18.5, 22.0))
    # Bottom edge 20 above the anchor, centered on it
    assert p.box_origin.x == pytest.approx(400.0 - 9.25)
    assert p.box_origin.y == pytest.approx(110.0 - 20.0 - 22.0)


def test_one_placement_per_key() -> None:
    markers = list(SAMPLE_MARKERS) + [
        Marker(key="X1", progress=12, text="Billing export"),
        Marker(key="X2", progress=88, text="Done thing"),
    ]
    out = layout_labels(markers)
    assert list(out.keys()) == [m.key for m in markers]


def test_layout_is_deterministic() -> None:
    markers = _crest_stack(6) + list(SAMPLE_MARKERS)
    assert layout_labels(markers) == layout_labels(markers)


def test_well_separated_markers_all_default_without_overlap() -> None:
    markers = [Marker(key=f"T{p}", progress=p, text=f"Task {p}") for p in (5, 20, 35, 50, 65, 80, 95)]
    out = layout_labels(markers)
    assert all(p.is_default for p in out.values())
    assert summarize_layout(out).overlap_count == 0


def test_close_long_titles_displace_second_marker() -> None:
    markers = [
        Marker(key="A", progress=49, text="Teacher messaging improvements"),
        Marker(key="B", progress=51, text="Notifications reliability work"),
    ]
    out = layout_labels(markers)
    a, b = out["A"], out["B"]
    assert a.orientation == "above" and a.is_default is True
    assert b.orientation == "below"
    assert b.is_default is False
    assert b.draws_connector is True
    assert summarize_layout(out).overlap_count == 0


def test_lower_x_is_placed_first_regardless_of_input_order() -> None:
    markers = [
        Marker(key="B", progress=51, text="Notifications reliability work"),
        Marker(key="A", progress=49, text="Teacher messaging improvements"),
    ]
    out = layout_labels(markers)
    assert out["A"].is_default is True
    assert out["B"].orientation == "below"


def test_side_bias_tie_keeps_above() -> None:
    markers = [
        Marker(key="M1", progress=40, text="a"),
        Marker(key="M2", progress=42, text="b"),
        Marker(key="M3", progress=44, text="c"),
    ]
    out = layout_labels(markers)
    assert out["M1"].orientation == "above"
    assert out["M2"].orientation == "below"
    assert out["M3"].orientation == "above"
    assert out["M3"].is_default is True


def test_far_neighbours_do_not_bias() -> None:
    out = layout_labels([Marker(key="L", progress=20, text="left"), Marker(key="R", progress=80, text="right")])
    assert out["L"].orientation == "above" and out["L"].is_default
    assert out["R"].orientation == "above" and out["R"].is_default


def test_five_markers_on_crest_are_separated() -> None:
    markers = [Marker(key=f"K{i}", progress=50, text=f"Scope {i}") for i in range(1, 6)]
    out = layout_labels(markers)
    assert len(out) == 5
    assert [out[f"K{i}"].strategy for i in range(1, 6)] == ["default", "default", "opposite", "opposite", "opposite"]
    assert [out[f"K{i}"].box_origin.y for i in range(1, 6)] == pytest.approx([68.0, 130.0, 160.0, 190.0, 220.0])
    assert out["K1"].is_default is True
    assert not any(out[f"K{i}"].is_default for i in range(2, 6))
    assert summarize_layout(out).overlap_count == 0


def test_below_search_moves_in_five_unit_steps() -> None:
    out = layout_labels(_crest_stack(3))
    p = out["K3"]
    assert p.orientation == "below"
    assert (p.box_origin.y - 130.0) % DEFAULT_CONFIG.search_step == pytest.approx(0.0)


def test_crowded_crest_uses_diagonals_in_order_then_clamps() -> None:
    out = layout_labels(_crest_stack(12))
    assert [out[f"K{i}"].orientation for i in range(2, 8)] == ["below"] * 6
    assert [(out[f"K{i}"].strategy, out[f"K{i}"].quadrant) for i in range(8, 12)] == [
        ("diagonal", "top_right"),
        ("diagonal", "top_left"),
        ("diagonal", "bottom_right"),
        ("diagonal", "bottom_left"),
    ]
    k8 = out["K8"]
    assert k8.box_origin.x == pytest.approx(415.0)
    assert k8.box_origin.y == pytest.approx(78.0)
    assert k8.connector_end == k8.center

    last = out["K12"]
    assert last.strategy == "clamped"
    assert last.orientation == "angled"
    assert last.is_default is False
    assert last.box_origin == out["K11"].box_origin
    assert summarize_layout(out).overlap_count >= 1


def test_overcrowded_input_never_raises_and_stays_in_band() -> None:
    out = layout_labels(_crest_stack(26))
    assert len(out) == 26
    for p in out.values():
        minx, miny, maxx, maxy = p.bounds
        assert miny >= DEFAULT_CONFIG.label_top - 1e-9
        assert maxy <= DEFAULT_CONFIG.label_bottom + 1e-9


def test_empty_text_gets_one_line_box() -> None:
    out = layout_labels([Marker(key="E", progress=30, text="")])
    p = out["E"]
    assert p.lines == ("",)
    assert p.box_size[1] == pytest.approx(DEFAULT_CONFIG.line_height + 2 * DEFAULT_CONFIG.padding_y)


def test_summary_counts() -> None:
    out = layout_labels(_crest_stack(5))
    summary = summarize_layout(out)
    assert summary.n_labels == 5
    assert summary.default_count == 1
    assert summary.connector_count == 4
    assert sum(summary.strategy_counts.values()) == 5


def test_neighbour_below_marker_circle_pushes_label_up_by_search() -> None:
    alone = layout_labels([Marker(key="A", progress=30, text="x")])["A"]
    assert alone.strategy == "default"
    assert alone.box_origin.y == pytest.approx(100.0)

    out = layout_labels([Marker(key="A", progress=30, text="x"), Marker(key="B", progress=32, text="y")])
    a = out["A"]
    assert a.orientation == "above"
    assert a.strategy == "search"
    assert a.is_default is False
    assert a.box_origin.y == pytest.approx(95.0)


def test_side_bias_follows_nearby_majority() -> None:
    tall = "alpha beta gamma delta epsilon zeta eta theta"
    markers = [
        Marker(key="M0", progress=40, text="a"),
        Marker(key="M1", progress=48, text=tall),
        Marker(key="M2", progress=50, text=tall),
        Marker(key="M3", progress=53, text="c"),
    ]
    out = layout_labels(markers)
    assert out["M0"].orientation == "above" and out["M0"].is_default is True
    # One label above nearby: M1 prefers below and gets it on the first try.
    assert (out["M1"].orientation, out["M1"].strategy) == ("below", "default")
    assert out["M1"].is_default is False
    # Tie: M2 prefers above, has no room there, and searches below M1.
    assert (out["M2"].orientation, out["M2"].strategy) == ("below", "opposite")
    assert out["M2"].box_origin.y == pytest.approx(204.0)
    # Two below, one above nearby: M3 prefers above.
    m3 = out["M3"]
    assert (m3.orientation, m3.strategy) == ("above", "default")
    assert m3.is_default is True
    assert summarize_layout(out).overlap_count == 0


@pytest.mark.parametrize("progress", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_progress_is_clamped_into_band(progress: float) -> None:
    markers = [Marker(key="BAD", progress=progress, text="lost"), Marker(key="B", progress=50, text="x")]
    out = layout_labels(markers)
    assert list(out.keys()) == ["BAD", "B"]
    bad = out["BAD"]
    assert bad.strategy == "clamped"
    assert bad.orientation == "angled"
    assert bad.quadrant is None
    minx, miny, maxx, maxy = bad.bounds
    assert miny >= DEFAULT_CONFIG.label_top - 1e-9
    assert maxy <= DEFAULT_CONFIG.label_bottom + 1e-9
    assert minx >= DEFAULT_CONFIG.label_left - 1e-9
    assert maxx <= DEFAULT_CONFIG.label_right + 1e-9
    assert out["B"].is_default is True
    assert out["B"].box_origin.y == pytest.approx(68.0)
    assert summarize_layout(out).n_labels == 2


def test_nan_progress_label_starts_at_top_left_of_band() -> None:
    bad = layout_labels([Marker(key="BAD", progress=float("nan"), text="x")])["BAD"]
    assert bad.box_origin.x == pytest.approx(DEFAULT_CONFIG.label_left)
    assert bad.box_origin.y == pytest.approx(DEFAULT_CONFIG.label_top)
