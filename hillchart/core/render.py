# hillchart/core/render.py
"""
Matplotlib PNG rendering of the hill chart, drawn in canvas units (y grows downward).
Same scene as the SVG export.
"""

from __future__ import annotations

import warnings
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import FancyBboxPatch

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
    RENDER_HEIGHT_PX,
    RENDER_WIDTH_PX,
    TEXT_COLOR,
    ChartConfig,
)
from hillchart.core.curve import phase_color, sample_curve
from hillchart.core.types import Marker, Placement

_DPI = 100.0


def _new_fig(width_px: int, height_px: int, config: ChartConfig) -> tuple[plt.Figure, plt.Axes]:
    fig = plt.figure(
        figsize=(width_px / _DPI, height_px / _DPI),
        dpi=_DPI,
        constrained_layout=False,
    )
    ax = fig.add_axes([0, 0, 1, 1])  # full-canvas axes
    ax.set_xlim(0, config.width)
    ax.set_ylim(config.height, 0)  # canvas y grows downward
    ax.axis("off")
    return fig, ax


def _px_to_pt(px: float, scale: float) -> float:
    return px * scale * 72.0 / _DPI


def _draw_label(ax: plt.Axes, placement: Placement, config: ChartConfig, scale: float) -> None:
    w, h = placement.box_size
    ax.add_patch(
        FancyBboxPatch(
            (placement.box_origin.x, placement.box_origin.y),
            w,
            h,
            boxstyle="round,pad=0,rounding_size=4",
            facecolor=LABEL_FILL,
            edgecolor=LABEL_STROKE,
            linewidth=1,
            alpha=0.9,
            zorder=5,
        )
    )
    cx = placement.box_origin.x + w / 2.0
    for i, line in enumerate(placement.lines):
        cy = placement.box_origin.y + config.padding_y + (i + 0.5) * config.line_height
        ax.text(
            cx, cy, line,
            fontsize=_px_to_pt(FONT_SIZE, scale),
            fontfamily=DEFAULT_FONT_FAMILY,
            ha="center", va="center",
            color=TEXT_COLOR,
            zorder=6,
        )


def render_chart(
    markers: list[Marker],
    placements: dict[str, Placement],
    output_path: str | Path,
    title: str = "",
    date_text: str = "",
    config: ChartConfig = DEFAULT_CONFIG,
    width_px: int = RENDER_WIDTH_PX,
    height_px: int = RENDER_HEIGHT_PX,
    scale: int = 1,
) -> None:
    """Render the chart to PNG. scale multiplies output resolution (1x, 2x, 4x)."""
    w, h = width_px * scale, height_px * scale
    fig, ax = _new_fig(w, h, config)
    text_scale = w / config.width

    ax.plot(
        [config.margin_x, config.width - config.margin_x],
        [config.baseline_y, config.baseline_y],
        color=BASELINE_COLOR, linewidth=2, zorder=1,
    )
    curve = np.array([(p.x, p.y) for p in sample_curve(config=config)])
    ax.plot(curve[:, 0], curve[:, 1], color=CURVE_COLOR, linewidth=4, zorder=2)

    for marker in markers:
        placement = placements.get(marker.key)
        if placement is None:
            continue
        mx, my = placement.anchor.x, placement.anchor.y
        if placement.draws_connector:
            end = placement.connector_end
            ax.plot([mx, end.x], [my, end.y], color=CONNECTOR_COLOR, linewidth=1, linestyle="--", zorder=3)
        ax.add_patch(
            plt.Circle(
                (mx, my), config.marker_radius,
                facecolor=phase_color(marker.progress),
                edgecolor=MARKER_STROKE,
                linewidth=1.5,
                zorder=4,
            )
        )
        _draw_label(ax, placement, config, text_scale)

    band_text = " · ".join(part for part in (title, date_text) if part)
    if band_text:
        ax.text(
            config.width / 2.0,
            config.height - config.margin_y - config.band / 2.0,
            band_text,
            fontsize=_px_to_pt(13.0, text_scale),
            fontfamily=DEFAULT_FONT_FAMILY,
            ha="center", va="center",
            color=TEXT_COLOR,
        )

    with warnings.catch_warnings():
        warnings.filterwarnings("ignore", message=".*constrained_layout.*", category=UserWarning)
        fig.savefig(output_path, dpi=_DPI, facecolor=BACKGROUND_COLOR)
    plt.close(fig)
