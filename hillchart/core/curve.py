# hillchart/core/curve.py
"""
Curve mapper: progress in [0, 100] -> point on the hill, plus phase classification.
Progress is not clamped; values outside [0, 100] extrapolate the formula.
"""

from __future__ import annotations

import numpy as np

from hillchart.core.config import (
    CURVE_SAMPLE_STEPS,
    DEFAULT_CONFIG,
    PHASE_COLORS,
    PHASE_LIMITS,
    ChartConfig,
)
from hillchart.core.types import CanvasPoint, Phase


def hill_height(t: float) -> float:
    """Height fraction 4t(1-t): 0 at both ends, 1 at the crest."""
    return 4.0 * t * (1.0 - t)


def map_to_canvas(progress: float, config: ChartConfig = DEFAULT_CONFIG) -> CanvasPoint:
    t = progress / 100.0
    hump = config.height - 2 * config.margin_y - config.band - config.curve_headroom
    x = config.margin_x + (config.width - 2 * config.margin_x) * t
    y = config.baseline_y - hump * hill_height(t)
    return CanvasPoint(x, y)


def compute_phase(progress: float) -> Phase:
    """UPHILL < 25 <= CREST < 50 <= DOWNHILL < 80 <= DONE."""
    for limit, phase in PHASE_LIMITS:
        if progress < limit:
            return phase  # type: ignore[return-value]
    return "DONE"


def phase_color(progress: float) -> str:
    return PHASE_COLORS[compute_phase(progress)]


def sample_curve(
    steps: int = CURVE_SAMPLE_STEPS,
    config: ChartConfig = DEFAULT_CONFIG,
) -> list[CanvasPoint]:
    """steps + 1 evenly spaced points from progress 0 to 100, for drawing the curve."""
    if steps <= 0:
        return [map_to_canvas(0.0, config)]
    return [map_to_canvas(float(p), config) for p in np.linspace(0.0, 100.0, steps + 1)]
