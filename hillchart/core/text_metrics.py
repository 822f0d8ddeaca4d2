# hillchart/core/text_metrics.py
"""
Wrap label text and estimate its box size in logical units.
Width is estimated from character count (fixed per-char advance at the label font),
so layout stays deterministic and independent of installed fonts.
"""

from __future__ import annotations

from hillchart.core.config import DEFAULT_CONFIG, ChartConfig
from hillchart.core.types import TextBlock


def wrap_text(text: str, max_chars: int) -> list[str]:
    """
    Greedy word-atomic wrap. A word longer than max_chars gets its own line.
    Empty or blank text yields a single empty line.
    """
    lines: list[str] = []
    current = ""
    for word in text.split():
        if not current:
            current = word
        elif len(current) + 1 + len(word) <= max_chars:
            current = f"{current} {word}"
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines if lines else [""]


def measure_text_block(text: str, config: ChartConfig = DEFAULT_CONFIG) -> TextBlock:
    """Return wrapped lines and padded box size for a label."""
    lines = wrap_text(text or "", config.wrap_chars)
    longest = max(len(line) for line in lines)
    width = longest * config.char_width + 2 * config.padding_x
    height = len(lines) * config.line_height + 2 * config.padding_y
    return TextBlock(lines=tuple(lines), width=width, height=height)
