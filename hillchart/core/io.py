# hillchart/core/io.py
"""
Load markers from JSON.
Accepts a bare list, {"markers": [...]} with key/progress/text entries,
or {"scopes": [...]} with id/name/progress records (converted to SCOPE-<id> markers).
"""

from __future__ import annotations

import json
import math
import re
from pathlib import Path
from typing import Any, Iterable

from hillchart.core.types import Marker

SCOPE_KEY_PREFIX = "SCOPE-"
_SCOPE_KEY_RE = re.compile(r"^SCOPE-(\d+)$")

SAMPLE_MARKERS: tuple[Marker, ...] = (
    Marker(key="SCOPE-101", progress=10.0, text="Mobile onboarding revamp"),
    Marker(key="SCOPE-102", progress=35.0, text="Teacher messaging improvements"),
    Marker(key="SCOPE-103", progress=65.0, text="Notifications reliability"),
)
"""Built-in marker set used when no input file is given."""


def _resolve_path(path: str | Path, repo_root: Path | None) -> Path:
    """Resolve path; if relative, against repo_root (or cwd if repo_root is None)."""
    p = Path(path)
    if not p.is_absolute() and repo_root is not None:
        p = repo_root / p
    return p.resolve()


def _as_progress(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{where}: progress must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"{where}: progress must be finite, got {value!r}")
    return float(value)


def marker_from_dict(item: Any, where: str = "marker", default_key: str | None = None) -> Marker:
    """
    Build a Marker from {key, progress, text}. text is optional (empty label).
    A missing key falls back to default_key; an empty key is always rejected.
    """
    if not isinstance(item, dict):
        raise ValueError(f"{where}: expected an object, got {type(item).__name__}")
    key = item.get("key", default_key)
    if not isinstance(key, str) or not key:
        raise ValueError(f"{where}: key must be a non-empty string")
    text = item.get("text", "")
    if not isinstance(text, str):
        raise ValueError(f"{where}: text must be a string")
    return Marker(key=key, progress=_as_progress(item.get("progress"), where), text=text)


def scope_to_marker(scope: Any, where: str = "scope") -> Marker:
    """Scope record {id, name, progress} -> Marker(SCOPE-<id>, progress, name)."""
    if not isinstance(scope, dict):
        raise ValueError(f"{where}: expected an object, got {type(scope).__name__}")
    scope_id = scope.get("id")
    if isinstance(scope_id, bool) or not isinstance(scope_id, int):
        raise ValueError(f"{where}: id must be an integer")
    name = scope.get("name", "")
    if not isinstance(name, str):
        raise ValueError(f"{where}: name must be a string")
    return Marker(
        key=f"{SCOPE_KEY_PREFIX}{scope_id}",
        progress=_as_progress(scope.get("progress"), where),
        text=name,
    )


def _parse_marker_list(items: list[Any]) -> list[Marker]:
    """Entries without a key get SCOPE-<n>, numbered after the highest SCOPE key already in the list."""
    number = next_scope_number(
        item["key"] for item in items if isinstance(item, dict) and isinstance(item.get("key"), str)
    )
    markers = []
    for i, item in enumerate(items):
        default_key = None
        if isinstance(item, dict) and "key" not in item:
            default_key = f"{SCOPE_KEY_PREFIX}{number}"
            number += 1
        markers.append(marker_from_dict(item, f"markers[{i}]", default_key=default_key))
    return markers


def parse_markers(data: Any) -> list[Marker]:
    """Parse decoded JSON into markers, preserving order (order affects layout)."""
    if isinstance(data, list):
        return _parse_marker_list(data)
    if isinstance(data, dict):
        if "markers" in data and isinstance(data["markers"], list):
            return _parse_marker_list(data["markers"])
        if "scopes" in data and isinstance(data["scopes"], list):
            return [scope_to_marker(item, f"scopes[{i}]") for i, item in enumerate(data["scopes"])]
    raise ValueError("Expected a list of markers, {'markers': [...]} or {'scopes': [...]}")


def load_markers(path: str | Path, repo_root: Path | None = None) -> list[Marker]:
    """
    Read markers from a JSON file.
    Raises FileNotFoundError if path is missing, ValueError if content is malformed.
    """
    resolved = _resolve_path(path, repo_root)
    if not resolved.exists():
        raise FileNotFoundError(f"Markers file not found: {resolved}")
    try:
        data = json.loads(resolved.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {resolved}: {e}") from e
    return parse_markers(data)


def next_scope_number(keys: Iterable[str]) -> int:
    """One more than the highest SCOPE-<n> key; 1 if there are none."""
    highest = 0
    for key in keys:
        match = _SCOPE_KEY_RE.match(key)
        if match:
            highest = max(highest, int(match.group(1)))
    return highest + 1
