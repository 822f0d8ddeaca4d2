# tests/test_io.py
"""
Marker loading from JSON: plain markers, scope records, validation errors.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from hillchart.core.io import load_markers, next_scope_number, parse_markers
from hillchart.core.types import Marker


def test_parse_bare_list_keeps_order() -> None:
    markers = parse_markers([
        {"key": "B", "progress": 70, "text": "second"},
        {"key": "A", "progress": 10, "text": "first"},
    ])
    assert [m.key for m in markers] == ["B", "A"]
    assert markers[0] == Marker(key="B", progress=70.0, text="second")


def test_parse_markers_object_text_optional() -> None:
    markers = parse_markers({"markers": [{"key": "A", "progress": 5}]})
    assert markers == [Marker(key="A", progress=5.0, text="")]


def test_parse_scopes_become_scope_keys() -> None:
    markers = parse_markers({"scopes": [{"id": 7, "name": "Search revamp", "progress": 42, "status": "in_progress"}]})
    assert markers == [Marker(key="SCOPE-7", progress=42.0, text="Search revamp")]


@pytest.mark.parametrize(
    "payload",
    [
        [{"key": "A", "progress": "50"}],
        [{"key": "A", "progress": True}],
        [{"key": "A", "progress": float("nan")}],
        [{"key": "A", "progress": float("inf")}],
        {"scopes": [{"id": 1, "progress": float("-inf")}]},
        [{"key": "", "progress": 1}],
        [{"key": "A", "progress": 1, "text": 3}],
        {"scopes": [{"id": "x", "progress": 1}]},
        {"other": []},
        "nope",
    ],
)
def test_parse_rejects_malformed(payload: object) -> None:
    with pytest.raises(ValueError):
        parse_markers(payload)


def test_load_markers_relative_to_repo_root(tmp_path: Path) -> None:
    (tmp_path / "m.json").write_text(json.dumps([{"key": "A", "progress": 50, "text": "x"}]), encoding="utf-8")
    markers = load_markers("m.json", repo_root=tmp_path)
    assert [m.key for m in markers] == ["A"]


def test_load_markers_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_markers(tmp_path / "missing.json")


def test_load_markers_bad_json(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        load_markers(path)


def test_next_scope_number() -> None:
    assert next_scope_number([]) == 1
    assert next_scope_number(["SCOPE-3", "SCOPE-12", "PROJ-99"]) == 13


def test_missing_keys_are_numbered_after_highest_scope() -> None:
    markers = parse_markers([
        {"progress": 10, "text": "new one"},
        {"key": "SCOPE-12", "progress": 40},
        {"progress": 60},
        {"key": "PROJ-99", "progress": 80},
    ])
    assert [m.key for m in markers] == ["SCOPE-13", "SCOPE-12", "SCOPE-14", "PROJ-99"]
    assert markers[0].text == "new one"


def test_missing_key_starts_at_scope_1() -> None:
    markers = parse_markers({"markers": [{"progress": 5}]})
    assert markers == [Marker(key="SCOPE-1", progress=5.0, text="")]


def test_load_markers_rejects_nan_literal(tmp_path: Path) -> None:
    path = tmp_path / "nan.json"
    path.write_text('[{"key": "A", "progress": NaN, "text": "x"}]', encoding="utf-8")
    with pytest.raises(ValueError, match="finite"):
        load_markers(path)
