"""Tests for pathgen.planning.paths."""

from __future__ import annotations

import pytest

from pathgen.errors import InvalidPath
from pathgen.models import PathKind
from pathgen.planning.paths import classify_path, normalize_path, parent_path


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("src/components", "src/components"),
        ("src\\utils\\helpers.js", "src/utils/helpers.js"),
        ("./src//app/./main.py", "src/app/main.py"),
        ("docs/", "docs"),
    ],
)
def test_normalize_path_returns_relative_slash_path(raw: str, expected: str) -> None:
    assert normalize_path(raw) == expected


@pytest.mark.parametrize("raw", ["/etc/passwd", "\\server\\share", "C:\\Windows", "d:/data"])
def test_normalize_path_rejects_absolute(raw: str) -> None:
    with pytest.raises(InvalidPath, match="Absolute paths not allowed"):
        normalize_path(raw)


def test_normalize_path_rejects_parent_references() -> None:
    with pytest.raises(InvalidPath, match="Parent directory references not allowed"):
        normalize_path("src/../../secret")


def test_normalize_path_rejects_empty() -> None:
    with pytest.raises(InvalidPath, match="Path is empty"):
        normalize_path("./")


def test_invalid_path_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        normalize_path("..")


def test_classify_path_uses_final_segment() -> None:
    assert classify_path("src/components/Button.jsx") is PathKind.FILE
    assert classify_path("src/components") is PathKind.DIRECTORY
    assert classify_path("config/.github") is PathKind.DIRECTORY
    assert classify_path("v1.2/api") is PathKind.DIRECTORY


def test_parent_path() -> None:
    assert parent_path("src/utils/helpers.js") == "src/utils"
    assert parent_path("README.md") == ""


def test_normalize_path_rejects_traversal_even_when_it_stays_inside() -> None:
    with pytest.raises(InvalidPath):
        normalize_path("a/./b/../c")
    assert normalize_path("a/./b/c") == "a/b/c"
