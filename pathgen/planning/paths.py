"""Normalise and classify candidate relative paths."""

from __future__ import annotations

import re

from ..errors import InvalidPath
from ..models import PathKind

_SEPARATORS = re.compile(r"[/\\]")
_DRIVE_PREFIX = re.compile(r"^[A-Za-z]:")


def normalize_path(raw: str) -> str:
    """Return `raw` as a purely relative, `/`-joined path.

    Empty and `.` segments are dropped. Absolute paths (a leading separator or a
    drive letter) and any `..` segment raise `InvalidPath`, as does a path that
    normalises to nothing.
    """
    if raw.startswith(("/", "\\")) or _DRIVE_PREFIX.match(raw):
        raise InvalidPath(raw, "Absolute paths not allowed")

    segments = []
    for segment in _SEPARATORS.split(raw):
        if not segment or segment == ".":
            continue
        if segment == "..":
            raise InvalidPath(raw, "Parent directory references not allowed")
        segments.append(segment)

    if not segments:
        raise InvalidPath(raw, "Path is empty")
    return "/".join(segments)


def classify_path(path: str) -> PathKind:
    """Guess the entry kind from the final segment: a dotted, non-hidden name is a file."""
    base = path.rsplit("/", 1)[-1]
    if "." in base and not base.startswith("."):
        return PathKind.FILE
    return PathKind.DIRECTORY


def parent_path(path: str) -> str:
    """Return the parent of a normalised path, or "" for top-level entries."""
    return path.rsplit("/", 1)[0] if "/" in path else ""


__all__ = ["classify_path", "normalize_path", "parent_path"]
