"""Turn parsed model output into a deduplicated, kind-tagged path plan."""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from ..errors import InvalidPath
from ..logging import get_logger
from ..models import PathKind, PathPlanItem
from .paths import classify_path, normalize_path

_LOGGER = get_logger("planning")


def _candidate_lists(parsed: Any) -> Tuple[Sequence[Any], Sequence[Any]]:
    if isinstance(parsed, list):
        return parsed, []
    if isinstance(parsed, Mapping):
        paths = parsed.get("paths")
        files = parsed.get("files")
        return (
            paths if isinstance(paths, list) else [],
            files if isinstance(files, list) else [],
        )
    return [], []


def build_plan(parsed: Any) -> List[PathPlanItem]:
    """Build plan items from a bare list or a `{"paths": [...], "files": [...]}` mapping.

    Entries under `paths` (or a bare list) are classified from their name;
    entries under `files` are always files. Invalid and duplicate candidates are
    dropped, and the first classification of a path wins.
    """
    path_candidates, file_candidates = _candidate_lists(parsed)
    seen: Set[str] = set()
    items: List[PathPlanItem] = []

    def accept(raw: Any, forced: Optional[PathKind]) -> None:
        if not isinstance(raw, str):
            return
        try:
            normalized = normalize_path(raw)
        except InvalidPath as exc:
            _LOGGER.debug("Dropping plan candidate: %s", exc)
            return
        if normalized in seen:
            return
        seen.add(normalized)
        kind = forced or classify_path(normalized)
        content = "" if kind is PathKind.FILE else None
        items.append(PathPlanItem(path=normalized, kind=kind, content=content))

    for raw in path_candidates:
        accept(raw, None)
    for raw in file_candidates:
        accept(raw, PathKind.FILE)
    return items


def filter_plan(items: Iterable[PathPlanItem], kinds: Iterable[PathKind]) -> List[PathPlanItem]:
    """Keep only plan items of the requested kinds."""
    wanted = set(kinds)
    return [item for item in items if item.kind in wanted]


def dedupe_paths(paths: Iterable[str]) -> List[str]:
    """Normalise user-adjusted paths and drop repeats, keeping first occurrences.

    Unlike plan building, an invalid path here raises `InvalidPath` because the
    user typed it and should be told.
    """
    result: List[str] = []
    for raw in paths:
        normalized = normalize_path(raw.strip())
        if normalized not in result:
            result.append(normalized)
    return result


__all__ = ["build_plan", "dedupe_paths", "filter_plan"]
