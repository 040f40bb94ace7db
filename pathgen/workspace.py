"""Workspace filesystem access and existing-path summaries."""

from __future__ import annotations

import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Protocol, Sequence

from .errors import FileSystemError
from .logging import get_logger
from .models import ExistingPathsSummary

_LOGGER = get_logger("workspace")


class FileSystem(Protocol):
    """Filesystem primitives the planner and generator depend on."""

    def create_directory(self, path: str) -> None:
        ...

    def exists(self, path: str) -> bool:
        ...

    def write_file(self, path: str, data: bytes) -> None:
        ...

    def list_files(self, pattern: str, exclude: Sequence[str], limit: int) -> List[str]:
        ...


def _matches(rel_path: str, pattern: str) -> bool:
    if fnmatchcase(rel_path, pattern):
        return True
    # "**/" also matches zero directories.
    return pattern.startswith("**/") and fnmatchcase(rel_path, pattern[3:])


def _excluded(rel_path: str, patterns: Sequence[str]) -> bool:
    for pattern in patterns:
        if _matches(rel_path, pattern):
            return True
        if pattern.endswith("/**") and _matches(rel_path, pattern[:-3]):
            return True
    return False


class LocalFileSystem:
    """`FileSystem` rooted at a workspace directory; paths are workspace-relative."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root).expanduser().resolve()

    def resolve(self, path: str) -> Path:
        target = (self.root / path).resolve() if path else self.root
        if target != self.root and self.root not in target.parents:
            raise FileSystemError(path, "path escapes the workspace root")
        return target

    def create_directory(self, path: str) -> None:
        target = self.resolve(path)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FileSystemError(path, exc.strerror or str(exc)) from exc

    def exists(self, path: str) -> bool:
        target = self.resolve(path)
        try:
            target.stat()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise FileSystemError(path, exc.strerror or str(exc)) from exc
        return True

    def write_file(self, path: str, data: bytes) -> None:
        target = self.resolve(path)
        try:
            target.write_bytes(data)
        except OSError as exc:
            raise FileSystemError(path, exc.strerror or str(exc)) from exc

    def list_files(self, pattern: str, exclude: Sequence[str], limit: int) -> List[str]:
        results: List[str] = []
        for rel_path in self._iter_files(exclude):
            if not _matches(rel_path, pattern):
                continue
            results.append(rel_path)
            if len(results) >= limit:
                break
        return results

    def _iter_files(self, exclude: Sequence[str]) -> Iterator[str]:
        for dirpath, dirnames, filenames in os.walk(self.root):
            current = Path(dirpath)
            rel_dir = current.relative_to(self.root).as_posix() if current != self.root else ""

            kept = []
            for name in sorted(dirnames):
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if _excluded(rel_path, exclude):
                    continue
                kept.append(name)
            dirnames[:] = kept

            for filename in sorted(filenames):
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if _excluded(rel_path, exclude):
                    continue
                yield rel_path


def summarize_workspace(
    fs: FileSystem,
    *,
    limit: int = 100,
    exclude: Sequence[str] = ("node_modules/**", "dist/**", "out/**", ".git/**"),
) -> ExistingPathsSummary:
    """Collect up to `limit` existing files and their parent directories, sorted."""
    try:
        files = fs.list_files("**/*", exclude, limit)
    except (OSError, FileSystemError) as exc:
        _LOGGER.debug("Workspace listing failed: %s", exc)
        return ExistingPathsSummary()

    directories = sorted({path.rsplit("/", 1)[0] for path in files if "/" in path})
    file_list = sorted(files)
    return ExistingPathsSummary(
        directories=directories,
        files=file_list,
        total=len(directories) + len(file_list),
    )


__all__ = ["FileSystem", "LocalFileSystem", "summarize_workspace"]
