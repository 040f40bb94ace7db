"""Error taxonomy shared across pathgen stages."""

from __future__ import annotations


class PathgenError(RuntimeError):
    """Base class for errors raised by pathgen."""


class MalformedResponse(PathgenError):
    """Raised when no extraction strategy yields valid JSON."""

    def __init__(self, text: str) -> None:
        excerpt = " ".join(text.split())[:200]
        super().__init__(f"Invalid JSON response: {excerpt}")
        self.text = text


class InvalidPath(PathgenError, ValueError):
    """Raised for absolute, traversal-escaping or empty candidate paths."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{reason}: {path!r}")
        self.path = path
        self.reason = reason


class FileSystemError(PathgenError):
    """Raised when creating, checking or writing a path fails."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class ContentGenerationError(PathgenError):
    """Raised when a per-file content request fails."""


class ProviderError(PathgenError):
    """Raised when the text-generation provider is misconfigured or unreachable."""


class TemplateStoreError(PathgenError):
    """Raised for invalid prompt template store operations."""


__all__ = [
    "ContentGenerationError",
    "FileSystemError",
    "InvalidPath",
    "MalformedResponse",
    "PathgenError",
    "ProviderError",
    "TemplateStoreError",
]
