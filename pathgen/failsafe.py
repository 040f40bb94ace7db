"""Deterministic substitutes used when a provider call fails."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Dict, List

FALLBACK_PLAN: Dict[str, List[str]] = {
    "paths": [
        "src/components",
        "src/utils",
        "src/hooks",
        "src/styles",
        "src/assets",
    ],
    "files": [
        "src/components/Button.jsx",
        "src/components/Header.jsx",
        "src/components/Footer.jsx",
        "src/utils/helpers.js",
        "src/utils/constants.js",
        "src/hooks/useLocalStorage.js",
        "src/hooks/useApi.js",
        "src/styles/global.css",
        "src/styles/components.css",
    ],
}

_PROMPT_EXCERPT = 120
_LABEL_LENGTH = 40

_HASH_COMMENT_SUFFIXES = {
    ".py",
    ".sh",
    ".bash",
    ".rb",
    ".yml",
    ".yaml",
    ".toml",
    ".cfg",
    ".ini",
    ".r",
    ".pl",
    ".ps1",
    ".dockerfile",
    ".env",
    ".txt",
}
_HTML_COMMENT_SUFFIXES = {".html", ".htm", ".xml", ".md", ".vue", ".svg"}
_BLOCK_COMMENT_SUFFIXES = {".css", ".scss", ".less"}


def fallback_plan() -> Dict[str, List[str]]:
    """Return a fresh copy of the static plan used when planning fails."""
    return {key: list(values) for key, values in FALLBACK_PLAN.items()}


def template_label(prompt: str) -> str:
    """Short label for a resolved prompt: its first line, truncated."""
    first_line = prompt.split("\n", 1)[0]
    return first_line[:_LABEL_LENGTH] or "prompt"


def fallback_content(path: str, prompt: str) -> str:
    """Return a comment header naming `path` and an excerpt of `prompt`."""
    # Newlines in the excerpt would escape single-line comment syntax.
    snippet = " ".join(prompt[:_PROMPT_EXCERPT].split())
    lines = [
        f"Generated fallback for {path}",
        f"Template: {template_label(prompt)}",
        f"Prompt snippet: {snippet}...",
    ]
    suffix = PurePosixPath(path).suffix.lower()
    if suffix in _HASH_COMMENT_SUFFIXES:
        header = "\n".join(f"# {line}" for line in lines)
    elif suffix in _HTML_COMMENT_SUFFIXES:
        header = "\n".join(f"<!-- {line} -->" for line in lines)
    elif suffix in _BLOCK_COMMENT_SUFFIXES:
        header = "\n".join(f"/* {line} */" for line in lines)
    else:
        header = "\n".join(f"// {line}" for line in lines)
    return f"{header}\n\n"


__all__ = ["FALLBACK_PLAN", "fallback_content", "fallback_plan", "template_label"]
