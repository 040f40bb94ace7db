"""Recover JSON payloads and code bodies from free-form model replies."""

from __future__ import annotations

import json
import re
from typing import Any, Optional

from ..errors import MalformedResponse

_FENCE = re.compile(r"```[a-zA-Z0-9_+-]*[ \t]*\n?(.*?)\s*```", re.DOTALL)
_MISSING = object()


def _try_parse(text: str) -> Any:
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return _MISSING


def _between_braces(text: str) -> Optional[str]:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end <= start:
        return None
    return text[start : end + 1]


def extract_json(raw: str) -> Any:
    """Parse JSON out of `raw`, trying progressively looser strategies.

    1. the whole trimmed text;
    2. the first fenced block, as-is and then between its outer braces;
    3. the whole text between its first `{` and last `}`.

    Raises `MalformedResponse` when every strategy fails.
    """
    text = raw if isinstance(raw, str) else str(raw)

    parsed = _try_parse(text.strip())
    if parsed is not _MISSING:
        return parsed

    fence = _FENCE.search(text)
    if fence:
        inside = fence.group(1).strip()
        parsed = _try_parse(inside)
        if parsed is not _MISSING:
            return parsed
        candidate = _between_braces(inside)
        if candidate is not None:
            parsed = _try_parse(candidate)
            if parsed is not _MISSING:
                return parsed

    candidate = _between_braces(text)
    if candidate is not None:
        parsed = _try_parse(candidate)
        if parsed is not _MISSING:
            return parsed

    raise MalformedResponse(text)


def extract_code(raw: str) -> Optional[str]:
    """Return the interior of the first fenced block in `raw`, if there is one."""
    fence = _FENCE.search(raw or "")
    if not fence:
        return None
    return fence.group(1)


__all__ = ["extract_code", "extract_json"]
