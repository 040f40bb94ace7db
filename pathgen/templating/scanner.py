"""Locate and classify `{{...}}` placeholders inside prompt templates."""

from __future__ import annotations

import re
from typing import Callable, List, Optional, Pattern, Sequence, Tuple

from ..models import (
    AiInputToken,
    AnonymousChoiceToken,
    ChoiceToken,
    NamedChoiceToken,
    RadioToken,
    SimpleToken,
    Token,
    TokenKind,
)

_NAMED_CHOICE = re.compile(
    r"\{\{\s*([\w.-]+)\s*:\s*([^}|]+(?:\s*,\s*[^}|]+)+)\s*(?:\|\s*([^}]+?))?\s*\}\}"
)
_ANONYMOUS_CHOICE = re.compile(
    r"\{\{\s*([^{}:|]+(?:\s*,\s*[^{}:|]+)+)\s*(?:\|\s*([^}]+?))?\s*\}\}"
)
_RADIO = re.compile(
    r"\{\{\s*radio\s*\|\s*([^}|]+(?:\s*,\s*[^}|]+)+)\s*(?:\|\s*([^}]+?))?\s*\}\}"
)
_AI_INPUT = re.compile(r"\{\{\s*ai\s*\|\s*([^}|]+)\s*(?:\|\s*([^}]+?))?\s*\}\}")
_SIMPLE = re.compile(r"\{\{\s*([^{}:|,]+?)\s*\}\}")

RESERVED_NAMES = frozenset({"radio", "ai"})


def _split_options(raw: str) -> Tuple[str, ...]:
    return tuple(option.strip() for option in raw.split(","))


def _clean_default(raw: Optional[str]) -> Optional[str]:
    return raw.strip() if raw is not None else None


def _named_choice(match: re.Match[str]) -> Optional[Token]:
    name, options, default = match.groups()
    return NamedChoiceToken(
        raw=match.group(0),
        start=match.start(),
        name=name,
        options=_split_options(options),
        default=_clean_default(default),
    )


def _anonymous_choice(match: re.Match[str]) -> Optional[Token]:
    options, default = match.groups()
    return AnonymousChoiceToken(
        raw=match.group(0),
        start=match.start(),
        options=_split_options(options),
        default=_clean_default(default),
    )


def _radio(match: re.Match[str]) -> Optional[Token]:
    options, default = match.groups()
    return RadioToken(
        raw=match.group(0),
        start=match.start(),
        options=_split_options(options),
        default=_clean_default(default),
    )


def _ai_input(match: re.Match[str]) -> Optional[Token]:
    prompt, default = match.groups()
    return AiInputToken(
        raw=match.group(0),
        start=match.start(),
        prompt=prompt.strip(),
        default=_clean_default(default),
    )


def _simple(match: re.Match[str]) -> Optional[Token]:
    name = match.group(1).strip()
    if not name or name in RESERVED_NAMES:
        return None
    return SimpleToken(raw=match.group(0), start=match.start(), name=name)


# Highest precedence first. A later grammar never claims text already covered.
_GRAMMARS: Sequence[Tuple[Pattern[str], Callable[[re.Match[str]], Optional[Token]]]] = (
    (_NAMED_CHOICE, _named_choice),
    (_ANONYMOUS_CHOICE, _anonymous_choice),
    (_RADIO, _radio),
    (_AI_INPUT, _ai_input),
    (_SIMPLE, _simple),
)


def scan(template: str) -> List[Token]:
    """Return every placeholder in `template`, ordered by first occurrence.

    Grammars are tried in precedence order (named choice, anonymous choice,
    radio, AI input, simple). A candidate whose span overlaps a token accepted
    earlier, from any grammar, is discarded.
    """
    accepted: List[Token] = []
    for pattern, build in _GRAMMARS:
        for match in pattern.finditer(template):
            start, end = match.span()
            if any(start < token.end and token.start < end for token in accepted):
                continue
            token = build(match)
            if token is not None:
                accepted.append(token)
    accepted.sort(key=lambda token: token.start)
    return accepted


def choice_tokens(template: str) -> List[ChoiceToken]:
    """Return the non-simple tokens (choice, radio, AI input) in source order."""
    return [token for token in scan(template) if token.kind is not TokenKind.SIMPLE]  # type: ignore[misc]


def parse_placeholders(template: str) -> List[str]:
    """Return the unique simple placeholder names in first-occurrence order."""
    seen: List[str] = []
    for token in scan(template):
        if isinstance(token, SimpleToken) and token.name not in seen:
            seen.append(token.name)
    return seen


__all__ = ["RESERVED_NAMES", "choice_tokens", "parse_placeholders", "scan"]
