"""Replace scanned placeholders with caller-supplied values."""

from __future__ import annotations

from typing import Callable, List, Mapping, Optional, Sequence, Union

from ..logging import get_logger
from ..models import AiInputToken, ChoiceToken, SimpleToken, Token
from .scanner import choice_tokens, scan

Selection = Union[str, Sequence[str], None]

AI_INPUT_SYSTEM_PROMPT = (
    "You are an assistant that answers questions and drafts content exactly as requested. "
    "Reply with the requested text only."
)

_LOGGER = get_logger("templating")


def _render_selection(selection: Selection) -> str:
    if selection is None:
        return ""
    if isinstance(selection, str):
        return selection
    return ", ".join(str(item) for item in selection)


def _substitute(template: str, tokens: Sequence[Token], replacements: Sequence[str]) -> str:
    parts: List[str] = []
    cursor = 0
    for token, replacement in zip(tokens, replacements):
        parts.append(template[cursor:token.start])
        parts.append(replacement)
        cursor = token.end
    parts.append(template[cursor:])
    return "".join(parts)


def fill_choices(template: str, selections: Sequence[Selection]) -> str:
    """Replace choice, radio and AI-input tokens left to right with `selections`.

    Tokens without a matching selection become empty strings; their declared
    defaults are not applied here. A selection may be a list of picks, which is
    joined with ", ".
    """
    tokens = choice_tokens(template)
    replacements = [
        _render_selection(selections[index]) if index < len(selections) else ""
        for index in range(len(tokens))
    ]
    return _substitute(template, tokens, replacements)


def fill_placeholders(template: str, values: Mapping[str, object]) -> str:
    """Replace every `{{name}}` with `values[name]`, or an empty string when absent."""
    tokens = [token for token in scan(template) if isinstance(token, SimpleToken)]
    replacements = [str(values[token.name]) if token.name in values else "" for token in tokens]
    return _substitute(template, tokens, replacements)


def resolve_template(
    template: str,
    selections: Sequence[Selection],
    values: Mapping[str, object],
) -> str:
    """Run the choice filler, then the simple filler."""
    return fill_placeholders(fill_choices(template, selections), values)


def default_selections(tokens: Sequence[ChoiceToken]) -> List[str]:
    return [token.default or "" for token in tokens]


def collect_selections(
    tokens: Sequence[ChoiceToken],
    picks: Mapping[int, Selection] | None = None,
    *,
    ask: Optional[Callable[[str], str]] = None,
) -> List[str]:
    """Merge explicit picks, AI-input answers and defaults into one selection per token.

    An explicit non-empty pick always wins. Otherwise AI-input tokens are
    answered through `ask` when it is given, and every other token falls back to
    its default.
    """
    picks = picks or {}
    selections = default_selections(tokens)
    for index, token in enumerate(tokens):
        rendered = _render_selection(picks.get(index))
        if rendered:
            selections[index] = rendered
        elif isinstance(token, AiInputToken) and ask is not None:
            selections[index] = answer_ai_input(token, ask)
    return selections


def answer_ai_input(token: AiInputToken, ask: Callable[[str], str]) -> str:
    """Ask the provider for an AI-input token value, falling back to its default."""
    try:
        answer = ask(token.prompt)
    except Exception as exc:
        _LOGGER.warning("AI input request failed for %r: %s", token.prompt, exc)
        return token.default or ""
    answer = (answer or "").strip()
    return answer or token.default or ""


__all__ = [
    "AI_INPUT_SYSTEM_PROMPT",
    "answer_ai_input",
    "collect_selections",
    "default_selections",
    "fill_choices",
    "fill_placeholders",
    "resolve_template",
]
