"""Prompt template scanning, resolution and storage."""

from .resolver import (
    collect_selections,
    default_selections,
    fill_choices,
    fill_placeholders,
    resolve_template,
)
from .scanner import choice_tokens, parse_placeholders, scan
from .store import PromptTemplate, TemplateStore

__all__ = [
    "PromptTemplate",
    "TemplateStore",
    "choice_tokens",
    "collect_selections",
    "default_selections",
    "fill_choices",
    "fill_placeholders",
    "parse_placeholders",
    "resolve_template",
    "scan",
]
