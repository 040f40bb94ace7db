"""Tests for pathgen.templating.resolver."""

from __future__ import annotations

from pathgen.templating.resolver import (
    answer_ai_input,
    collect_selections,
    default_selections,
    fill_choices,
    fill_placeholders,
    resolve_template,
)
from pathgen.templating.scanner import choice_tokens


def test_fill_choices_replaces_tokens_left_to_right() -> None:
    template = "Use {{lang:python,go}} with {{small,large}}"

    assert fill_choices(template, ["go", "small"]) == "Use go with small"


def test_fill_choices_blanks_tokens_without_selection() -> None:
    template = "A={{lang:python,go|go}} B={{x,y}}"

    assert fill_choices(template, ["python"]) == "A=python B="
    assert fill_choices(template, []) == "A= B="


def test_fill_choices_joins_list_selections() -> None:
    assert fill_choices("Tags: {{radio|a,b,c}}", [["a", "c"]]) == "Tags: a, c"


def test_fill_choices_leaves_simple_placeholders() -> None:
    assert fill_choices("{{name}} {{a,b}}", ["b"]) == "{{name}} b"


def test_fill_placeholders_uses_values_or_empty() -> None:
    template = "Hello {{ name }}, welcome to {{place}}. Bye {{name}}."

    assert fill_placeholders(template, {"name": "Ada"}) == "Hello Ada, welcome to . Bye Ada."


def test_resolve_template_runs_choices_then_simple() -> None:
    template = "Build a {{kind:cli,service}} called {{project}}"

    assert resolve_template(template, ["cli"], {"project": "demo"}) == "Build a cli called demo"


def test_default_selections_use_declared_defaults() -> None:
    tokens = choice_tokens("{{lang:py,go|go}} {{a,b}} {{radio|x,y|y}}")

    assert default_selections(tokens) == ["go", "", "y"]


def test_collect_selections_prefers_picks_then_ai_then_defaults() -> None:
    tokens = choice_tokens("{{lang:py,go|go}} {{ai|Name the app|fallback}} {{radio|x,y}}")
    asked: list[str] = []

    def ask(prompt: str) -> str:
        asked.append(prompt)
        return "  Orbit  "

    selections = collect_selections(tokens, {2: ["x", "y"]}, ask=ask)

    assert selections == ["go", "Orbit", "x, y"]
    assert asked == ["Name the app"]


def test_collect_selections_without_ask_uses_ai_default() -> None:
    tokens = choice_tokens("{{ai|Name the app|fallback}}")

    assert collect_selections(tokens) == ["fallback"]


def test_answer_ai_input_falls_back_to_default_on_error() -> None:
    token = choice_tokens("{{ai|Summarise|n/a}}")[0]

    def failing(prompt: str) -> str:
        raise RuntimeError("provider down")

    assert answer_ai_input(token, failing) == "n/a"  # type: ignore[arg-type]


def test_fill_placeholders_replaces_every_name() -> None:
    result = fill_placeholders("Build {{project}} with {{tool}}", {"project": "demo", "tool": "vite"})

    assert result == "Build demo with vite"


def test_full_resolution_leaves_no_placeholders() -> None:
    template = (
        "{{app}}: {{lang:py,go|go}} {{small, large}} {{radio|a,b|a}} "
        "{{ai|Describe it|thing}} by {{author}} for {{app}}"
    )
    tokens = choice_tokens(template)
    selections = ["py", "large", ["a", "b"], "gadget"]
    values = {"app": "demo", "author": "Ada"}

    result = resolve_template(template, selections[: len(tokens)], values)

    assert len(tokens) == 4
    assert "{{" not in result
    assert result == "demo: py large a, b gadget by Ada for demo"
