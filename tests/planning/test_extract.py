"""Tests for pathgen.planning.extract."""

from __future__ import annotations

import pytest

from pathgen.errors import MalformedResponse
from pathgen.planning.extract import extract_code, extract_json


def test_extract_json_parses_plain_text() -> None:
    assert extract_json('  {"paths": ["src"]}  ') == {"paths": ["src"]}


def test_extract_json_reads_fenced_block() -> None:
    raw = 'Here is the plan:\n```json\n{"files": ["a.py"]}\n```\nEnjoy!'

    assert extract_json(raw) == {"files": ["a.py"]}


def test_extract_json_trims_chatter_inside_fence() -> None:
    raw = '```\nPlan follows {"paths": ["lib"]} as requested\n```'

    assert extract_json(raw) == {"paths": ["lib"]}


def test_extract_json_falls_back_to_outer_braces() -> None:
    raw = 'Sure! {"paths": ["src", "tests"]} Let me know if you need more.'

    assert extract_json(raw) == {"paths": ["src", "tests"]}


def test_extract_json_accepts_falsy_documents() -> None:
    assert extract_json("0") == 0
    assert extract_json("null") is None
    assert extract_json("[]") == []


def test_extract_json_raises_with_excerpt() -> None:
    with pytest.raises(MalformedResponse, match="Invalid JSON response: I cannot help"):
        extract_json("I cannot help with that.")


def test_extract_json_survives_deeply_nested_noise() -> None:
    raw = "[" * 100000 + '\n```json\n{"files": ["a.py"]}\n```'

    assert extract_json(raw) == {"files": ["a.py"]}

    with pytest.raises(MalformedResponse):
        extract_json("[" * 100000)


def test_extract_code_returns_first_fence_interior() -> None:
    raw = "Intro\n```python\nprint('hi')\n```\n```js\nalert(1)\n```"

    assert extract_code(raw) == "print('hi')"


def test_extract_code_without_fence() -> None:
    assert extract_code("plain text") is None


def test_extract_json_minimal_cases() -> None:
    assert extract_json('```json\n{"paths":["src"]}\n```') == {"paths": ["src"]}
    with pytest.raises(MalformedResponse):
        extract_json("no json here")
