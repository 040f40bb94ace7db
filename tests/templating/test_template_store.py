"""Tests for pathgen.templating.store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from pathgen.errors import TemplateStoreError
from pathgen.templating.store import TemplateStore


def _store(tmp_path: Path) -> TemplateStore:
    return TemplateStore(tmp_path / ".pathgen" / "templates.json")


def test_create_persists_and_reloads(tmp_path: Path) -> None:
    store = _store(tmp_path)
    created = store.create("  React app ", "Build {{name}}", "  frontend ")

    assert created.name == "React app"
    assert created.description == "frontend"
    assert created.created_at == created.updated_at

    reloaded = _store(tmp_path)
    assert [template.id for template in reloaded.list()] == [created.id]
    payload = json.loads(store.path.read_text(encoding="utf-8"))
    assert payload["version"] == 1
    assert payload["templates"][0]["content"] == "Build {{name}}"


def test_create_rejects_blank_and_duplicate_names(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.create("API", "content")

    with pytest.raises(TemplateStoreError, match="Name is required"):
        store.create("   ", "content")
    with pytest.raises(TemplateStoreError, match="already exists"):
        store.create("api", "other")
    with pytest.raises(TemplateStoreError, match="content is required"):
        store.create("Other", "  \n")


def test_get_by_id_or_name(tmp_path: Path) -> None:
    store = _store(tmp_path)
    created = store.create("Service", "content")

    assert store.get(created.id) == created
    assert store.get("SERVICE") == created
    with pytest.raises(TemplateStoreError, match="Template not found"):
        store.get("missing")


def test_update_changes_fields_and_keeps_name_unique(tmp_path: Path) -> None:
    store = _store(tmp_path)
    first = store.create("First", "one")
    store.create("Second", "two")

    updated = store.update(first.id, description="desc", content="uno")
    assert updated.description == "desc"
    assert updated.content == "uno"
    assert updated.name == "First"

    # Renaming to its own name with different case is allowed.
    assert store.update("first", name="FIRST").name == "FIRST"
    with pytest.raises(TemplateStoreError, match="already exists"):
        store.update("FIRST", name="second")


def test_delete_duplicate_and_search(tmp_path: Path) -> None:
    store = _store(tmp_path)
    original = store.create("CLI tool", "Write a command line tool", "argparse based")

    copy = store.duplicate(original.id)
    assert copy.name == "CLI tool (Copy)"
    assert copy.content == original.content
    assert copy.id != original.id

    assert [template.id for template in store.search("ARGPARSE")] == [original.id, copy.id]
    assert store.search("   ") == []

    deleted = store.delete([copy.id])
    assert [template.id for template in deleted] == [copy.id]
    assert [template.id for template in _store(tmp_path).list()] == [original.id]


def test_preview_truncates_long_content(tmp_path: Path) -> None:
    template = _store(tmp_path).create("Long", "x" * 250)

    assert template.preview() == "x" * 200 + "..."
    assert template.preview(300) == "x" * 250


def test_corrupt_store_raises(tmp_path: Path) -> None:
    path = tmp_path / "templates.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(TemplateStoreError):
        TemplateStore(path)


def test_unknown_version_is_ignored(tmp_path: Path) -> None:
    path = tmp_path / "templates.json"
    path.write_text(json.dumps({"version": 99, "templates": []}), encoding="utf-8")

    assert TemplateStore(path).list() == []
