"""Tests for the FastAPI service mode."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from pathgen.errors import ProviderError
from pathgen.orchestrator import Orchestrator
from pathgen.service import create_app
from pathgen.service.app import _default_orchestrator


class _PlanRunner:
    def __init__(self, plan: dict[str, list[str]] | None) -> None:
        self.plan = plan

    def run(self, prompt: str, *, system: str | None = None, json_mode: bool = False) -> str:
        if json_mode:
            if self.plan is None:
                raise ProviderError("provider down")
            return json.dumps(self.plan)
        return "```python\nVALUE = 1\n```"


def _client(plan: dict[str, list[str]] | None) -> TestClient:
    runner = _PlanRunner(plan)
    return TestClient(create_app(lambda: Orchestrator(runner)))  # type: ignore[arg-type]


@pytest.fixture
def client() -> TestClient:
    return _client({"paths": ["pkg"], "files": ["pkg/__init__.py", "pkg/core.py"]})


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_scan_endpoint_lists_tokens(client: TestClient) -> None:
    response = client.post("/scan", json={"template": "{{name}} {{lang:py,go|go}} {{ai|Why?}}"})

    assert response.status_code == 200
    data = response.json()
    assert data["placeholders"] == ["name"]
    assert [token["kind"] for token in data["tokens"]] == ["simple", "named_choice", "ai_input"]
    named = data["tokens"][1]
    assert named["name"] == "lang"
    assert named["options"] == ["py", "go"]
    assert named["default"] == "go"
    assert named["start"] == 9
    assert data["tokens"][2]["prompt"] == "Why?"


def test_resolve_endpoint_applies_selections_and_values(client: TestClient) -> None:
    response = client.post(
        "/resolve",
        json={
            "template": "{{who}} likes {{radio|tea,coffee}} and {{x,y|y}}",
            "selections": {"0": ["tea", "coffee"]},
            "values": {"who": "Ada"},
        },
    )

    assert response.status_code == 200
    assert response.json() == {"prompt": "Ada likes tea, coffee and y"}


def test_plan_endpoint_previews_by_default(client: TestClient, tmp_path: Path) -> None:
    response = client.post("/plan", json={"path": str(tmp_path), "instructions": "a package"})

    assert response.status_code == 200
    data = response.json()
    assert data["fallback"] is False
    assert data["items"] == [
        {"path": "pkg", "kind": "directory"},
        {"path": "pkg/__init__.py", "kind": "file"},
        {"path": "pkg/core.py", "kind": "file"},
    ]
    assert data["created"] == []
    assert not (tmp_path / "pkg").exists()


def test_plan_endpoint_creates_selected_paths(client: TestClient, tmp_path: Path) -> None:
    response = client.post(
        "/plan",
        json={
            "path": str(tmp_path),
            "instructions": "a package",
            "create": True,
            "paths": ["pkg", "pkg/core.py"],
        },
    )

    assert response.status_code == 200
    assert response.json()["created"] == ["pkg", "pkg/core.py"]
    assert (tmp_path / "pkg" / "core.py").exists()
    assert not (tmp_path / "pkg" / "__init__.py").exists()


def test_plan_endpoint_reports_fallback(tmp_path: Path) -> None:
    response = _client(None).post(
        "/plan", json={"path": str(tmp_path), "instructions": "x", "kinds": ["directory"]}
    )

    data = response.json()
    assert data["fallback"] is True
    assert data["reason"] == "provider down"
    assert len(data["items"]) == 5


def test_generate_endpoint_writes_files(client: TestClient, tmp_path: Path) -> None:
    response = client.post(
        "/generate",
        json={"path": str(tmp_path), "template": "Package {{name}}", "values": {"name": "core"}},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["prompt"] == "Package core"
    assert data["created"] == ["pkg/__init__.py", "pkg/core.py"]
    assert data["summary"] == "created 2"
    assert data["plan_fallback"] is False
    assert (tmp_path / "pkg" / "core.py").read_text(encoding="utf-8") == "VALUE = 1"


def test_generate_endpoint_uses_explicit_paths_without_planned_files(tmp_path: Path) -> None:
    response = _client({"paths": ["src"]}).post(
        "/generate",
        json={"path": str(tmp_path), "template": "x", "paths": ["src/app.py"]},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["targets"] == ["src/app.py"]
    assert data["created"] == ["src/app.py"]
    assert (tmp_path / "src" / "app.py").read_text(encoding="utf-8") == "VALUE = 1"


def test_generate_endpoint_rejects_escaping_paths(client: TestClient, tmp_path: Path) -> None:
    response = client.post(
        "/generate",
        json={"path": str(tmp_path), "template": "x", "paths": ["../escape.py"]},
    )

    assert response.status_code == 400
    assert "Parent directory references not allowed" in response.json()["detail"]


def test_plan_endpoint_rejects_blank_instructions(client: TestClient, tmp_path: Path) -> None:
    response = client.post("/plan", json={"path": str(tmp_path), "instructions": "  "})

    assert response.status_code == 400
    assert response.json() == {"detail": "No instructions provided"}


def test_default_orchestrators_reuse_one_provider_registry() -> None:
    assert _default_orchestrator().providers is _default_orchestrator().providers
