"""Persistent store for reusable prompt templates."""

from __future__ import annotations

import json
import secrets
from dataclasses import asdict, dataclass, replace
from datetime import UTC, datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..errors import TemplateStoreError
from ..logging import get_logger

_STORE_VERSION = 1
_PREVIEW_LENGTH = 200


@dataclass(frozen=True)
class PromptTemplate:
    """A named prompt template that may contain placeholders."""

    id: str
    name: str
    description: str
    content: str
    created_at: str
    updated_at: str

    def preview(self, length: int = _PREVIEW_LENGTH) -> str:
        if len(self.content) > length:
            return f"{self.content[:length]}..."
        return self.content


def _now() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def _create_id() -> str:
    stamp = format(int(datetime.now(UTC).timestamp() * 1000), "x")
    return f"{stamp}-{secrets.token_hex(4)}"


class TemplateStore:
    """JSON-file backed CRUD over prompt templates.

    Names are unique case-insensitively. Every mutating call persists
    immediately so separate CLI invocations see each other's changes.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._templates: List[PromptTemplate] = []
        self.logger = get_logger("templates")
        self._load(path)

    @property
    def path(self) -> Path:
        return self._path

    def list(self) -> List[PromptTemplate]:
        return list(self._templates)

    def get(self, key: str) -> PromptTemplate:
        """Return a template by id, or by case-insensitive name."""
        for template in self._templates:
            if template.id == key:
                return template
        lowered = key.strip().lower()
        for template in self._templates:
            if template.name.lower() == lowered:
                return template
        raise TemplateStoreError(f"Template not found: {key}")

    def create(self, name: str, content: str, description: str = "") -> PromptTemplate:
        cleaned_name = self._validate_name(name)
        self._validate_content(content)
        now = _now()
        template = PromptTemplate(
            id=_create_id(),
            name=cleaned_name,
            description=description.strip(),
            content=content,
            created_at=now,
            updated_at=now,
        )
        self._templates.append(template)
        self._persist()
        self.logger.info("Saved template %r", template.name)
        return template

    def update(
        self,
        key: str,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        content: Optional[str] = None,
    ) -> PromptTemplate:
        current = self.get(key)
        changes: Dict[str, str] = {}
        if name is not None:
            changes["name"] = self._validate_name(name, ignore_id=current.id)
        if description is not None:
            changes["description"] = description.strip()
        if content is not None:
            self._validate_content(content)
            changes["content"] = content
        updated = replace(current, updated_at=_now(), **changes)
        self._templates = [updated if item.id == current.id else item for item in self._templates]
        self._persist()
        self.logger.info("Updated template %r", updated.name)
        return updated

    def delete(self, keys: Iterable[str]) -> List[PromptTemplate]:
        targets = [self.get(key) for key in keys]
        ids = {template.id for template in targets}
        if not ids:
            return []
        self._templates = [item for item in self._templates if item.id not in ids]
        self._persist()
        self.logger.info("Deleted %d template(s)", len(ids))
        return targets

    def duplicate(self, key: str, name: Optional[str] = None) -> PromptTemplate:
        source = self.get(key)
        new_name = name if name is not None else f"{source.name} (Copy)"
        return self.create(new_name, source.content, source.description)

    def search(self, term: str) -> List[PromptTemplate]:
        """Case-insensitive match against name, description and content."""
        lowered = term.strip().lower()
        if not lowered:
            return []
        return [
            template
            for template in self._templates
            if lowered in template.name.lower()
            or lowered in template.description.lower()
            or lowered in template.content.lower()
        ]

    # ------------------------------------------------------------------
    # Internal helpers

    def _validate_name(self, name: str, *, ignore_id: Optional[str] = None) -> str:
        cleaned = name.strip()
        if not cleaned:
            raise TemplateStoreError("Name is required")
        lowered = cleaned.lower()
        for template in self._templates:
            if template.id != ignore_id and template.name.lower() == lowered:
                raise TemplateStoreError("A template with this name already exists")
        return cleaned

    @staticmethod
    def _validate_content(content: str) -> None:
        if not content.strip():
            raise TemplateStoreError("Prompt template content is required")

    def _persist(self) -> None:
        payload = {
            "version": _STORE_VERSION,
            "templates": [asdict(template) for template in self._templates],
        }
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as exc:
            raise TemplateStoreError(f"Unable to write template store {self._path}: {exc}") from exc

    def _load(self, path: Path) -> None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return
        except (OSError, json.JSONDecodeError) as exc:
            raise TemplateStoreError(f"Unable to read template store {path}: {exc}") from exc
        if not isinstance(data, dict) or data.get("version") != _STORE_VERSION:
            self.logger.warning("Ignoring template store with unknown format: %s", path)
            return
        entries = data.get("templates")
        if not isinstance(entries, list):
            return
        for raw in entries:
            template = _template_from_dict(raw)
            if template is not None:
                self._templates.append(template)


def _template_from_dict(payload: object) -> Optional[PromptTemplate]:
    if not isinstance(payload, dict):
        return None
    fields = ("id", "name", "description", "content", "created_at", "updated_at")
    values = {name: payload.get(name) for name in fields}
    if not all(isinstance(value, str) for value in values.values()):
        return None
    return PromptTemplate(**values)  # type: ignore[arg-type]


__all__ = ["PromptTemplate", "TemplateStore"]
