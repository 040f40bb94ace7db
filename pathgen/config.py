"""Configuration loading for pathgen (.pathgen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .models import PathKind

CONFIG_FILENAME = ".pathgen.yml"
DEFAULT_EXCLUDES: tuple[str, ...] = ("node_modules/**", "dist/**", "out/**", ".git/**")
DEFAULT_STORE = Path(".pathgen") / "templates.json"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class LLMConfig:
    """Text-generation provider settings from .pathgen.yml."""

    model: Optional[str] = None
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    request_timeout: Optional[float] = None

    def signature(self) -> tuple[object | None, ...]:
        return (
            self.model,
            self.base_url,
            self.api_key,
            self.temperature,
            self.max_tokens,
            self.request_timeout,
        )


@dataclass
class GenerationConfig:
    """Planning and file generation defaults."""

    overwrite: bool = False
    existing_path_limit: int = 100
    kinds: List[PathKind] = field(default_factory=lambda: [PathKind.DIRECTORY, PathKind.FILE])
    exclude: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDES))


@dataclass
class PathgenConfig:
    """Represents the high-level settings defined in .pathgen.yml."""

    root: Path
    llm: Optional[LLMConfig] = None
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    template_store: Optional[Path] = None

    @property
    def store_path(self) -> Path:
        return self.template_store or (self.root / DEFAULT_STORE)


def load_config(config_path: Path) -> PathgenConfig:
    """Load configuration from disk, returning defaults when the file is missing."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return PathgenConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    llm_data = _as_dict(data.get("llm"))
    llm = None
    if llm_data:
        llm = LLMConfig(
            model=_as_str(llm_data.get("model")),
            base_url=_as_str(llm_data.get("base_url")),
            api_key=_as_str(llm_data.get("api_key")),
            temperature=_as_float(llm_data.get("temperature")),
            max_tokens=_as_int(llm_data.get("max_tokens")),
            request_timeout=_as_float(llm_data.get("request_timeout")),
        )
        if not any(llm.signature()):
            llm = None

    generation = GenerationConfig()
    generation_data = _as_dict(data.get("generation"))
    if generation_data:
        overwrite = _as_bool(generation_data.get("overwrite"))
        if overwrite is not None:
            generation.overwrite = overwrite
        limit = _as_int(generation_data.get("existing_path_limit"))
        if limit is not None and limit > 0:
            generation.existing_path_limit = limit
        if "kinds" in generation_data:
            generation.kinds = _as_kinds(generation_data.get("kinds"))
        if "exclude" in generation_data:
            generation.exclude = _as_str_list(generation_data.get("exclude"))

    templates_data = _as_dict(data.get("templates"))
    store_str = _as_str(templates_data.get("store")) if templates_data else None
    template_store = root / store_str if store_str else None

    return PathgenConfig(
        root=root,
        llm=llm,
        generation=generation,
        template_store=template_store,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


def _as_kinds(value: Any) -> List[PathKind]:
    kinds: List[PathKind] = []
    for raw in _as_str_list(value):
        lowered = raw.strip().lower()
        if lowered in {"dir", "dirs", "directory", "directories", "path", "paths"}:
            kind = PathKind.DIRECTORY
        elif lowered in {"file", "files"}:
            kind = PathKind.FILE
        else:
            raise ConfigError(f"Unknown path kind in generation.kinds: {raw!r}")
        if kind not in kinds:
            kinds.append(kind)
    if not kinds:
        raise ConfigError("generation.kinds must list at least one of: directory, file")
    return kinds


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "GenerationConfig",
    "LLMConfig",
    "PathgenConfig",
    "load_config",
]
