"""Tests for pathgen.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from pathgen.config import ConfigError, GenerationConfig, LLMConfig, PathgenConfig, load_config
from pathgen.models import PathKind


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, PathgenConfig)
    assert config.root == tmp_path.resolve()
    assert config.llm is None
    assert config.generation == GenerationConfig()
    assert config.generation.kinds == [PathKind.DIRECTORY, PathKind.FILE]
    assert config.generation.exclude == ["node_modules/**", "dist/**", "out/**", ".git/**"]
    assert config.template_store is None
    assert config.store_path == tmp_path.resolve() / ".pathgen" / "templates.json"


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".pathgen.yml"
    config_file.write_text(
        """
llm:
  model: "gpt-4.1-mini"
  temperature: 0.15
  max_tokens: 256
  base_url: "http://localhost:12434/engines/v1"
  api_key: "test-key"
  request_timeout: 60
generation:
  overwrite: yes
  existing_path_limit: 50
  kinds: [files]
  exclude:
    - "vendor/**"
templates:
  store: "prompts/templates.json"
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert isinstance(config.llm, LLMConfig)
    assert config.llm.model == "gpt-4.1-mini"
    assert config.llm.temperature == pytest.approx(0.15)
    assert config.llm.max_tokens == 256
    assert config.llm.base_url == "http://localhost:12434/engines/v1"
    assert config.llm.api_key == "test-key"
    assert config.llm.request_timeout == pytest.approx(60.0)

    assert config.generation.overwrite is True
    assert config.generation.existing_path_limit == 50
    assert config.generation.kinds == [PathKind.FILE]
    assert config.generation.exclude == ["vendor/**"]
    assert config.store_path == tmp_path.resolve() / "prompts" / "templates.json"


def test_load_config_accepts_directory_or_file(tmp_path: Path) -> None:
    (tmp_path / ".pathgen.yml").write_text("llm:\n  model: local\n", encoding="utf-8")

    assert load_config(tmp_path).llm == load_config(tmp_path / ".pathgen.yml").llm


def test_empty_llm_section_yields_no_llm_config(tmp_path: Path) -> None:
    (tmp_path / ".pathgen.yml").write_text("llm:\n  unknown: 1\n", encoding="utf-8")

    assert load_config(tmp_path).llm is None


def test_invalid_yaml_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / ".pathgen.yml").write_text("llm: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)


def test_non_mapping_root_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / ".pathgen.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="mapping"):
        load_config(tmp_path)


def test_unknown_kind_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / ".pathgen.yml").write_text("generation:\n  kinds: [symlinks]\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Unknown path kind"):
        load_config(tmp_path)


def test_signature_tracks_every_llm_setting() -> None:
    assert LLMConfig(model="a").signature() != LLMConfig(model="a", api_key="k").signature()
    assert LLMConfig(model="a").signature() == LLMConfig(model="a").signature()
