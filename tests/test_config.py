"""Tests for readmegen.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from readmegen.config import ReadmeGenConfig, load_config
from readmegen.errors import ConfigError


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path, environ={})

    assert isinstance(config, ReadmeGenConfig)
    assert config.root == tmp_path.resolve()
    assert config.github.token is None
    assert config.github.max_depth == 2
    assert config.github.max_items_per_dir == 100
    assert config.github.max_file_size == 1_000_000
    assert config.llm.provider == "gemini"
    assert config.llm.temperature == 0.7
    assert config.llm.max_tokens == 4096
    assert config.analysis.max_files == 50
    assert config.service.port == 5000


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / "readmegen.yml"
    config_file.write_text(
        """
github:
  token: "file-token"
  max_depth: 4
  throttle_seconds: 0
llm:
  provider: "OpenAI"
  model: "gpt-test"
  temperature: 0.2
  max_tokens: 512
  base_url: "http://localhost:8080/v1"
analysis:
  max_files: 10
  max_prompt_chars: 40000
service:
  port: 8000
  cors_origins:
    - "https://example.com"
""",
        encoding="utf-8",
    )

    config = load_config(config_file, environ={})

    assert config.github.token == "file-token"
    assert config.github.max_depth == 4
    assert config.github.throttle_seconds == 0.0
    assert config.llm.provider == "openai"
    assert config.llm.model == "gpt-test"
    assert config.llm.temperature == 0.2
    assert config.llm.max_tokens == 512
    assert config.llm.base_url == "http://localhost:8080/v1"
    assert config.analysis.max_files == 10
    assert config.analysis.max_prompt_chars == 40000
    assert config.service.port == 8000
    assert config.service.cors_origins == ["https://example.com"]


def test_environment_overrides_file(tmp_path: Path) -> None:
    (tmp_path / "readmegen.yml").write_text("github:\n  token: file-token\n", encoding="utf-8")

    config = load_config(
        tmp_path,
        environ={
            "GITHUB_TOKEN": "env-token",
            "GEMINI_API_KEY": "gemini-key",
            "READMEGEN_LLM_MODEL": "gemini-test",
            "PORT": "9000",
        },
    )

    assert config.github.token == "env-token"
    assert config.llm.api_key == "gemini-key"
    assert config.llm.model == "gemini-test"
    assert config.service.port == 9000


def test_invalid_yaml_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / "readmegen.yml").write_text("github: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path, environ={})


def test_non_mapping_root_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / "readmegen.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path, environ={})
