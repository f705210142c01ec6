"""Configuration loading for readmegen (readmegen.yml + environment)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from .errors import ConfigError

CONFIG_FILENAME = "readmegen.yml"


@dataclass
class GitHubConfig:
    """Repository host access and crawl bounds."""

    token: Optional[str] = None
    api_url: str = "https://api.github.com"
    max_depth: int = 2
    max_items_per_dir: int = 100
    max_file_size: int = 1_000_000
    max_content_bytes: int = 100_000
    request_timeout: float = 30.0
    throttle_every: int = 10
    throttle_seconds: float = 0.05


@dataclass
class LLMConfig:
    """Generative-text provider settings."""

    provider: str = "gemini"
    model: Optional[str] = None
    temperature: float = 0.7
    max_tokens: int = 4096
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    request_timeout: float = 120.0


@dataclass
class AnalysisConfig:
    """Bounds for file selection and prompt assembly."""

    max_files: int = 50
    snippet_max_lines: int = 300
    config_excerpt_chars: int = 8000
    max_prompt_chars: int = 120_000


@dataclass
class ServiceConfig:
    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: List[str] = field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"]
    )


@dataclass
class ReadmeGenConfig:
    """Represents the settings defined in readmegen.yml and the environment."""

    root: Optional[Path] = None
    github: GitHubConfig = field(default_factory=GitHubConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)


def load_config(
    config_path: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> ReadmeGenConfig:
    """Load configuration from disk, then apply environment overrides."""
    env = os.environ if environ is None else environ
    config = ReadmeGenConfig()

    if config_path is not None:
        config_file = _resolve_config_path(config_path)
        config.root = config_file.parent
        if config_file.exists():
            data = _read_config(config_file)
            if not isinstance(data, dict):
                raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")
            _apply_file(config, data)

    _apply_environment(config, env)
    return config


def _apply_file(config: ReadmeGenConfig, data: Dict[str, Any]) -> None:
    github = _as_dict(data.get("github"))
    gh = config.github
    gh.token = _as_str(github.get("token")) or gh.token
    gh.api_url = (_as_str(github.get("api_url")) or gh.api_url).rstrip("/")
    gh.max_depth = _or(_as_int(github.get("max_depth")), gh.max_depth)
    gh.max_items_per_dir = _or(_as_int(github.get("max_items_per_dir")), gh.max_items_per_dir)
    gh.max_file_size = _or(_as_int(github.get("max_file_size")), gh.max_file_size)
    gh.max_content_bytes = _or(_as_int(github.get("max_content_bytes")), gh.max_content_bytes)
    gh.request_timeout = _or(_as_float(github.get("request_timeout")), gh.request_timeout)
    gh.throttle_every = _or(_as_int(github.get("throttle_every")), gh.throttle_every)
    gh.throttle_seconds = _or(_as_float(github.get("throttle_seconds")), gh.throttle_seconds)

    llm_data = _as_dict(data.get("llm"))
    llm = config.llm
    llm.provider = (_as_str(llm_data.get("provider")) or llm.provider).lower()
    llm.model = _as_str(llm_data.get("model")) or llm.model
    llm.temperature = _or(_as_float(llm_data.get("temperature")), llm.temperature)
    llm.max_tokens = _or(_as_int(llm_data.get("max_tokens")), llm.max_tokens)
    llm.api_key = _as_str(llm_data.get("api_key")) or llm.api_key
    llm.base_url = _as_str(llm_data.get("base_url")) or llm.base_url
    llm.request_timeout = _or(_as_float(llm_data.get("request_timeout")), llm.request_timeout)

    analysis_data = _as_dict(data.get("analysis"))
    analysis = config.analysis
    analysis.max_files = _or(_as_int(analysis_data.get("max_files")), analysis.max_files)
    analysis.snippet_max_lines = _or(
        _as_int(analysis_data.get("snippet_max_lines")), analysis.snippet_max_lines
    )
    analysis.config_excerpt_chars = _or(
        _as_int(analysis_data.get("config_excerpt_chars")), analysis.config_excerpt_chars
    )
    analysis.max_prompt_chars = _or(
        _as_int(analysis_data.get("max_prompt_chars")), analysis.max_prompt_chars
    )

    service_data = _as_dict(data.get("service"))
    service = config.service
    service.host = _as_str(service_data.get("host")) or service.host
    service.port = _or(_as_int(service_data.get("port")), service.port)
    if "cors_origins" in service_data:
        service.cors_origins = _as_str_list(service_data.get("cors_origins"))


def _apply_environment(config: ReadmeGenConfig, env: Mapping[str, str]) -> None:
    token = env.get("GITHUB_TOKEN")
    if token:
        config.github.token = token
    api_key = env.get("READMEGEN_LLM_API_KEY") or env.get("GEMINI_API_KEY")
    if api_key:
        config.llm.api_key = api_key
    model = env.get("READMEGEN_LLM_MODEL")
    if model:
        config.llm.model = model
    provider = env.get("READMEGEN_LLM_PROVIDER")
    if provider:
        config.llm.provider = provider.lower()
    port = _as_int(env.get("PORT"))
    if port is not None:
        config.service.port = port


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
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


def _or(value: Any, default: Any) -> Any:
    return default if value is None else value


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


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


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "AnalysisConfig",
    "CONFIG_FILENAME",
    "GitHubConfig",
    "LLMConfig",
    "ReadmeGenConfig",
    "ServiceConfig",
    "load_config",
]
