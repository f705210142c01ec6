"""Configuration-kind analysis for manifests, container files and env examples."""

from __future__ import annotations

import json
import re
import tomllib
from pathlib import PurePosixPath
from typing import Any, Dict, Iterable, List, Set

from ..logging import get_logger
from ..models import AnalysisKind, FileAnalysis, ImportRef
from .base import CodeAnalyzer
from .snippets import CONFIG_FILENAMES
from .tables import detect_features, detect_frameworks, language_for, unique

DEFAULT_EXCERPT_CHARS = 8000

DOCKER_FILES = frozenset(
    {"dockerfile", "docker-compose.yml", "docker-compose.yaml", "compose.yml", "compose.yaml"}
)

# package.json script names -> feature label
_SCRIPT_FEATURES = (
    ("test", "Testing Suite"),
    ("docker", "Containerization"),
    ("build", "Build Pipeline"),
)

_REQUIREMENT_NAME = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)")

_LOGGER = get_logger("analyzers.config")


def is_config_file(filename: str) -> bool:
    return PurePosixPath(filename).name.lower() in CONFIG_FILENAMES


class ConfigFileAnalyzer(CodeAnalyzer):
    """Keeps a head-truncated excerpt and reads declared dependencies."""

    name = "config"

    def __init__(self, *args, excerpt_chars: int = DEFAULT_EXCERPT_CHARS, **kwargs) -> None:  # type: ignore[no-untyped-def]
        super().__init__(*args, **kwargs)
        self.excerpt_chars = excerpt_chars

    def analyze(self, text: str, filename: str) -> FileAnalysis:
        basename = PurePosixPath(filename).name.lower()
        features: Set[str] = set()
        if basename == "package.json":
            dependencies, scripts = _package_json(text, filename)
            features.update(_script_features(scripts))
        elif basename == "requirements.txt":
            dependencies = _requirements(text)
        elif basename == "pyproject.toml":
            dependencies = _pyproject(text, filename)
        else:
            dependencies = []

        frameworks = detect_frameworks(dependencies)
        features.update(detect_features(dependencies))
        if basename in DOCKER_FILES:
            frameworks.add("Docker")
            features.add("Containerization")

        return FileAnalysis(
            filename=filename,
            kind=AnalysisKind.CONFIG,
            language=language_for(filename),
            imports=tuple(ImportRef(source=name) for name in dependencies),
            frameworks_detected=frozenset(frameworks),
            features_detected=frozenset(features),
            code_excerpt=text[: self.excerpt_chars],
            strategy=self.name,
        )


def _package_json(text: str, filename: str) -> tuple[List[str], List[str]]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        _LOGGER.debug("Unreadable %s: %s", filename, exc)
        return [], []
    if not isinstance(data, dict):
        return [], []

    def _keys(key: str) -> List[str]:
        value = data.get(key)
        return list(value.keys()) if isinstance(value, dict) else []

    return unique(_keys("dependencies") + _keys("devDependencies")), _keys("scripts")


def _script_features(scripts: Iterable[str]) -> Set[str]:
    found: Set[str] = set()
    for script in scripts:
        lowered = script.lower()
        for fragment, label in _SCRIPT_FEATURES:
            if fragment in lowered:
                found.add(label)
    return found


def _requirements(text: str) -> List[str]:
    packages: List[str] = []
    for line in text.splitlines():
        stripped = line.split("#", 1)[0].strip()
        if not stripped or stripped.startswith(("-", "git+", "http:", "https:")):
            continue
        match = _REQUIREMENT_NAME.match(stripped)
        if match:
            packages.append(match.group(1))
    return unique(packages)


def _pyproject(text: str, filename: str) -> List[str]:
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        _LOGGER.debug("Unreadable %s: %s", filename, exc)
        return []

    declared: List[Any] = []
    project = data.get("project")
    if isinstance(project, dict):
        declared.extend(project.get("dependencies", []) or [])
        optional = project.get("optional-dependencies", {}) or {}
        if isinstance(optional, dict):
            for values in optional.values():
                declared.extend(values or [])

    tool = data.get("tool")
    poetry: Dict[str, Any] = tool.get("poetry", {}) if isinstance(tool, dict) else {}
    if isinstance(poetry, dict):
        for key in ("dependencies", "dev-dependencies"):
            section = poetry.get(key)
            if isinstance(section, dict):
                declared.extend(section.keys())

    packages: List[str] = []
    for dep in declared:
        if not isinstance(dep, str):
            continue
        match = _REQUIREMENT_NAME.match(dep)
        if match and match.group(1).lower() != "python":
            packages.append(match.group(1))
    return unique(packages)


__all__ = ["ConfigFileAnalyzer", "DEFAULT_EXCERPT_CHARS", "DOCKER_FILES", "is_config_file"]
