"""Name and path analysis over every crawled entry, without fetching content."""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Iterable, List, Optional, Set

from ..models import AnalysisKind, FileAnalysis, FileEntry
from .config_files import DOCKER_FILES
from .tables import language_for

# Exact basenames (lowercased) that mark a framework.
MARKER_FILES = {
    "manage.py": "Django",
    "pom.xml": "Spring Boot",
    "gemfile": "Ruby on Rails",
    "pubspec.yaml": "Flutter",
    "angular.json": "Angular",
}

# Basename prefixes such as ``next.config.js``.
MARKER_PREFIXES = (
    ("next.config.", "Next.js"),
    ("nuxt.config.", "Nuxt.js"),
    ("vite.config.", "Vite"),
)

MARKER_SUFFIXES = {".ipynb": "Jupyter"}

_TEST_PATH = re.compile(
    r"(?:^|/)(?:tests?|__tests__|specs?)/"
    r"|(?:^|/)test_[^/]+$"
    r"|[._-](?:test|spec)\.[^/.]+$",
    re.IGNORECASE,
)
_CI_PATH = re.compile(
    r"(?:^|/)\.github/workflows/|(?:^|/)(?:\.gitlab-ci\.yml|\.travis\.yml|jenkinsfile)$",
    re.IGNORECASE,
)


def frameworks_for(path: str) -> Set[str]:
    found: Set[str] = set()
    name = PurePosixPath(path).name.lower()
    if name in MARKER_FILES:
        found.add(MARKER_FILES[name])
    found.update(label for prefix, label in MARKER_PREFIXES if name.startswith(prefix))
    suffix_label = MARKER_SUFFIXES.get(PurePosixPath(name).suffix)
    if suffix_label:
        found.add(suffix_label)
    if name in DOCKER_FILES:
        found.add("Docker")
    return found


def features_for(path: str) -> Set[str]:
    found: Set[str] = set()
    if _TEST_PATH.search(path):
        found.add("Testing Suite")
    if PurePosixPath(path).name.lower() in DOCKER_FILES:
        found.add("Containerization")
    if _CI_PATH.search(path):
        found.add("CI/CD Pipeline")
    return found


def analyze_entry(entry: FileEntry) -> Optional[FileAnalysis]:
    """Listing-kind analysis of one entry, or None when its name says nothing."""
    language = language_for(entry.name)
    frameworks = frameworks_for(entry.path)
    features = features_for(entry.path)
    if not (language or frameworks or features):
        return None
    return FileAnalysis(
        filename=entry.path,
        kind=AnalysisKind.LISTING,
        language=language,
        frameworks_detected=frozenset(frameworks),
        features_detected=frozenset(features),
        strategy="listing",
    )


def analyze_listing(entries: Iterable[FileEntry]) -> List[FileAnalysis]:
    return [analysis for analysis in map(analyze_entry, entries) if analysis is not None]


__all__ = ["MARKER_FILES", "analyze_entry", "analyze_listing", "features_for", "frameworks_for"]
