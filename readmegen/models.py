"""Core data models shared across readmegen components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple


@dataclass(frozen=True)
class RepoRef:
    """Normalized (owner, repo) pair identifying a remote repository."""

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class RepoMetadata:
    """Repository facts supplied by the access-check layer."""

    full_name: str
    description: Optional[str] = None
    language: Optional[str] = None
    stars: int = 0
    forks: int = 0
    private: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    html_url: Optional[str] = None

    @classmethod
    def from_github(cls, payload: Mapping[str, Any]) -> "RepoMetadata":
        """Build metadata from a GitHub `/repos/{owner}/{repo}` payload."""
        return cls(
            full_name=str(payload.get("full_name") or payload.get("name") or ""),
            description=payload.get("description") or None,
            language=payload.get("language") or None,
            stars=int(payload.get("stargazers_count") or 0),
            forks=int(payload.get("forks_count") or 0),
            private=bool(payload.get("private", False)),
            created_at=payload.get("created_at") or None,
            updated_at=payload.get("updated_at") or None,
            html_url=payload.get("html_url") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.full_name,
            "description": self.description,
            "language": self.language,
            "stars": self.stars,
            "forks": self.forks,
            "private": self.private,
        }


@dataclass(frozen=True)
class FileEntry:
    """A file discovered while crawling the repository tree."""

    name: str
    path: str
    size: int
    content_locator: Optional[str]


@dataclass(frozen=True)
class PrioritizedFile:
    """File entry paired with its selection score."""

    entry: FileEntry
    priority: int

    @property
    def path(self) -> str:
        return self.entry.path


class AnalysisKind(str, Enum):
    SCRIPT = "script"
    CONFIG = "markup-config"
    UNSTRUCTURED = "unstructured"
    LISTING = "tree-listing"


@dataclass(frozen=True)
class ImportRef:
    source: str
    bound_names: Tuple[str, ...] = ()


@dataclass(frozen=True)
class FunctionInfo:
    name: str
    parameters: Tuple[str, ...] = ()
    is_async: bool = False

    def signature(self) -> str:
        prefix = "async " if self.is_async else ""
        return f"{prefix}{self.name}({', '.join(self.parameters)})"


@dataclass(frozen=True)
class ClassInfo:
    name: str
    methods: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ApiRoute:
    """HTTP route registration found in source code."""

    method: str
    path: str
    file: Optional[str] = None

    def label(self) -> str:
        return f"{self.method} {self.path}"


@dataclass(frozen=True)
class FileAnalysis:
    """Per-file analysis result; immutable once produced."""

    filename: str
    kind: AnalysisKind
    language: Optional[str] = None
    imports: Tuple[ImportRef, ...] = ()
    functions: Tuple[FunctionInfo, ...] = ()
    classes: Tuple[ClassInfo, ...] = ()
    api_routes: Tuple[ApiRoute, ...] = ()
    frameworks_detected: FrozenSet[str] = frozenset()
    features_detected: FrozenSet[str] = frozenset()
    keyword_hits: Tuple[Tuple[str, int], ...] = ()
    code_excerpt: str = ""
    strategy: str = ""


class ProjectArchetype(str, Enum):
    FRONTEND = "Frontend Web Application"
    BACKEND = "Backend API Server"
    MACHINE_LEARNING = "Machine Learning Application"
    API_SERVICE = "API Service"
    DATA_ANALYSIS = "Data Analysis Tool"
    GENERIC = "Software Application"


@dataclass(frozen=True)
class SemanticSummary:
    """Repository-wide view folded from every FileAnalysis."""

    project_archetype: ProjectArchetype = ProjectArchetype.GENERIC
    technology_stack: FrozenSet[str] = frozenset()
    main_features: FrozenSet[str] = frozenset()
    languages: FrozenSet[str] = frozenset()
    api_endpoints: Tuple[ApiRoute, ...] = ()
    business_logic_notes: Tuple[str, ...] = ()
    total_files: int = 0
    has_tests: bool = False
    has_docker: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projectType": self.project_archetype.value,
            "technologies": sorted(self.technology_stack),
            "features": sorted(self.main_features),
            "languages": sorted(self.languages),
            "apiEndpoints": [route.label() for route in self.api_endpoints],
            "totalFiles": self.total_files,
            "hasTests": self.has_tests,
            "hasDocker": self.has_docker,
        }


@dataclass(frozen=True)
class GeneratedDocument:
    """Terminal artifact of one run."""

    markdown_text: str
    source_summary: SemanticSummary
    analyses: Tuple[FileAnalysis, ...] = field(default=(), repr=False)
    listing: Tuple[FileAnalysis, ...] = field(default=(), repr=False)
