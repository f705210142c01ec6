"""Strategy interface for per-file code analysis."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Sequence

from ..models import (
    AnalysisKind,
    ApiRoute,
    ClassInfo,
    FileAnalysis,
    FunctionInfo,
    ImportRef,
)
from .snippets import SnippetExtractor
from .tables import (
    HTTP_CLIENT_RECEIVERS,
    ROUTER_RECEIVERS,
    detect_features,
    detect_frameworks,
    language_for,
)


class ParseFailure(Exception):
    """Raised by structural strategies when a file cannot be parsed."""


class CodeAnalyzer(ABC):
    """Contract shared by every analysis strategy."""

    name = "base"

    def __init__(self, snippets: SnippetExtractor | None = None) -> None:
        self.snippets = snippets or SnippetExtractor()

    @abstractmethod
    def analyze(self, text: str, filename: str) -> FileAnalysis:
        """Return the FileAnalysis for one file's full text."""

    def build_analysis(
        self,
        text: str,
        filename: str,
        *,
        imports: Sequence[ImportRef] = (),
        functions: Sequence[FunctionInfo] = (),
        classes: Sequence[ClassInfo] = (),
        routes: Sequence[ApiRoute] = (),
        kind: AnalysisKind = AnalysisKind.SCRIPT,
    ) -> FileAnalysis:
        """Cross-reference collected symbols against the lookup tables."""
        sources = [item.source for item in imports]
        frameworks = detect_frameworks(sources)
        names: list[str] = list(sources)
        names.extend(function.name for function in functions)
        names.extend(cls.name for cls in classes)
        features = detect_features(names)
        if routes:
            features.add("REST API")
        return FileAnalysis(
            filename=filename,
            kind=kind,
            language=language_for(filename),
            imports=tuple(imports),
            functions=tuple(functions),
            classes=tuple(classes),
            api_routes=tuple(routes),
            frameworks_detected=frozenset(frameworks),
            features_detected=frozenset(features),
            code_excerpt=self.snippets.extract(text, filename),
            strategy=self.name,
        )


def is_route_call(receiver: str, path: str | None) -> bool:
    """Decide whether `receiver.<verb>(path, ...)` registers an HTTP route."""
    name = receiver.split(".")[-1].lower() if receiver else ""
    if name in HTTP_CLIENT_RECEIVERS:
        return False
    if path is not None:
        return path.startswith("/")
    return bool(ROUTER_RECEIVERS.search(name))


def dedupe_routes(routes: Iterable[ApiRoute]) -> list[ApiRoute]:
    seen: set[tuple[str, str]] = set()
    result: list[ApiRoute] = []
    for route in routes:
        key = (route.method, route.path)
        if key in seen:
            continue
        seen.add(key)
        result.append(route)
    return result


__all__ = ["CodeAnalyzer", "ParseFailure", "dedupe_routes", "is_route_call"]
