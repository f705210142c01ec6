"""Fold per-file analyses into one repository-wide SemanticSummary."""

from __future__ import annotations

from dataclasses import replace
from functools import reduce
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple

from .models import FileAnalysis, ProjectArchetype, SemanticSummary

FRONTEND_FRAMEWORKS = frozenset({"React", "Vue.js", "Angular", "Svelte", "Next.js", "Nuxt.js"})
SERVER_FRAMEWORKS = frozenset(
    {"Express.js", "Fastify", "Koa.js", "NestJS", "Django", "Flask", "FastAPI"}
)
ML_FRAMEWORKS = frozenset({"TensorFlow", "PyTorch", "Scikit-Learn", "Keras"})
DATA_LIBRARIES = frozenset({"Pandas", "NumPy", "Matplotlib", "Seaborn", "Plotly"})

API_NOTE_PREFIX = "API: "

# First match wins.
_ARCHETYPE_CHAIN: Tuple[Tuple[ProjectArchetype, FrozenSet[str]], ...] = (
    (ProjectArchetype.FRONTEND, FRONTEND_FRAMEWORKS),
    (ProjectArchetype.BACKEND, SERVER_FRAMEWORKS),
    (ProjectArchetype.MACHINE_LEARNING, ML_FRAMEWORKS),
)


def business_notes(analysis: FileAnalysis) -> List[str]:
    """One-line descriptions of the functions, classes and routes of a file."""
    notes = [f"Function: {function.signature()}" for function in analysis.functions]
    for cls in analysis.classes:
        if cls.methods:
            notes.append(f"Class: {cls.name} with methods: {', '.join(cls.methods)}")
        else:
            notes.append(f"Class: {cls.name}")
    notes.extend(f"{API_NOTE_PREFIX}{route.label()}" for route in analysis.api_routes)
    return notes


def combine(summary: SemanticSummary, analysis: FileAnalysis) -> SemanticSummary:
    """Merge one FileAnalysis into a summary, returning a new summary."""
    languages = summary.languages
    if analysis.language:
        languages = languages | {analysis.language}
    return replace(
        summary,
        technology_stack=summary.technology_stack | analysis.frameworks_detected,
        main_features=summary.main_features | analysis.features_detected,
        languages=languages,
        api_endpoints=summary.api_endpoints + analysis.api_routes,
        business_logic_notes=summary.business_logic_notes + tuple(business_notes(analysis)),
        total_files=summary.total_files + 1,
    )


def fold_listing(summary: SemanticSummary, analysis: FileAnalysis) -> SemanticSummary:
    """Merge a listing-kind analysis; it names no code, so only labels are taken."""
    languages = summary.languages
    if analysis.language:
        languages = languages | {analysis.language}
    return replace(
        summary,
        technology_stack=summary.technology_stack | analysis.frameworks_detected,
        main_features=summary.main_features | analysis.features_detected,
        languages=languages,
    )


def infer_archetype(summary: SemanticSummary) -> ProjectArchetype:
    for archetype, frameworks in _ARCHETYPE_CHAIN:
        if summary.technology_stack & frameworks:
            return archetype
    if any(note.startswith(API_NOTE_PREFIX) for note in summary.business_logic_notes):
        return ProjectArchetype.API_SERVICE
    if summary.technology_stack & DATA_LIBRARIES:
        return ProjectArchetype.DATA_ANALYSIS
    return ProjectArchetype.GENERIC


class SemanticAggregator:
    """Builds the SemanticSummary for a run."""

    def aggregate(
        self,
        analyses: Iterable[FileAnalysis],
        primary_language: Optional[str] = None,
        listing: Iterable[FileAnalysis] = (),
    ) -> SemanticSummary:
        summary = reduce(combine, analyses, SemanticSummary())
        summary = reduce(fold_listing, listing, summary)
        if primary_language:
            summary = replace(
                summary,
                technology_stack=summary.technology_stack | {primary_language},
                languages=summary.languages | {primary_language},
            )
        return replace(
            summary,
            project_archetype=infer_archetype(summary),
            has_tests="Testing Suite" in summary.main_features,
            has_docker="Docker" in summary.technology_stack,
        )


def aggregate(
    analyses: Sequence[FileAnalysis],
    primary_language: Optional[str] = None,
    listing: Sequence[FileAnalysis] = (),
) -> SemanticSummary:
    return SemanticAggregator().aggregate(analyses, primary_language, listing)


__all__ = [
    "DATA_LIBRARIES",
    "FRONTEND_FRAMEWORKS",
    "ML_FRAMEWORKS",
    "SERVER_FRAMEWORKS",
    "SemanticAggregator",
    "aggregate",
    "business_notes",
    "combine",
    "fold_listing",
    "infer_archetype",
]
