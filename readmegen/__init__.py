"""Generate README documents for GitHub repositories from heuristic source analysis."""

from __future__ import annotations

__version__ = "1.0.0"

from .aggregator import SemanticAggregator
from .analyzers import FileAnalyzer, analyze_file, select_strategy
from .config import ReadmeGenConfig, load_config
from .crawler import TreeCrawler
from .errors import (
    AccessDenied,
    GenerationError,
    MalformedInput,
    NotFound,
    RateLimited,
    ReadmeGenError,
    RunCancelled,
)
from .fetcher import ContentFetcher
from .models import FileAnalysis, GeneratedDocument, RepoMetadata, RepoRef, SemanticSummary
from .orchestrator import Orchestrator
from .prioritizer import FilePrioritizer
from .progress import CancellationToken, ProgressEvent, ProgressPhase, ProgressReporter
from .prompting.builder import PromptComposer, postprocess
from .url_parser import parse_repo_url

__all__ = [
    "AccessDenied",
    "CancellationToken",
    "ContentFetcher",
    "FileAnalysis",
    "FileAnalyzer",
    "FilePrioritizer",
    "GeneratedDocument",
    "GenerationError",
    "MalformedInput",
    "NotFound",
    "Orchestrator",
    "ProgressEvent",
    "ProgressPhase",
    "ProgressReporter",
    "PromptComposer",
    "RateLimited",
    "ReadmeGenConfig",
    "ReadmeGenError",
    "RepoMetadata",
    "RepoRef",
    "RunCancelled",
    "SemanticAggregator",
    "SemanticSummary",
    "TreeCrawler",
    "__version__",
    "analyze_file",
    "load_config",
    "parse_repo_url",
    "postprocess",
]
