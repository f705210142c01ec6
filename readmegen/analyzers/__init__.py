"""Per-file analysis strategies and the extension-based selection between them."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from pathlib import PurePosixPath
from typing import Dict

from ..logging import get_logger
from ..models import FileAnalysis
from .base import CodeAnalyzer, ParseFailure
from .config_files import DEFAULT_EXCERPT_CHARS, ConfigFileAnalyzer, is_config_file
from .keywords import KeywordAnalyzer
from .lightweight import SUPPORTED_SUFFIXES as LIGHTWEIGHT_SUFFIXES
from .lightweight import LightweightAnalyzer
from .python_ast import PythonAstAnalyzer
from .snippets import DEFAULT_MAX_LINES, SnippetExtractor
from .tree_sitter import SUPPORTED_SUFFIXES as TREE_SITTER_SUFFIXES
from .tree_sitter import TreeSitterAnalyzer

_LOGGER = get_logger("analyzers")


class Strategy(str, Enum):
    """Analysis variant for a file, decided by its name alone."""

    CONFIG = "config"
    TREE_SITTER = "tree-sitter"
    PYTHON_AST = "python-ast"
    LIGHTWEIGHT = "lightweight"
    KEYWORDS = "keywords"


def select_strategy(filename: str) -> Strategy:
    if is_config_file(filename):
        return Strategy.CONFIG
    suffix = PurePosixPath(filename).suffix.lower()
    if suffix in TREE_SITTER_SUFFIXES:
        return Strategy.TREE_SITTER
    if suffix == ".py":
        return Strategy.PYTHON_AST
    if suffix in LIGHTWEIGHT_SUFFIXES:
        return Strategy.LIGHTWEIGHT
    return Strategy.KEYWORDS


class FileAnalyzer:
    """Dispatches files to their strategy; structural parse failures fall back to regexes."""

    def __init__(
        self,
        *,
        snippet_max_lines: int = DEFAULT_MAX_LINES,
        config_excerpt_chars: int = DEFAULT_EXCERPT_CHARS,
    ) -> None:
        snippets = SnippetExtractor(snippet_max_lines)
        self._fallback = LightweightAnalyzer(snippets)
        self._strategies: Dict[Strategy, CodeAnalyzer] = {
            Strategy.CONFIG: ConfigFileAnalyzer(snippets, excerpt_chars=config_excerpt_chars),
            Strategy.TREE_SITTER: TreeSitterAnalyzer(snippets),
            Strategy.PYTHON_AST: PythonAstAnalyzer(snippets),
            Strategy.LIGHTWEIGHT: self._fallback,
            Strategy.KEYWORDS: KeywordAnalyzer(snippets),
        }

    def analyze(self, text: str, filename: str) -> FileAnalysis:
        strategy = select_strategy(filename)
        try:
            return self._strategies[strategy].analyze(text, filename)
        except ParseFailure as exc:
            _LOGGER.debug("Falling back to regex analysis for %s: %s", filename, exc)
            return self._fallback.analyze(text, filename)


@lru_cache(maxsize=1)
def _default_analyzer() -> FileAnalyzer:
    return FileAnalyzer()


def analyze_file(text: str, filename: str) -> FileAnalysis:
    """Analyze one file with default bounds."""
    return _default_analyzer().analyze(text, filename)


__all__ = [
    "CodeAnalyzer",
    "ConfigFileAnalyzer",
    "FileAnalyzer",
    "KeywordAnalyzer",
    "LightweightAnalyzer",
    "ParseFailure",
    "PythonAstAnalyzer",
    "SnippetExtractor",
    "Strategy",
    "TreeSitterAnalyzer",
    "analyze_file",
    "select_strategy",
]
