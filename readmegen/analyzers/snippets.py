"""Reduce source files to declaration-biased excerpts."""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import List, Tuple

DEFAULT_MAX_LINES = 300
CONFIG_HEAD_LINES = 150

CONFIG_FILENAMES = frozenset(
    {
        "package.json",
        "requirements.txt",
        "pyproject.toml",
        "dockerfile",
        "docker-compose.yml",
        "docker-compose.yaml",
        "compose.yml",
        "compose.yaml",
        ".env.example",
        ".env.sample",
        "env.example",
    }
)

_COMMENT = re.compile(r"^\s*(#|//|/\*|\*|<!--|--)")
_DECLARATION = re.compile(
    r"^\s*(?:import\b|export\b|from\s+\S+\s+import\b|class\b|def\b|async\s+def\b|"
    r"function\b|async\s+function\b)"
    r"|^\s*(?:export\s+)?(?:const|let|var)\s+\w+\s*=\s*(?:async\s*)?(?:\([^)]*\)|\w+)\s*=>"
    r"|\b(?:app|router|server)\."
)
_ROUTE_OR_SCHEMA = re.compile(
    r"\.(?:get|post|put|patch|delete|route)\s*\("
    r"|\b(?:Schema|model|Model|define|Column|Field)\s*\("
)
_CONTROL_FLOW = re.compile(
    r"^\s*(?:if|elif|else\s+if|for|while|try|catch|except|async|await|return)\b|\bawait\b|\bcatch\s*\("
)
_VARIABLE = re.compile(
    r"^\s*(?:export\s+)?(?:const|let|var)\s+\w+|module\.exports|\bexports\.\w+|^\s*[A-Za-z_]\w*\s*(?::[^=]+)?=(?!=)"
)


def line_priority(line: str) -> int:
    """Return the importance score of a single source line."""
    if not line.strip() or _COMMENT.match(line):
        return 1
    if _DECLARATION.search(line):
        return 15
    if _ROUTE_OR_SCHEMA.search(line):
        return 12
    if _CONTROL_FLOW.search(line):
        return 9
    if _VARIABLE.search(line):
        return 7
    return 5


def _split_lines(text: str) -> List[str]:
    """Split on newlines only; a final newline does not start another line."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


class SnippetExtractor:
    """Keeps the most important lines of a file, restored to source order."""

    def __init__(self, max_lines: int = DEFAULT_MAX_LINES) -> None:
        self.max_lines = max_lines

    def extract(self, text: str, filename: str, max_lines: int | None = None) -> str:
        limit = self.max_lines if max_lines is None else max_lines
        lines = _split_lines(text)
        if len(lines) <= limit:
            return text

        if PurePosixPath(filename).name.lower() in CONFIG_FILENAMES:
            return "\n".join(lines[: min(CONFIG_HEAD_LINES, len(lines))])

        scored: List[Tuple[int, int, str]] = [
            (line_priority(line), index, line) for index, line in enumerate(lines)
        ]
        scored.sort(key=lambda item: item[0], reverse=True)
        kept = sorted(scored[:limit], key=lambda item: item[1])
        return "\n".join(line for _, _, line in kept)


def extract_snippet(text: str, filename: str, max_lines: int = DEFAULT_MAX_LINES) -> str:
    return SnippetExtractor(max_lines).extract(text, filename)


__all__ = [
    "CONFIG_FILENAMES",
    "DEFAULT_MAX_LINES",
    "SnippetExtractor",
    "extract_snippet",
    "line_priority",
]
