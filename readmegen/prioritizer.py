"""Rank crawled files and keep the most informative working set."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Iterable, List

from .models import FileEntry, PrioritizedFile

_CANONICAL_SCORES = {
    "package.json": 100,
    "requirements.txt": 100,
    "pyproject.toml": 95,
    "app.js": 90,
    "server.js": 90,
    "index.js": 90,
    "main.py": 90,
    "app.py": 90,
    "server.py": 85,
    "main.js": 85,
    "main.ts": 85,
    "index.ts": 85,
    "app.ts": 85,
    "server.ts": 85,
    "manage.py": 80,
    "setup.py": 80,
    "app.jsx": 80,
    "app.tsx": 80,
    "main.jsx": 75,
    "main.tsx": 75,
    "index.jsx": 75,
    "index.tsx": 75,
    "go.mod": 75,
    "cargo.toml": 75,
    "gemfile": 70,
    "dockerfile": 60,
    "docker-compose.yml": 55,
    "docker-compose.yaml": 55,
    "readme.md": 50,
    ".env.example": 45,
    ".env.sample": 45,
    "env.example": 45,
}

_PATH_BONUSES = (
    ("route", 20),
    ("api", 20),
    ("controller", 15),
    ("model", 15),
    ("service", 15),
    ("auth", 15),
    ("middleware", 10),
    ("utils", 10),
)

SOURCE_EXTENSIONS = frozenset(
    {
        ".js",
        ".jsx",
        ".mjs",
        ".cjs",
        ".ts",
        ".tsx",
        ".py",
        ".vue",
        ".svelte",
        ".rb",
        ".go",
        ".php",
        ".java",
        ".rs",
    }
)
_SOURCE_BONUS = 10


def score_file(entry: FileEntry) -> int:
    name = entry.name.lower()
    path = entry.path.lower()
    score = _CANONICAL_SCORES.get(name, 0)
    for fragment, bonus in _PATH_BONUSES:
        if fragment in path:
            score += bonus
    if PurePosixPath(name).suffix in SOURCE_EXTENSIONS:
        score += _SOURCE_BONUS
    return score


class FilePrioritizer:
    """Scores files by canonical name, path hints and extension."""

    def __init__(self, max_files: int = 50) -> None:
        self.max_files = max_files

    def prioritize(self, entries: Iterable[FileEntry]) -> List[PrioritizedFile]:
        scored = [PrioritizedFile(entry=entry, priority=score_file(entry)) for entry in entries]
        # sorted() is stable, so equal scores keep crawl order.
        scored = sorted(scored, key=lambda item: item.priority, reverse=True)
        return scored[: self.max_files]


__all__ = ["FilePrioritizer", "SOURCE_EXTENSIONS", "score_file"]
