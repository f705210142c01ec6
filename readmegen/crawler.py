"""Bounded recursive traversal of a remote repository tree."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .errors import HostError
from .github.base import DirectoryItem, DirectoryLister
from .logging import get_logger
from .models import FileEntry, RepoRef
from .progress import CancellationToken

EXCLUDED_DIRS = frozenset(
    {
        "node_modules",
        "vendor",
        "dist",
        "build",
        "__pycache__",
        ".git",
    }
)

ProgressCallback = Callable[[int, int, str], None]


@dataclass
class _Listing:
    """Outcome of crawling one directory: files found, or the error that stopped it."""

    files: List[FileEntry] = field(default_factory=list)
    error: Optional[HostError] = None


class TreeCrawler:
    """Depth-first crawl with per-directory and depth bounds.

    Root listing failures propagate; failures below the root are logged and
    treated as empty subtrees.
    """

    def __init__(
        self,
        host: DirectoryLister,
        *,
        max_depth: int = 2,
        max_items_per_dir: int = 100,
        max_file_size: int = 1_000_000,
        throttle_every: int = 10,
        throttle_seconds: float = 0.05,
        sleep: Callable[[float], None] = time.sleep,
        cancel: CancellationToken | None = None,
    ) -> None:
        self.host = host
        self.max_depth = max_depth
        self.max_items_per_dir = max_items_per_dir
        self.max_file_size = max_file_size
        self.throttle_every = throttle_every
        self.throttle_seconds = throttle_seconds
        self._sleep = sleep
        self.cancel = cancel
        self.logger = get_logger("crawler")

    def crawl(self, ref: RepoRef, progress: ProgressCallback | None = None) -> List[FileEntry]:
        """Return every file entry reachable within the configured bounds."""
        result = self._crawl_dir(ref, "", 0, progress)
        if result.error is not None:
            raise result.error
        self.logger.debug("Crawled %d files from %s", len(result.files), ref.full_name)
        return result.files

    def _crawl_dir(
        self,
        ref: RepoRef,
        path: str,
        depth: int,
        progress: ProgressCallback | None,
    ) -> _Listing:
        if self.cancel is not None:
            self.cancel.raise_if_cancelled()
        try:
            items = list(self.host.list_directory(ref, path))
        except HostError as exc:
            return _Listing(error=exc)

        items = items[: self.max_items_per_dir]
        total = len(items)
        listing = _Listing()
        for index, item in enumerate(items, start=1):
            if item.is_file:
                if item.size <= self.max_file_size:
                    listing.files.append(_to_entry(item))
            elif item.is_dir and self._should_descend(item, depth):
                child = self._crawl_dir(ref, item.path, depth + 1, None)
                if child.error is not None:
                    self.logger.warning("Skipping %s: %s", item.path, child.error)
                else:
                    listing.files.extend(child.files)

            if depth == 0 and progress is not None:
                progress(index, total, item.path)
            if self.throttle_every and index % self.throttle_every == 0 and self.throttle_seconds:
                self._sleep(self.throttle_seconds)
        return listing

    def _should_descend(self, item: DirectoryItem, depth: int) -> bool:
        if depth >= self.max_depth:
            return False
        if item.name.startswith("."):
            return False
        return item.name not in EXCLUDED_DIRS


def _to_entry(item: DirectoryItem) -> FileEntry:
    return FileEntry(
        name=item.name,
        path=item.path,
        size=item.size,
        content_locator=item.content_locator,
    )


__all__ = ["EXCLUDED_DIRS", "TreeCrawler"]
