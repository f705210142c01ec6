"""Bounded retrieval of single-file content."""

from __future__ import annotations

from typing import Optional

from .github.base import ContentSource
from .logging import get_logger
from .models import FileEntry
from .progress import CancellationToken


class ContentFetcher:
    """Fetches a file's text through the host, never raising for per-file failures."""

    def __init__(
        self,
        source: ContentSource,
        *,
        max_bytes: int = 100_000,
        cancel: CancellationToken | None = None,
    ) -> None:
        self.source = source
        self.max_bytes = max_bytes
        self.cancel = cancel
        self.logger = get_logger("fetcher")

    def fetch(self, entry: FileEntry) -> Optional[str]:
        if self.cancel is not None:
            self.cancel.raise_if_cancelled()
        if not entry.content_locator:
            self.logger.debug("No content locator for %s", entry.path)
            return None
        try:
            text = self.source.fetch_content(entry.content_locator, self.max_bytes)
        except Exception as exc:
            self.logger.warning("Skipping %s: %s", entry.path, exc)
            return None
        if text is None:
            self.logger.debug("No content returned for %s", entry.path)
        return text


__all__ = ["ContentFetcher"]
