"""Capabilities the pipeline consumes from a repository host."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from ..models import RepoMetadata, RepoRef


@dataclass(frozen=True)
class DirectoryItem:
    """One entry of a directory listing."""

    name: str
    path: str
    type: str
    size: int = 0
    content_locator: Optional[str] = None

    @property
    def is_file(self) -> bool:
        return self.type == "file"

    @property
    def is_dir(self) -> bool:
        return self.type == "dir"


class DirectoryLister(Protocol):
    """Lists a directory; raises NotFound, AccessDenied or RateLimited."""

    def list_directory(self, ref: RepoRef, path: str = "") -> Sequence[DirectoryItem]:
        ...


class ContentSource(Protocol):
    """Fetches file text by locator; returns None on any failure."""

    def fetch_content(self, locator: str, max_bytes: int) -> Optional[str]:
        ...


class MetadataSource(Protocol):
    def get_repository(self, ref: RepoRef) -> RepoMetadata:
        ...


__all__ = ["ContentSource", "DirectoryItem", "DirectoryLister", "MetadataSource"]
