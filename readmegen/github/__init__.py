"""GitHub repository host adapters."""

from .base import ContentSource, DirectoryItem, DirectoryLister, MetadataSource
from .client import GitHubClient

__all__ = [
    "ContentSource",
    "DirectoryItem",
    "DirectoryLister",
    "GitHubClient",
    "MetadataSource",
]
