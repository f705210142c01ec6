"""Parse user-supplied repository references into RepoRef values."""

from __future__ import annotations

import re

from .errors import MalformedInput
from .models import RepoRef

_SEGMENT = r"[\w.-]+"

_URL_PATTERN = re.compile(
    rf"github\.com[/:](?P<owner>{_SEGMENT})/(?P<repo>{_SEGMENT}?)(?:\.git)?(?:[/?#].*)?$",
    re.IGNORECASE,
)
_SHORTHAND_PATTERN = re.compile(
    rf"^(?P<owner>{_SEGMENT})/(?P<repo>{_SEGMENT}?)(?:\.git)?/?$"
)


def parse_repo_url(value: str) -> RepoRef:
    """Return the RepoRef named by a GitHub URL or `owner/repo` shorthand.

    Protocol prefixes, `www.`, a `.git` suffix, a trailing slash and extra
    path segments (``/tree/main/src``) are all accepted and ignored.
    """
    if not isinstance(value, str):
        raise MalformedInput("Repository reference must be a string")
    text = value.strip()
    if not text:
        raise MalformedInput("Repository reference is empty")

    if "github.com" in text.lower():
        match = _URL_PATTERN.search(text)
    else:
        match = _SHORTHAND_PATTERN.match(text)

    if match is None:
        raise MalformedInput(f"Invalid GitHub URL format: {value!r}")

    owner, repo = match.group("owner"), match.group("repo")
    if not repo or repo in {".", ".."} or owner in {".", ".."}:
        raise MalformedInput(f"Invalid GitHub URL format: {value!r}")
    return RepoRef(owner=owner, repo=repo)


def is_valid_repo_url(value: str) -> bool:
    try:
        parse_repo_url(value)
    except MalformedInput:
        return False
    return True


__all__ = ["is_valid_repo_url", "parse_repo_url"]
