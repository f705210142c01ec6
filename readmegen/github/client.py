"""GitHub REST v3 client implementing the repository host capabilities."""

from __future__ import annotations

import json
from http.client import HTTPException
from typing import Any, Dict, List, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from ..config import GitHubConfig
from ..errors import AccessDenied, HostError, NotFound, RateLimited
from ..logging import get_logger
from ..models import RepoMetadata, RepoRef
from .base import DirectoryItem

DEFAULT_API_URL = "https://api.github.com"
USER_AGENT = "readmegen"


class GitHubClient:
    """Lists directories, fetches file content and repository metadata."""

    def __init__(
        self,
        token: str | None = None,
        *,
        api_url: str = DEFAULT_API_URL,
        request_timeout: float = 30.0,
    ) -> None:
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.request_timeout = request_timeout
        self.logger = get_logger("github")

    @classmethod
    def from_config(cls, config: GitHubConfig) -> "GitHubClient":
        return cls(
            config.token,
            api_url=config.api_url,
            request_timeout=config.request_timeout,
        )

    def get_repository(self, ref: RepoRef) -> RepoMetadata:
        payload = self._get_json(f"{self.api_url}/repos/{ref.owner}/{ref.repo}")
        if not isinstance(payload, dict):
            raise HostError(f"Unexpected repository payload for {ref.full_name}")
        return RepoMetadata.from_github(payload)

    def list_directory(self, ref: RepoRef, path: str = "") -> List[DirectoryItem]:
        url = f"{self.api_url}/repos/{ref.owner}/{ref.repo}/contents/{quote(path)}"
        payload = self._get_json(url)
        if not isinstance(payload, list):
            # A file path answers with a single object rather than a listing.
            return []
        items: List[DirectoryItem] = []
        for raw in payload:
            if not isinstance(raw, dict):
                continue
            items.append(
                DirectoryItem(
                    name=str(raw.get("name", "")),
                    path=str(raw.get("path", "")),
                    type=str(raw.get("type", "")),
                    size=int(raw.get("size") or 0),
                    content_locator=raw.get("download_url") or None,
                )
            )
        return items

    def fetch_content(self, locator: str, max_bytes: int) -> Optional[str]:
        request = Request(locator, headers=self._headers(accept="*/*"), method="GET")
        try:
            with urlopen(request, timeout=self.request_timeout) as response:  # type: ignore[arg-type]
                raw = response.read(max_bytes)
        except (OSError, HTTPException) as exc:
            self.logger.warning("Could not fetch %s: %s", locator, exc)
            return None
        return raw.decode("utf-8", errors="replace")

    def _headers(self, *, accept: str = "application/vnd.github.v3+json") -> Dict[str, str]:
        headers = {"User-Agent": USER_AGENT, "Accept": accept}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _get_json(self, url: str) -> Any:
        request = Request(url, headers=self._headers(), method="GET")
        try:
            with urlopen(request, timeout=self.request_timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:
            raise _map_http_error(exc, url) from exc
        except URLError as exc:
            raise HostError(f"GitHub request failed: {exc.reason}") from exc
        except (OSError, HTTPException) as exc:
            raise HostError(f"GitHub request failed: {exc!r}") from exc

        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise HostError("GitHub returned invalid JSON") from exc


def _map_http_error(exc: HTTPError, url: str) -> HostError:
    detail = ""
    try:
        detail = exc.read().decode("utf-8", errors="ignore").strip()
    except (OSError, AttributeError):  # pragma: no cover
        detail = ""
    message = f"HTTP {exc.code} for {url}"
    if detail:
        message = f"{message}: {detail[:300]}"

    headers = exc.headers
    remaining = headers.get("X-RateLimit-Remaining") if headers is not None else None
    if exc.code == 429 or (exc.code == 403 and remaining == "0"):
        return RateLimited(f"Rate limit exceeded. {message}", status=exc.code)
    if exc.code == 404:
        return NotFound(f"Repository or path not found. {message}", status=exc.code)
    if exc.code in (401, 403):
        return AccessDenied(f"Access denied. {message}", status=exc.code)
    return HostError(message, status=exc.code)


__all__ = ["GitHubClient", "DEFAULT_API_URL"]
