"""Tests for the GitHub REST client."""

from __future__ import annotations

import io
import json
from http.client import RemoteDisconnected
from urllib.error import HTTPError, URLError

import pytest

from readmegen.crawler import TreeCrawler
from readmegen.errors import AccessDenied, HostError, NotFound, RateLimited
from readmegen.github.client import GitHubClient
from readmegen.models import RepoRef

REF = RepoRef(owner="octo", repo="demo")


class FakeResponse:
    def __init__(self, body: bytes):
        self._body = body

    def read(self, size=-1):
        return self._body if size is None or size < 0 else self._body[:size]

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


def _serve(monkeypatch, body, calls=None):
    def fake_urlopen(request, timeout=None):
        if calls is not None:
            calls.append(request)
        return FakeResponse(json.dumps(body).encode("utf-8") if not isinstance(body, bytes) else body)

    monkeypatch.setattr("readmegen.github.client.urlopen", fake_urlopen)


def _fail(monkeypatch, code, headers=None):
    def fake_urlopen(request, timeout=None):
        raise HTTPError(request.full_url, code, "error", headers or {}, io.BytesIO(b'{"message": "nope"}'))

    monkeypatch.setattr("readmegen.github.client.urlopen", fake_urlopen)


def test_list_directory_maps_items(monkeypatch) -> None:
    calls = []
    _serve(
        monkeypatch,
        [
            {"name": "src", "path": "src", "type": "dir", "size": 0, "download_url": None},
            {
                "name": "app.py",
                "path": "app.py",
                "type": "file",
                "size": 120,
                "download_url": "https://raw.example/app.py",
            },
        ],
        calls,
    )
    client = GitHubClient("tok")
    items = client.list_directory(REF, "")

    assert [item.name for item in items] == ["src", "app.py"]
    assert items[0].is_dir and items[1].is_file
    assert items[1].content_locator == "https://raw.example/app.py"
    assert calls[0].full_url == "https://api.github.com/repos/octo/demo/contents/"
    assert calls[0].get_header("Authorization") == "Bearer tok"


def test_list_directory_of_file_returns_empty(monkeypatch) -> None:
    _serve(monkeypatch, {"name": "README.md", "type": "file"})
    assert GitHubClient().list_directory(REF, "README.md") == []


def test_get_repository_builds_metadata(monkeypatch) -> None:
    _serve(
        monkeypatch,
        {
            "full_name": "octo/demo",
            "description": "Demo",
            "language": "Python",
            "stargazers_count": 5,
            "forks_count": 2,
            "private": False,
        },
    )
    metadata = GitHubClient().get_repository(REF)
    assert metadata.full_name == "octo/demo"
    assert metadata.language == "Python"
    assert metadata.stars == 5


@pytest.mark.parametrize(
    ("code", "headers", "error"),
    [
        (404, None, NotFound),
        (401, None, AccessDenied),
        (403, {"X-RateLimit-Remaining": "10"}, AccessDenied),
        (403, {"X-RateLimit-Remaining": "0"}, RateLimited),
        (429, None, RateLimited),
        (500, None, HostError),
    ],
)
def test_http_errors_are_classified(monkeypatch, code, headers, error) -> None:
    _fail(monkeypatch, code, headers)
    with pytest.raises(error) as info:
        GitHubClient().list_directory(REF, "")
    assert info.value.status == code


def test_not_found_suggests_authentication(monkeypatch) -> None:
    _fail(monkeypatch, 404)
    with pytest.raises(NotFound) as info:
        GitHubClient().get_repository(REF)
    assert info.value.to_dict()["auth_may_help"] is True


def test_fetch_content_truncates(monkeypatch) -> None:
    _serve(monkeypatch, b"abcdefghij")
    assert GitHubClient().fetch_content("https://raw.example/f", 4) == "abcd"


def test_fetch_content_failure_returns_none(monkeypatch) -> None:
    def fake_urlopen(request, timeout=None):
        raise URLError("offline")

    monkeypatch.setattr("readmegen.github.client.urlopen", fake_urlopen)
    assert GitHubClient().fetch_content("https://raw.example/f", 100) is None


def test_read_timeout_in_subdirectory_leaves_subtree_empty(monkeypatch) -> None:
    root = [
        {"name": "src", "path": "src", "type": "dir", "size": 0, "download_url": None},
        {"name": "a.py", "path": "a.py", "type": "file", "size": 10, "download_url": "https://raw.example/a.py"},
    ]

    def fake_urlopen(request, timeout=None):
        if request.full_url.endswith("/contents/src"):
            raise TimeoutError("The read operation timed out")
        return FakeResponse(json.dumps(root).encode("utf-8"))

    monkeypatch.setattr("readmegen.github.client.urlopen", fake_urlopen)
    entries = TreeCrawler(GitHubClient(), throttle_seconds=0).crawl(REF)

    assert [entry.path for entry in entries] == ["a.py"]


@pytest.mark.parametrize(
    "failure",
    [TimeoutError("timed out"), ConnectionResetError("reset"), RemoteDisconnected("closed")],
)
def test_transport_failures_become_host_errors(monkeypatch, failure) -> None:
    def fake_urlopen(request, timeout=None):
        raise failure

    monkeypatch.setattr("readmegen.github.client.urlopen", fake_urlopen)
    with pytest.raises(HostError):
        GitHubClient().list_directory(REF, "")


def test_undecodable_body_is_host_error(monkeypatch) -> None:
    _serve(monkeypatch, b"\xff\xfe\x00not json")
    with pytest.raises(HostError, match="invalid JSON"):
        GitHubClient().list_directory(REF, "")
