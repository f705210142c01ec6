"""Tests for the bounded repository crawler."""

from __future__ import annotations

import pytest

from readmegen.crawler import TreeCrawler
from readmegen.errors import AccessDenied, NotFound, RateLimited, RunCancelled
from readmegen.models import RepoRef
from readmegen.progress import CancellationToken
from tests._fixtures.fake_host import FakeHost


def _crawler(host: FakeHost, **kwargs) -> TreeCrawler:
    kwargs.setdefault("throttle_seconds", 0.0)
    return TreeCrawler(host, **kwargs)


def test_crawl_respects_max_depth(repo_ref: RepoRef) -> None:
    host = FakeHost(
        {
            "a.py": "x = 1",
            "src/b.py": "x = 2",
            "src/pkg/c.py": "x = 3",
            "src/pkg/deep/d.py": "x = 4",
        }
    )
    paths = [entry.path for entry in _crawler(host, max_depth=2).crawl(repo_ref)]

    assert paths == ["a.py", "src/b.py", "src/pkg/c.py"]
    assert "src/pkg/deep" not in host.listed


def test_crawl_skips_excluded_and_hidden_directories(repo_ref: RepoRef) -> None:
    host = FakeHost(
        {
            "index.js": "",
            "node_modules/react/index.js": "",
            "vendor/lib.go": "",
            "dist/bundle.js": "",
            "build/out.js": "",
            "__pycache__/x.pyc": "",
            ".github/workflows/ci.yml": "",
            "lib/util.js": "",
        }
    )
    paths = [entry.path for entry in _crawler(host).crawl(repo_ref)]

    assert paths == ["index.js", "lib/util.js"]
    assert set(host.listed) == {"", "lib"}


def test_crawl_bounds_items_per_directory_and_file_size(repo_ref: RepoRef) -> None:
    files = {f"f{index:02d}.txt": "x" for index in range(20)}
    host = FakeHost(files, sizes={"f00.txt": 5_000_000})
    entries = _crawler(host, max_items_per_dir=5).crawl(repo_ref)

    assert [entry.name for entry in entries] == ["f01.txt", "f02.txt", "f03.txt", "f04.txt"]
    assert all(entry.content_locator for entry in entries)


@pytest.mark.parametrize("error", [NotFound("gone"), AccessDenied("no"), RateLimited("slow")])
def test_root_listing_failure_propagates(repo_ref: RepoRef, error: Exception) -> None:
    host = FakeHost({"a.py": ""}, errors={"": error})
    with pytest.raises(type(error)):
        _crawler(host).crawl(repo_ref)


def test_subtree_failure_is_treated_as_empty(repo_ref: RepoRef) -> None:
    host = FakeHost(
        {"a.py": "", "secret/key.py": "", "src/b.py": ""},
        errors={"secret": AccessDenied("forbidden")},
    )
    paths = [entry.path for entry in _crawler(host).crawl(repo_ref)]
    assert paths == ["a.py", "src/b.py"]


def test_progress_reported_for_root_items_only(repo_ref: RepoRef) -> None:
    host = FakeHost({"a.py": "", "src/b.py": "", "src/c.py": "", "z.py": ""})
    calls: list[tuple[int, int, str]] = []
    _crawler(host).crawl(repo_ref, lambda index, total, path: calls.append((index, total, path)))

    assert calls == [(1, 3, "a.py"), (2, 3, "src"), (3, 3, "z.py")]


def test_throttle_pauses_every_n_items(repo_ref: RepoRef) -> None:
    host = FakeHost({f"f{index}.txt": "" for index in range(25)})
    pauses: list[float] = []
    TreeCrawler(
        host, throttle_every=10, throttle_seconds=0.05, sleep=pauses.append
    ).crawl(repo_ref)
    assert pauses == [0.05, 0.05]


def test_cancelled_crawl_stops(repo_ref: RepoRef) -> None:
    token = CancellationToken()
    token.cancel()
    host = FakeHost({"a.py": ""})
    with pytest.raises(RunCancelled):
        _crawler(host, cancel=token).crawl(repo_ref)
    assert host.listed == []
