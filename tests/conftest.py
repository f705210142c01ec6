from __future__ import annotations

import pytest

from readmegen.config import ReadmeGenConfig
from readmegen.models import RepoRef
from tests._fixtures.fake_host import FakeHost, FakeLLM


@pytest.fixture
def repo_ref() -> RepoRef:
    return RepoRef(owner="octo", repo="demo")


@pytest.fixture
def fake_host() -> FakeHost:
    """Provide an empty in-memory host; tests add files with `write`."""
    return FakeHost()


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def config() -> ReadmeGenConfig:
    """Defaults with the crawl throttle disabled."""
    settings = ReadmeGenConfig()
    settings.github.throttle_seconds = 0.0
    return settings
