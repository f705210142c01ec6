"""Tests for repository reference parsing."""

from __future__ import annotations

import pytest

from readmegen.errors import MalformedInput
from readmegen.models import RepoRef
from readmegen.url_parser import is_valid_repo_url, parse_repo_url


@pytest.mark.parametrize(
    "value",
    [
        "octo/demo",
        "octo/demo/",
        "octo/demo.git",
        "github.com/octo/demo",
        "https://github.com/octo/demo",
        "http://github.com/octo/demo/",
        "https://www.github.com/octo/demo.git",
        "https://github.com/octo/demo/tree/main/src",
        "https://github.com/octo/demo?tab=readme",
        "git@github.com:octo/demo.git",
        "  https://github.com/octo/demo  ",
    ],
)
def test_parse_repo_url_normalizes_variants(value: str) -> None:
    assert parse_repo_url(value) == RepoRef(owner="octo", repo="demo")


def test_parse_repo_url_keeps_dots_and_dashes() -> None:
    ref = parse_repo_url("https://github.com/my-org/site.github.io")
    assert ref.owner == "my-org"
    assert ref.repo == "site.github.io"
    assert ref.full_name == "my-org/site.github.io"


@pytest.mark.parametrize(
    "value",
    [
        "",
        "   ",
        "octo",
        "octo demo",
        "octo /demo",
        "octo/de mo",
        "https://github.com/octo",
        "https://github.com/own er/demo",
        "https://github.com/octo/de mo",
        "https://gitlab.com/octo",
    ],
)
def test_parse_repo_url_rejects_malformed(value: str) -> None:
    with pytest.raises(MalformedInput):
        parse_repo_url(value)
    assert is_valid_repo_url(value) is False


def test_malformed_input_does_not_suggest_auth() -> None:
    with pytest.raises(MalformedInput) as info:
        parse_repo_url("not a repo")
    assert info.value.to_dict()["kind"] == "malformed_input"
    assert info.value.auth_may_help is False
