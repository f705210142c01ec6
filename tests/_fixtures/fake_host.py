"""In-memory repository host used by crawler and pipeline tests."""

from __future__ import annotations

import textwrap
from typing import Dict, List, Mapping, Optional

from readmegen.errors import HostError
from readmegen.github.base import DirectoryItem
from readmegen.models import RepoMetadata, RepoRef

LOCATOR_PREFIX = "fake://"


class FakeHost:
    """Serves a flat `path -> content` mapping as a directory tree.

    ``errors`` maps a directory path ("" for the root) to the exception its
    listing raises.
    """

    def __init__(
        self,
        files: Mapping[str, str] | None = None,
        *,
        errors: Mapping[str, HostError] | None = None,
        sizes: Mapping[str, int] | None = None,
        metadata: RepoMetadata | None = None,
    ) -> None:
        self.files: Dict[str, str] = {
            path: textwrap.dedent(content).lstrip("\n") for path, content in (files or {}).items()
        }
        self.errors = dict(errors or {})
        self.sizes = dict(sizes or {})
        self.metadata = metadata
        self.listed: List[str] = []
        self.fetched: List[str] = []

    def write(self, files: Mapping[str, str]) -> None:
        for path, content in files.items():
            self.files[path] = textwrap.dedent(content).lstrip("\n")

    def list_directory(self, ref: RepoRef, path: str = "") -> List[DirectoryItem]:
        self.listed.append(path)
        if path in self.errors:
            raise self.errors[path]
        prefix = f"{path}/" if path else ""
        items: List[DirectoryItem] = []
        seen_dirs: set[str] = set()
        for file_path in self.files:
            if not file_path.startswith(prefix):
                continue
            rest = file_path[len(prefix):]
            head, sep, _ = rest.partition("/")
            if sep:
                if head not in seen_dirs:
                    seen_dirs.add(head)
                    items.append(DirectoryItem(name=head, path=prefix + head, type="dir"))
                continue
            items.append(
                DirectoryItem(
                    name=rest,
                    path=file_path,
                    type="file",
                    size=self.sizes.get(file_path, len(self.files[file_path].encode("utf-8"))),
                    content_locator=LOCATOR_PREFIX + file_path,
                )
            )
        return items

    def fetch_content(self, locator: str, max_bytes: int) -> Optional[str]:
        path = locator[len(LOCATOR_PREFIX):]
        self.fetched.append(path)
        content = self.files.get(path)
        if content is None:
            return None
        return content.encode("utf-8")[:max_bytes].decode("utf-8", errors="ignore")

    def get_repository(self, ref: RepoRef) -> RepoMetadata:
        return self.metadata or RepoMetadata(full_name=ref.full_name)


class FakeLLM:
    """Records prompts and returns a canned answer."""

    def __init__(self, answer: str = "```markdown\n# Project\n\nGenerated README.\n```") -> None:
        self.answer = answer
        self.prompts: List[str] = []
        self.options: List[dict[str, object]] = []

    def generate(
        self,
        prompt: str,
        *,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
    ) -> str:
        self.prompts.append(prompt)
        self.options.append({"temperature": temperature, "max_output_tokens": max_output_tokens})
        return self.answer


__all__ = ["FakeHost", "FakeLLM", "LOCATOR_PREFIX"]
