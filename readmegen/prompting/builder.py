"""Builds the README generation prompt and cleans up the model's answer."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..logging import get_logger
from ..models import FileAnalysis, RepoMetadata, RepoRef, SemanticSummary
from .constants import (
    DEFAULT_MAX_PROMPT_CHARS,
    MAX_API_ENDPOINTS,
    MAX_BUSINESS_NOTES,
    README_SECTIONS,
    STYLE_DIRECTIVE,
)

_LEADING_FENCE = re.compile(r"^\s*```(?:markdown|md)?[ \t]*(?:\r?\n|$)", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\r?\n?```\s*$")
_FENCE_LINE = re.compile(r"^[ \t]*```", re.MULTILINE)

_LOGGER = get_logger("prompting")


class PromptComposer:
    """Assembles metadata, per-file analyses and the summary into one bounded prompt."""

    def __init__(
        self,
        templates_dir: Path | None = None,
        *,
        max_prompt_chars: int = DEFAULT_MAX_PROMPT_CHARS,
        max_notes: int = MAX_BUSINESS_NOTES,
        max_endpoints: int = MAX_API_ENDPOINTS,
    ) -> None:
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self.max_prompt_chars = max_prompt_chars
        self.max_notes = max_notes
        self.max_endpoints = max_endpoints
        self._env = self._create_env(self.templates_dir)

    def compose(
        self,
        ref: RepoRef,
        metadata: Optional[RepoMetadata],
        summary: SemanticSummary,
        analyses: Sequence[FileAnalysis],
    ) -> str:
        metadata = metadata or RepoMetadata(full_name=ref.full_name)
        rendered = [self.render_file(analysis) for analysis in analyses]

        base_length = len(self._render_prompt(ref, metadata, summary, [], omitted=len(rendered)))
        included: List[str] = []
        used = base_length
        for section in rendered:
            # Each section is followed by one blank line in the template.
            cost = len(section) + 1
            if used + cost > self.max_prompt_chars:
                break
            included.append(section)
            used += cost

        omitted = len(rendered) - len(included)
        if omitted:
            _LOGGER.info(
                "Prompt limit reached; omitting %s of %s file sections", omitted, len(rendered)
            )
        return self._render_prompt(ref, metadata, summary, included, omitted=omitted)

    def render_file(self, analysis: FileAnalysis) -> str:
        template = self._env.get_template("file_section.j2")
        return template.render(
            analysis=analysis,
            routes=[route.label() for route in analysis.api_routes],
            fence_language=(analysis.language or "").lower().replace(" ", ""),
        )

    def _render_prompt(
        self,
        ref: RepoRef,
        metadata: RepoMetadata,
        summary: SemanticSummary,
        file_sections: Sequence[str],
        *,
        omitted: int,
    ) -> str:
        template = self._env.get_template("prompt.j2")
        return template.render(
            repo=ref,
            metadata=metadata,
            summary=summary,
            file_sections=file_sections,
            omitted=omitted,
            endpoints=[route.label() for route in summary.api_endpoints[: self.max_endpoints]],
            endpoints_omitted=max(0, len(summary.api_endpoints) - self.max_endpoints),
            notes=summary.business_logic_notes[: self.max_notes],
            sections=README_SECTIONS,
            style=STYLE_DIRECTIVE,
        ).strip() + "\n"

    @staticmethod
    def _create_env(templates_dir: Path) -> Environment:
        directories = [str(templates_dir)]
        default_dir = str(Path(__file__).with_name("templates"))
        if default_dir not in directories:
            directories.append(default_dir)
        return Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )


def postprocess(text: str) -> str:
    """Strip code fences wrapping the answer; other text is returned untouched.

    A trailing fence is removed only when it is unbalanced, so a README that
    ends with a closed code block keeps it.
    """
    body = text
    leading = _LEADING_FENCE.match(body)
    if leading is not None:
        body = body[leading.end():]
    trailing = _TRAILING_FENCE.search(body)
    if trailing is not None and len(_FENCE_LINE.findall(body)) % 2 == 1:
        body = body[: trailing.start()]
    if body is text:
        return text
    return body.strip()


__all__ = ["PromptComposer", "postprocess"]
