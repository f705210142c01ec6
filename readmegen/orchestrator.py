"""Pipeline orchestration for one README generation run."""

from __future__ import annotations

import time
import uuid
from typing import Callable, List, Optional, Protocol, Sequence, Tuple

from .aggregator import SemanticAggregator
from .analyzers import FileAnalyzer
from .analyzers.listing import analyze_listing
from .config import ReadmeGenConfig
from .crawler import TreeCrawler
from .errors import GenerationError, NotFound, ReadmeGenError, RunCancelled
from .fetcher import ContentFetcher
from .github.base import ContentSource, DirectoryLister
from .github.client import GitHubClient
from .llm.runner import LLMRunner
from .logging import get_logger, run_logger
from .models import (
    FileAnalysis,
    GeneratedDocument,
    PrioritizedFile,
    RepoMetadata,
    RepoRef,
    SemanticSummary,
)
from .prioritizer import FilePrioritizer
from .progress import CancellationToken, ProgressPhase, ProgressReporter, ProgressSink
from .prompting.builder import PromptComposer, postprocess
from .url_parser import parse_repo_url

# Percent ranges per phase.
_PARSING = 5
_CRAWL_START, _CRAWL_END = 10, 25
_FETCH_END = 40
_ANALYZE_END = 70
_GENERATING = 75


class RepositoryHost(DirectoryLister, ContentSource, Protocol):
    """A host able to list directories and return file content."""


class TextGenerator(Protocol):
    def generate(
        self,
        prompt: str,
        *,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
    ) -> str:
        ...


class Orchestrator:
    """Coordinates crawl, analysis, prompt assembly and generation for one repository."""

    def __init__(
        self,
        host: RepositoryHost,
        llm: TextGenerator,
        *,
        config: ReadmeGenConfig | None = None,
        composer: PromptComposer | None = None,
        aggregator: SemanticAggregator | None = None,
        file_analyzer: FileAnalyzer | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.host = host
        self.llm = llm
        self.config = config or ReadmeGenConfig()
        analysis = self.config.analysis
        self.prioritizer = FilePrioritizer(analysis.max_files)
        self.file_analyzer = file_analyzer or FileAnalyzer(
            snippet_max_lines=analysis.snippet_max_lines,
            config_excerpt_chars=analysis.config_excerpt_chars,
        )
        self.aggregator = aggregator or SemanticAggregator()
        self.composer = composer or PromptComposer(max_prompt_chars=analysis.max_prompt_chars)
        self._sleep = sleep
        self.logger = get_logger("orchestrator")

    @classmethod
    def from_config(
        cls,
        config: ReadmeGenConfig,
        *,
        host: RepositoryHost | None = None,
        llm: TextGenerator | None = None,
    ) -> "Orchestrator":
        host = host or GitHubClient.from_config(config.github)
        return cls(host, llm or LLMRunner.from_config(config.llm), config=config)

    def run(
        self,
        repo: str | RepoRef,
        metadata: RepoMetadata | None = None,
        *,
        run_id: str | None = None,
        sink: ProgressSink | None = None,
        cancel: CancellationToken | None = None,
    ) -> GeneratedDocument:
        """Generate the README for ``repo``, reporting progress to ``sink``."""
        run_id = run_id or uuid.uuid4().hex
        cancel = cancel or CancellationToken()
        reporter = ProgressReporter(sink, run_id, cancel=cancel)
        log = run_logger("orchestrator", run_id)
        reporter.emit(ProgressPhase.PARSING, _PARSING, "Parsing repository reference")
        try:
            ref = repo if isinstance(repo, RepoRef) else parse_repo_url(repo)
            log.info("Generating README for %s", ref.full_name)
            metadata = metadata or RepoMetadata(full_name=ref.full_name)

            analyses, listing, summary = self.analyze(
                ref, metadata, reporter=reporter, cancel=cancel
            )

            reporter.emit(ProgressPhase.GENERATING, _GENERATING, "Generating README content")
            prompt = self.composer.compose(ref, metadata, summary, analyses)
            cancel.raise_if_cancelled()
            raw = self.llm.generate(
                prompt,
                temperature=self.config.llm.temperature,
                max_output_tokens=self.config.llm.max_tokens,
            )
            cancel.raise_if_cancelled()
            markdown = postprocess(raw).strip()
            if not markdown:
                raise GenerationError("The model returned an empty README")
        except RunCancelled:
            log.info("Run cancelled")
            raise
        except ReadmeGenError as exc:
            log.error("Run failed (%s): %s", exc.kind, exc)
            reporter.fail(str(exc))
            raise
        except Exception as exc:
            log.exception("Run failed unexpectedly")
            reporter.fail(f"Unexpected error: {exc}")
            raise

        reporter.complete("README generated successfully")
        return GeneratedDocument(
            markdown_text=markdown,
            source_summary=summary,
            analyses=tuple(analyses),
            listing=tuple(listing),
        )

    def analyze(
        self,
        ref: RepoRef,
        metadata: RepoMetadata | None = None,
        *,
        reporter: ProgressReporter | None = None,
        cancel: CancellationToken | None = None,
    ) -> Tuple[List[FileAnalysis], List[FileAnalysis], SemanticSummary]:
        """Crawl, select, fetch and analyze files, then fold them into a summary.

        Besides the fetched files, every crawled name and path is read once so
        languages and marker files past the selection cutoff still count.
        """
        reporter = reporter or ProgressReporter(None, ref.full_name)
        gh = self.config.github
        crawler = TreeCrawler(
            self.host,
            max_depth=gh.max_depth,
            max_items_per_dir=gh.max_items_per_dir,
            max_file_size=gh.max_file_size,
            throttle_every=gh.throttle_every,
            throttle_seconds=gh.throttle_seconds,
            sleep=self._sleep,
            cancel=cancel,
        )

        def _crawl_progress(index: int, total: int, path: str) -> None:
            percent = _CRAWL_START + (_CRAWL_END - _CRAWL_START) * index / max(total, 1)
            reporter.emit(ProgressPhase.FETCHING, percent, f"Scanning {path} ({index}/{total})")

        entries = crawler.crawl(ref, _crawl_progress)
        if not entries:
            raise NotFound("No accessible files found in repository")

        selected = self.prioritizer.prioritize(entries)
        self.logger.debug(
            "Selected %d of %d files for analysis", len(selected), len(entries)
        )
        contents = self._fetch_all(selected, reporter, cancel)

        analyses: List[FileAnalysis] = []
        total = len(contents)
        for index, (item, text) in enumerate(contents, start=1):
            if cancel is not None:
                cancel.raise_if_cancelled()
            analyses.append(self.file_analyzer.analyze(text, item.path))
            percent = _FETCH_END + (_ANALYZE_END - _FETCH_END) * index / max(total, 1)
            reporter.emit(ProgressPhase.ANALYZING, percent, f"Analyzed {item.path}")

        listing = analyze_listing(entries)
        summary = self.aggregator.aggregate(
            analyses, metadata.language if metadata else None, listing
        )
        self.logger.info(
            "Analyzed %d files: %s", len(analyses), summary.project_archetype.value
        )
        return analyses, listing, summary

    def _fetch_all(
        self,
        selected: Sequence[PrioritizedFile],
        reporter: ProgressReporter,
        cancel: CancellationToken | None,
    ) -> List[Tuple[PrioritizedFile, str]]:
        fetcher = ContentFetcher(
            self.host, max_bytes=self.config.github.max_content_bytes, cancel=cancel
        )
        fetched: List[Tuple[PrioritizedFile, str]] = []
        total = len(selected)
        for index, item in enumerate(selected, start=1):
            text = fetcher.fetch(item.entry)
            if text is not None:
                fetched.append((item, text))
            percent = _CRAWL_END + (_FETCH_END - _CRAWL_END) * index / max(total, 1)
            reporter.emit(ProgressPhase.FETCHING, percent, f"Fetched {item.path}")
        self.logger.debug("Fetched %d of %d selected files", len(fetched), total)
        return fetched


__all__ = ["Orchestrator", "RepositoryHost", "TextGenerator"]
