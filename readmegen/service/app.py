"""FastAPI application entrypoint for readmegen service mode."""

from __future__ import annotations

import asyncio
import json
import threading
import uuid
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Callable, Dict, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel

from .. import __version__
from ..config import ReadmeGenConfig, load_config
from ..errors import (
    AccessDenied,
    GenerationError,
    MalformedInput,
    NotFound,
    RateLimited,
    ReadmeGenError,
    RunCancelled,
)
from ..github.client import GitHubClient
from ..llm.runner import LLMRunner
from ..logging import get_logger
from ..models import RepoMetadata, RepoRef
from ..orchestrator import Orchestrator, TextGenerator
from ..progress import CancellationToken, ProgressEvent, ProgressReporter
from ..url_parser import parse_repo_url

_LOGGER = get_logger("service")

# Checked in order; the first matching class decides the status code.
_ERROR_STATUS = (
    (MalformedInput, 400),
    (NotFound, 404),
    (AccessDenied, 403),
    (RateLimited, 429),
    (GenerationError, 502),
    (RunCancelled, 409),
)

_CONNECTIVITY_PROMPT = "Hello! Respond with 'API working!'"

_ENDPOINTS = [
    "GET /health",
    "GET /test-llm",
    "POST /generate-readme",
    "GET /progress/{run_id}",
    "POST /cancel/{run_id}",
]


class GenerateRequest(BaseModel):
    repo_url: str
    run_id: Optional[str] = None


class GenerateResponse(BaseModel):
    readme: str
    analysis: Dict[str, Any]
    repository: Dict[str, Any]
    run_id: str


class HealthResponse(BaseModel):
    status: str
    github_token_configured: bool
    llm_api_key_configured: bool


@dataclass
class ProgressChannel:
    """Event queue and cancellation token of one run."""

    run_id: str
    loop: asyncio.AbstractEventLoop
    queue: "asyncio.Queue[Optional[ProgressEvent]]" = field(default_factory=asyncio.Queue)
    cancel: CancellationToken = field(default_factory=CancellationToken)
    subscribed: bool = False


class ProgressChannelRegistry:
    """Maps run ids to progress channels; used as the pipeline's progress sink.

    ``emit`` is called from worker threads and hands events to the channel's
    event loop.
    """

    def __init__(self) -> None:
        self._channels: Dict[str, ProgressChannel] = {}
        self._lock = threading.Lock()

    def open(self, run_id: str, loop: asyncio.AbstractEventLoop) -> ProgressChannel:
        with self._lock:
            channel = self._channels.get(run_id)
            if channel is None:
                channel = ProgressChannel(run_id=run_id, loop=loop)
                self._channels[run_id] = channel
            return channel

    def get(self, run_id: str) -> Optional[ProgressChannel]:
        with self._lock:
            return self._channels.get(run_id)

    def remove(self, run_id: str) -> None:
        with self._lock:
            self._channels.pop(run_id, None)

    def cancel(self, run_id: str) -> bool:
        channel = self.get(run_id)
        if channel is None:
            return False
        channel.cancel.cancel()
        self._deliver(channel, None)
        return True

    def emit(self, run_id: str, event: ProgressEvent) -> None:
        channel = self.get(run_id)
        if channel is None:
            return
        self._deliver(channel, event)

    def __contains__(self, run_id: object) -> bool:
        with self._lock:
            return run_id in self._channels

    def __len__(self) -> int:
        with self._lock:
            return len(self._channels)

    @staticmethod
    def _deliver(channel: ProgressChannel, event: Optional[ProgressEvent]) -> None:
        try:
            channel.loop.call_soon_threadsafe(channel.queue.put_nowait, event)
        except RuntimeError:
            _LOGGER.debug("Event loop for run %s is closed; dropping event", channel.run_id)


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] | None = None,
    metadata_loader: Callable[[RepoRef], RepoMetadata] | None = None,
    config: ReadmeGenConfig | None = None,
    *,
    stream_idle_timeout: float = 300.0,
    heartbeat_seconds: float = 15.0,
    llm_factory: Callable[[], TextGenerator] | None = None,
) -> FastAPI:
    """Create the FastAPI application exposing readmegen operations."""
    settings = config or load_config()
    if orchestrator_factory is None:

        def orchestrator_factory() -> Orchestrator:
            return Orchestrator.from_config(settings)

    if llm_factory is None:

        def llm_factory() -> TextGenerator:
            return LLMRunner.from_config(settings.llm)

    model_name = settings.llm.model or LLMRunner.DEFAULT_MODELS.get(settings.llm.provider)

    if metadata_loader is None:
        client = GitHubClient.from_config(settings.github)
        metadata_loader = client.get_repository

    app = FastAPI(title="readmegen", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.service.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    registry = ProgressChannelRegistry()
    app.state.progress_registry = registry

    @app.exception_handler(ReadmeGenError)
    async def readmegen_error_handler(_: Request, exc: ReadmeGenError) -> JSONResponse:
        return JSONResponse(status_code=_status_for(exc), content=exc.to_dict())

    @app.get("/")
    async def index() -> Dict[str, Any]:
        return {
            "name": "readmegen",
            "version": __version__,
            "endpoints": _ENDPOINTS,
            "model": model_name,
        }

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(
            status="ok",
            github_token_configured=bool(settings.github.token),
            llm_api_key_configured=bool(settings.llm.api_key),
        )

    @app.get("/test-llm")
    async def llm_check() -> JSONResponse:
        """Send one short prompt to the configured provider."""
        loop = asyncio.get_running_loop()
        has_api_key = bool(settings.llm.api_key)

        def _ping() -> str:
            return llm_factory().generate(_CONNECTIVITY_PROMPT, max_output_tokens=32)

        try:
            text = await loop.run_in_executor(None, _ping)
        except ReadmeGenError as exc:
            _LOGGER.warning("LLM connectivity check failed: %s", exc)
            return JSONResponse(
                status_code=502,
                content={
                    "success": False,
                    "model": model_name,
                    "error": str(exc),
                    "kind": exc.kind,
                    "hasApiKey": has_api_key,
                },
            )
        return JSONResponse(
            content={
                "success": True,
                "model": model_name,
                "response": text,
                "hasApiKey": has_api_key,
            }
        )

    @app.post("/generate-readme", response_model=GenerateResponse)
    async def generate_readme(payload: GenerateRequest) -> GenerateResponse:
        run_id = payload.run_id or uuid.uuid4().hex
        ref = parse_repo_url(payload.repo_url)
        loop = asyncio.get_running_loop()
        channel = registry.open(run_id, loop)

        def _run() -> tuple[RepoMetadata, Any]:
            try:
                metadata = metadata_loader(ref)
            except ReadmeGenError as exc:
                ProgressReporter(registry, run_id, cancel=channel.cancel).fail(str(exc))
                raise
            document = orchestrator_factory().run(
                ref,
                metadata,
                run_id=run_id,
                sink=registry,
                cancel=channel.cancel,
            )
            return metadata, document

        try:
            metadata, document = await loop.run_in_executor(None, _run)
        finally:
            if not channel.subscribed:
                registry.remove(run_id)

        return GenerateResponse(
            readme=document.markdown_text,
            analysis=document.source_summary.to_dict(),
            repository=metadata.to_dict(),
            run_id=run_id,
        )

    @app.get("/progress/{run_id}")
    async def progress(run_id: str, request: Request) -> StreamingResponse:
        channel = registry.open(run_id, asyncio.get_running_loop())
        channel.subscribed = True
        poll = min(heartbeat_seconds, stream_idle_timeout)

        async def _stream() -> AsyncIterator[str]:
            idle = 0.0
            try:
                while True:
                    try:
                        event = await asyncio.wait_for(channel.queue.get(), timeout=poll)
                    except asyncio.TimeoutError:
                        if await request.is_disconnected():
                            break
                        idle += poll
                        if idle >= stream_idle_timeout:
                            _LOGGER.info("Progress stream for run %s idled out", run_id)
                            break
                        yield ": keep-alive\n\n"
                        continue
                    if event is None:
                        break
                    idle = 0.0
                    yield f"data: {json.dumps(event.to_dict())}\n\n"
                    if event.phase.terminal:
                        break
            finally:
                registry.remove(run_id)

        return StreamingResponse(
            _stream(),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        )

    @app.post("/cancel/{run_id}")
    async def cancel_run(run_id: str) -> JSONResponse:
        if not registry.cancel(run_id):
            return JSONResponse(
                status_code=404,
                content={"error": f"Unknown run '{run_id}'", "kind": "not_found"},
            )
        return JSONResponse(content={"run_id": run_id, "cancelled": True})

    return app


def _status_for(exc: ReadmeGenError) -> int:
    for error_type, status in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return status
    return 500


def run_service(
    host: str | None = None,
    port: int | None = None,
    *,
    config: ReadmeGenConfig | None = None,
) -> None:  # pragma: no cover - integration path
    settings = config or load_config()
    app = create_app(config=settings)
    uvicorn.run(app, host=host or settings.service.host, port=port or settings.service.port)


__all__ = ["ProgressChannel", "ProgressChannelRegistry", "create_app", "run_service"]
