"""Tests for the hosted LLM runner."""

from __future__ import annotations

import io
import json
from http.client import IncompleteRead
from urllib.error import HTTPError

import pytest

from readmegen.config import LLMConfig
from readmegen.errors import ConfigError, GenerationError
from readmegen.llm.runner import LLMRunner


class FakeResponse:
    def __init__(self, payload):
        self._payload = payload

    def read(self):
        return json.dumps(self._payload).encode("utf-8")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


def _capture_urlopen(monkeypatch, payload):
    captured = {}

    def fake_urlopen(request, timeout=None):
        captured["url"] = request.full_url
        captured["headers"] = {key.lower(): value for key, value in request.header_items()}
        captured["body"] = json.loads(request.data.decode("utf-8"))
        captured["timeout"] = timeout
        return FakeResponse(payload)

    monkeypatch.setattr("readmegen.llm.runner.urlopen", fake_urlopen)
    return captured


def test_llm_runner_constructs_request() -> None:
    captured = {}

    def fake_runner(request):
        captured["prompt"] = request.prompt
        captured["provider"] = request.provider
        captured["model"] = request.model
        captured["temperature"] = request.temperature
        captured["max_tokens"] = request.max_tokens
        captured["api_key"] = request.api_key
        return "response"

    runner = LLMRunner(
        "custom-model",
        provider="openai",
        temperature=0.15,
        max_tokens=256,
        api_key="secret",
        runner=fake_runner,
    )
    result = runner.generate("Hello world", temperature=0.3)

    assert result == "response"
    assert captured == {
        "prompt": "Hello world",
        "provider": "openai",
        "model": "custom-model",
        "temperature": 0.3,
        "max_tokens": 256,
        "api_key": "secret",
    }


def test_from_config_uses_provider_defaults() -> None:
    runner = LLMRunner.from_config(LLMConfig(provider="gemini", model=None, api_key="k"))
    assert runner.model == "gemini-2.0-flash"
    assert runner.base_url == "https://generativelanguage.googleapis.com/v1beta"


def test_unknown_provider_rejected() -> None:
    with pytest.raises(ConfigError, match="mystery"):
        LLMRunner(provider="mystery")


def test_gemini_posts_generate_content(monkeypatch) -> None:
    captured = _capture_urlopen(
        monkeypatch,
        {"candidates": [{"content": {"parts": [{"text": "# Demo"}, {"text": "\nBody"}]}}]},
    )
    runner = LLMRunner("gemini-test", api_key="gkey", temperature=0.7, max_tokens=1000)

    assert runner.generate("prompt text") == "# Demo\nBody"
    assert captured["url"].endswith("/models/gemini-test:generateContent")
    assert captured["headers"]["x-goog-api-key"] == "gkey"
    assert captured["body"]["contents"] == [{"parts": [{"text": "prompt text"}]}]
    assert captured["body"]["generationConfig"] == {
        "topK": 40,
        "topP": 0.95,
        "temperature": 0.7,
        "maxOutputTokens": 1000,
    }


def test_openai_posts_chat_completion(monkeypatch) -> None:
    captured = _capture_urlopen(
        monkeypatch, {"choices": [{"message": {"role": "assistant", "content": "Hi"}}]}
    )
    runner = LLMRunner(
        "gpt-test", provider="openai", base_url="http://localhost:8080/v1/", api_key="okey"
    )

    assert runner.generate("prompt") == "Hi"
    assert captured["url"] == "http://localhost:8080/v1/chat/completions"
    assert captured["headers"]["authorization"] == "Bearer okey"
    assert captured["body"]["model"] == "gpt-test"
    assert captured["body"]["messages"] == [{"role": "user", "content": "prompt"}]


def test_gemini_without_key_fails(monkeypatch) -> None:
    def unexpected(*args, **kwargs):
        raise AssertionError("no request expected")

    monkeypatch.setattr("readmegen.llm.runner.urlopen", unexpected)
    with pytest.raises(GenerationError, match="API key"):
        LLMRunner(api_key=None).generate("prompt")


def test_http_error_becomes_generation_error(monkeypatch) -> None:
    def failing(request, timeout=None):
        raise HTTPError(
            request.full_url, 429, "Too Many Requests", {}, io.BytesIO(b"quota exceeded")
        )

    monkeypatch.setattr("readmegen.llm.runner.urlopen", failing)
    with pytest.raises(GenerationError, match="429"):
        LLMRunner(api_key="k").generate("prompt")


def test_empty_answer_is_generation_error(monkeypatch) -> None:
    _capture_urlopen(monkeypatch, {"candidates": []})
    with pytest.raises(GenerationError):
        LLMRunner(api_key="k").generate("prompt")


@pytest.mark.parametrize(
    "failure",
    [TimeoutError("The read operation timed out"), ConnectionResetError("reset"), IncompleteRead(b"")],
)
def test_transport_failure_becomes_generation_error(monkeypatch, failure) -> None:
    def failing(request, timeout=None):
        raise failure

    monkeypatch.setattr("readmegen.llm.runner.urlopen", failing)
    with pytest.raises(GenerationError, match="request failed"):
        LLMRunner(api_key="k").generate("prompt")
