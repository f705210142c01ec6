"""Adapters around hosted generative-text APIs (Gemini / OpenAI-compatible)."""

from __future__ import annotations

import json
from http.client import HTTPException
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ..config import LLMConfig
from ..errors import ConfigError, GenerationError
from ..logging import get_logger

_LOGGER = get_logger("llm")


@dataclass
class LLMRequest:
    """Represents one generation request."""

    prompt: str
    provider: str
    model: str
    temperature: Optional[float]
    max_tokens: Optional[int]
    base_url: str
    api_key: Optional[str]
    request_timeout: Optional[float]


class LLMRunner:
    """Sends a prompt to the configured provider and returns the generated text."""

    DEFAULT_MODELS = {"gemini": "gemini-2.0-flash", "openai": "gpt-4o-mini"}
    DEFAULT_BASE_URLS = {
        "gemini": "https://generativelanguage.googleapis.com/v1beta",
        "openai": "https://api.openai.com/v1",
    }

    def __init__(
        self,
        model: str | None = None,
        *,
        provider: str = "gemini",
        base_url: str | None = None,
        temperature: Optional[float] = 0.7,
        max_tokens: Optional[int] = 4096,
        api_key: str | None = None,
        request_timeout: Optional[float] = 120.0,
        runner: Callable[[LLMRequest], str] | None = None,
    ) -> None:
        self.provider = provider.lower()
        if self.provider not in self.DEFAULT_BASE_URLS:
            raise ConfigError(f"Unsupported LLM provider '{provider}'")
        self.model = model or self.DEFAULT_MODELS[self.provider]
        self.base_url = (base_url or self.DEFAULT_BASE_URLS[self.provider]).rstrip("/")
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.api_key = api_key
        self.request_timeout = request_timeout
        if runner is not None:
            self._runner = runner
        elif self.provider == "gemini":
            self._runner = self._gemini_runner
        else:
            self._runner = self._openai_runner

    @classmethod
    def from_config(
        cls, config: LLMConfig, *, runner: Callable[[LLMRequest], str] | None = None
    ) -> "LLMRunner":
        return cls(
            config.model,
            provider=config.provider,
            base_url=config.base_url,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            api_key=config.api_key,
            request_timeout=config.request_timeout,
            runner=runner,
        )

    def generate(
        self,
        prompt: str,
        *,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
    ) -> str:
        """Return the provider's text for the prompt; raises GenerationError on failure."""
        request = LLMRequest(
            prompt=prompt,
            provider=self.provider,
            model=self.model,
            temperature=self.temperature if temperature is None else temperature,
            max_tokens=self.max_tokens if max_output_tokens is None else max_output_tokens,
            base_url=self.base_url,
            api_key=self.api_key,
            request_timeout=self.request_timeout,
        )
        _LOGGER.debug(
            "Requesting %s completion from %s (%s prompt chars)",
            request.model,
            request.provider,
            len(prompt),
        )
        text = self._runner(request)
        if not text or not text.strip():
            raise GenerationError(f"No content generated by the {self.provider} API")
        return text

    @staticmethod
    def _gemini_runner(request: LLMRequest) -> str:
        if not request.api_key:
            raise GenerationError("Gemini API key not configured")
        endpoint = f"{request.base_url}/models/{request.model}:generateContent"
        generation_config: Dict[str, Any] = {"topK": 40, "topP": 0.95}
        if request.temperature is not None:
            generation_config["temperature"] = request.temperature
        if request.max_tokens is not None:
            generation_config["maxOutputTokens"] = request.max_tokens
        payload = {
            "contents": [{"parts": [{"text": request.prompt}]}],
            "generationConfig": generation_config,
        }
        response = LLMRunner._post_json(
            endpoint, payload, {"x-goog-api-key": request.api_key}, request.request_timeout
        )
        return LLMRunner._extract_gemini_text(response)

    @staticmethod
    def _openai_runner(request: LLMRequest) -> str:
        endpoint = f"{request.base_url}/chat/completions"
        payload: Dict[str, Any] = {
            "model": request.model,
            "messages": [{"role": "user", "content": request.prompt}],
        }
        if request.temperature is not None:
            payload["temperature"] = request.temperature
        if request.max_tokens is not None:
            payload["max_tokens"] = request.max_tokens
        headers = {}
        if request.api_key:
            headers["Authorization"] = f"Bearer {request.api_key}"
        response = LLMRunner._post_json(endpoint, payload, headers, request.request_timeout)
        return LLMRunner._extract_openai_text(response)

    @staticmethod
    def _post_json(
        endpoint: str,
        payload: Dict[str, Any],
        headers: Dict[str, str],
        timeout: Optional[float],
    ) -> Dict[str, Any]:
        data = json.dumps(payload).encode("utf-8")
        http_request = Request(
            endpoint,
            data=data,
            headers={"Content-Type": "application/json", **headers},
            method="POST",
        )
        try:
            with urlopen(http_request, timeout=timeout or 120.0) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
            message = detail.strip() or exc.reason
            raise GenerationError(f"LLM API error {exc.code}: {message}") from exc
        except URLError as exc:
            raise GenerationError(f"LLM API unreachable: {exc.reason}") from exc
        except (OSError, HTTPException) as exc:
            raise GenerationError(f"LLM API request failed: {exc!r}") from exc

        try:
            decoded = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise GenerationError("LLM API returned invalid JSON") from exc
        if not isinstance(decoded, dict):
            raise GenerationError("LLM API returned an unexpected payload")
        return decoded

    @staticmethod
    def _extract_gemini_text(payload: Dict[str, Any]) -> str:
        candidates = payload.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            return ""
        content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            return ""
        return "".join(
            part["text"] for part in parts if isinstance(part, dict) and isinstance(part.get("text"), str)
        )

    @staticmethod
    def _extract_openai_text(payload: Dict[str, Any]) -> str:
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            return ""
        first = choices[0]
        if not isinstance(first, dict):
            return ""
        message = first.get("message")
        if isinstance(message, dict):
            content = message.get("content")
            if isinstance(content, str):
                return content
        text = first.get("text")
        if isinstance(text, str):
            return text
        return ""


__all__ = ["LLMRequest", "LLMRunner"]
