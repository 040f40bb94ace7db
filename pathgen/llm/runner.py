"""Adapter around OpenAI-compatible chat completion endpoints."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ..errors import ProviderError
from ..logging import get_logger

_AUTO_BASE_URL = object()
_AUTO_API_KEY = object()

_LOGGER = get_logger("llm")


@dataclass
class LLMRequest:
    """Represents a single chat completion request."""

    prompt: str
    system: Optional[str]
    model: str
    json_mode: bool
    temperature: Optional[float]
    max_tokens: Optional[int]
    base_url: str
    api_key: Optional[str]
    request_timeout: Optional[float]


class LLMRunner:
    """Executes prompts against the configured text-generation provider."""

    DEFAULT_MODEL = "gpt-4.1-mini"
    DEFAULT_BASE_URL = "https://api.openai.com/v1"
    ENV_MODEL_KEYS = ("PATHGEN_LLM_MODEL", "OPENAI_MODEL")
    ENV_BASE_URL_KEYS = ("PATHGEN_LLM_BASE_URL", "OPENAI_BASE_URL")
    ENV_API_KEY_KEYS = ("PATHGEN_LLM_API_KEY", "OPENAI_API_KEY")

    def __init__(
        self,
        model: str | None = None,
        *,
        base_url: str | None | object = _AUTO_BASE_URL,
        api_key: str | None | object = _AUTO_API_KEY,
        temperature: Optional[float] = 0.2,
        max_tokens: Optional[int] = None,
        request_timeout: Optional[float] = 60.0,
        runner: Callable[[LLMRequest], str] | None = None,
    ) -> None:
        self.model = self._resolve_model(model)
        self.base_url = self._resolve_base_url(base_url)
        self.api_key = self._resolve_api_key(api_key)
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.request_timeout = request_timeout
        if runner is not None:
            self._runner = runner
        else:
            if not self.api_key:
                raise ProviderError(
                    "API key is not set. Configure llm.api_key in .pathgen.yml "
                    "or export PATHGEN_LLM_API_KEY."
                )
            self._runner = self._http_runner

    def run(self, prompt: str, *, system: str | None = None, json_mode: bool = False) -> str:
        """Send the prompt to the configured model and return the response text."""
        request = LLMRequest(
            prompt=prompt,
            system=system,
            model=self.model,
            json_mode=json_mode,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            base_url=self.base_url,
            api_key=self.api_key,
            request_timeout=self.request_timeout,
        )
        _LOGGER.debug("Sending %s request to %s", "JSON" if json_mode else "text", self.model)
        return self._runner(request)

    def list_models(self) -> List[str]:
        """Return the model ids advertised by the provider, sorted."""
        payload = self._get_json(f"{self.base_url}/models")
        data = payload.get("data")
        if not isinstance(data, list):
            raise ProviderError("Provider returned an unexpected model listing")
        ids = [item.get("id") for item in data if isinstance(item, dict)]
        return sorted(model_id for model_id in ids if isinstance(model_id, str) and model_id)

    @staticmethod
    def _http_runner(request: LLMRequest) -> str:
        endpoint = f"{request.base_url}/chat/completions"
        payload: dict[str, object] = {
            "model": request.model,
            "messages": LLMRunner._build_messages(request.system, request.prompt),
        }
        if request.json_mode:
            payload["response_format"] = {"type": "json_object"}
        if request.temperature is not None:
            payload["temperature"] = request.temperature
        if request.max_tokens is not None:
            payload["max_tokens"] = request.max_tokens

        data = json.dumps(payload).encode("utf-8")
        http_request = Request(
            endpoint,
            data=data,
            headers=LLMRunner._headers(request.api_key),
            method="POST",
        )
        raw = LLMRunner._send(http_request, request.request_timeout)

        try:
            response_payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ProviderError("Provider returned invalid JSON") from exc

        content = LLMRunner._extract_content(response_payload)
        if not content:
            raise ProviderError("No response content from provider")
        return content.strip()

    def _get_json(self, url: str) -> dict:
        http_request = Request(url, headers=self._headers(self.api_key), method="GET")
        raw = self._send(http_request, self.request_timeout)
        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ProviderError("Provider returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise ProviderError("Provider returned an unexpected payload")
        return payload

    @staticmethod
    def _send(http_request: Request, timeout: Optional[float]) -> bytes:
        try:
            with urlopen(http_request, timeout=timeout or 60.0) as response:  # type: ignore[arg-type]
                return response.read()
        except HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
            message = detail.strip() or exc.reason
            raise ProviderError(f"Provider request failed with status {exc.code}: {message}") from exc
        except URLError as exc:
            raise ProviderError(f"Provider request failed: {exc.reason}") from exc

    @staticmethod
    def _headers(api_key: Optional[str]) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        return headers

    @staticmethod
    def _build_messages(system: str | None, prompt: str) -> list[dict[str, str]]:
        messages: list[dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return messages

    @staticmethod
    def _extract_content(payload: object) -> str:
        if not isinstance(payload, dict):
            return ""
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

    def _resolve_model(self, model: str | None) -> str:
        if model:
            return model
        env_value = self._first_env_value(self.ENV_MODEL_KEYS)
        if env_value:
            return env_value
        return self.DEFAULT_MODEL

    def _resolve_base_url(self, base_url: str | None | object) -> str:
        if base_url is not _AUTO_BASE_URL and base_url:
            return str(base_url).rstrip("/")
        env_value = self._first_env_value(self.ENV_BASE_URL_KEYS)
        if env_value:
            return env_value.rstrip("/")
        return self.DEFAULT_BASE_URL

    def _resolve_api_key(self, api_key: str | None | object) -> str | None:
        if api_key is _AUTO_API_KEY or api_key is None:
            return self._first_env_value(self.ENV_API_KEY_KEYS)
        return str(api_key).strip() or None

    @staticmethod
    def _first_env_value(keys: Sequence[str]) -> str | None:
        for key in keys:
            value = os.getenv(key)
            if value:
                return value
        return None


__all__ = ["LLMRequest", "LLMRunner"]
