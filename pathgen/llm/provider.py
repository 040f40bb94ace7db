"""Process-wide provider connection state with an explicit init/reset lifecycle."""

from __future__ import annotations

import threading
from typing import Callable, Iterable, Optional

from ..config import LLMConfig
from ..logging import get_logger
from .runner import LLMRunner

RunnerFactory = Callable[[LLMConfig], LLMRunner]


def _default_factory(config: LLMConfig) -> LLMRunner:
    kwargs: dict[str, object] = {}
    if config.model:
        kwargs["model"] = config.model
    if config.base_url is not None:
        kwargs["base_url"] = config.base_url
    if config.api_key is not None:
        kwargs["api_key"] = config.api_key
    if config.temperature is not None:
        kwargs["temperature"] = config.temperature
    if config.max_tokens is not None:
        kwargs["max_tokens"] = config.max_tokens
    if config.request_timeout is not None:
        kwargs["request_timeout"] = config.request_timeout
    return LLMRunner(**kwargs)  # type: ignore[arg-type]


class ProviderRegistry:
    """Owns the shared runner and rebuilds it when the provider settings change.

    `resolve` builds the runner lazily and reuses it while the configuration
    signature is unchanged. `reset` drops it; `notify_config_changed` resets when
    any changed key belongs to the `llm` section.
    """

    def __init__(self, factory: RunnerFactory | None = None) -> None:
        self._factory = factory or _default_factory
        self._runner: Optional[LLMRunner] = None
        self._signature: tuple[object | None, ...] | None = None
        self._observed: tuple[object | None, ...] | None = None
        self._lock = threading.Lock()
        self.logger = get_logger("provider")

    def resolve(self, config: LLMConfig | None) -> LLMRunner:
        config = config or LLMConfig()
        signature = config.signature()
        with self._lock:
            if self._runner is not None and self._signature == signature:
                return self._runner
            if self._runner is not None:
                self.logger.debug("Provider settings changed; rebuilding runner")
            self._runner = self._factory(config)
            self._signature = signature
            return self._runner

    def reset(self) -> None:
        with self._lock:
            self._runner = None
            self._signature = None

    def notify_config_changed(self, keys: Iterable[str]) -> bool:
        """Reset when a changed key is `llm` or lives under it; return whether a reset happened."""
        if any(key == "llm" or key.startswith("llm.") for key in keys):
            self.logger.debug("Provider configuration changed; resetting runner")
            self.reset()
            return True
        return False

    def observe(self, config: LLMConfig | None) -> bool:
        """Record freshly loaded provider settings, resetting when they differ from the last load."""
        signature = (config or LLMConfig()).signature()
        with self._lock:
            previous, self._observed = self._observed, signature
        if previous is None or previous == signature:
            return False
        return self.notify_config_changed(["llm"])

    @property
    def active(self) -> bool:
        return self._runner is not None


_SHARED: Optional[ProviderRegistry] = None
_SHARED_LOCK = threading.Lock()


def shared_registry() -> ProviderRegistry:
    """Return the registry shared by every orchestrator in this process."""
    global _SHARED
    with _SHARED_LOCK:
        if _SHARED is None:
            _SHARED = ProviderRegistry()
        return _SHARED


__all__ = ["ProviderRegistry", "RunnerFactory", "shared_registry"]
