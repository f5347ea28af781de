"""
LLM provider adapters.

Each provider knows its endpoint, default model and request/response envelope.
``LLMClient`` holds the active provider, chosen from ``PROVIDER_REGISTRY`` at
configuration time. No retries are performed here.
"""
from typing import Any, Dict, Optional, Type

import requests

from resume_ranker.helpers.prompts import SYSTEM_PREAMBLE
from resume_ranker.models.llm_settings import LLMSettings, ProviderKind
from resume_ranker.utils.exceptions import ConfigurationError, NotConfiguredError, ProviderError
from resume_ranker.utils.logging_config import get_logger, PerformanceMonitor

logger = get_logger(__name__)

TEMPERATURE = 0.3


class LLMProvider:
    """One concrete LLM endpoint. Subclasses fill in the envelope handling."""

    kind: ProviderKind = None
    display_name: str = ""
    default_model: str = ""

    def __init__(self, api_key: str = "", model: Optional[str] = None, timeout: int = 120):
        self.api_key = api_key or ""
        self.model = model or self.default_model
        self.timeout = timeout

    @property
    def endpoint(self) -> str:
        raise NotImplementedError

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def build_request(self, prompt: str) -> Dict[str, Any]:
        """Return ``{"url", "headers", "json"}`` for a single completion call."""
        raise NotImplementedError

    def parse_response(self, payload: Dict[str, Any]) -> str:
        raise NotImplementedError

    def complete(self, prompt: str) -> str:
        if not self.is_configured():
            raise NotConfiguredError()

        request = self.build_request(prompt)
        with PerformanceMonitor(f"{self.display_name} completion", logger, threshold_ms=30000):
            try:
                resp = requests.post(
                    request["url"],
                    headers=request.get("headers"),
                    json=request["json"],
                    timeout=self.timeout,
                )
            except requests.RequestException as e:
                raise ProviderError(self.display_name, status_or_reason=type(e).__name__, body=str(e), cause=e) from e

            if not resp.ok:
                raise ProviderError(self.display_name, status_or_reason=resp.status_code, body=resp.text)

            try:
                payload = resp.json()
            except ValueError as e:
                raise ProviderError(
                    self.display_name, status_or_reason="invalid JSON envelope", body=resp.text, cause=e
                ) from e

        return self.parse_response(payload) or ""


class OpenAIProvider(LLMProvider):
    """OpenAI chat-completions envelope."""

    kind = ProviderKind.OPENAI
    display_name = "OpenAI"
    default_model = "gpt-4o-mini"
    base_url = "https://api.openai.com/v1/chat/completions"
    force_json_response = True

    @property
    def endpoint(self) -> str:
        return self.base_url

    def build_request(self, prompt: str) -> Dict[str, Any]:
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PREAMBLE},
                {"role": "user", "content": prompt},
            ],
            "temperature": TEMPERATURE,
        }
        if self.force_json_response:
            body["response_format"] = {"type": "json_object"}
        return {
            "url": self.endpoint,
            "headers": {
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            "json": body,
        }

    def parse_response(self, payload: Dict[str, Any]) -> str:
        choices = (payload or {}).get("choices") or []
        if not choices:
            return ""
        message = (choices[0] or {}).get("message") or {}
        return message.get("content") or ""


class QwenProvider(OpenAIProvider):
    """DashScope's OpenAI-compatible mode; same envelope, no forced JSON mode."""

    kind = ProviderKind.QWEN
    display_name = "Qwen"
    default_model = "qwen-turbo"
    base_url = "https://dashscope.aliyuncs.com/compatible-mode/v1/chat/completions"
    force_json_response = False


class GeminiProvider(LLMProvider):
    """Gemini generateContent envelope; the key travels as a query parameter."""

    kind = ProviderKind.GEMINI
    display_name = "Gemini"
    default_model = "gemini-2.0-flash"
    base_url = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

    @property
    def endpoint(self) -> str:
        return self.base_url.format(model=self.model)

    def build_request(self, prompt: str) -> Dict[str, Any]:
        return {
            "url": f"{self.endpoint}?key={self.api_key}",
            "headers": {"Content-Type": "application/json"},
            "json": {
                "contents": [
                    {"parts": [{"text": f"{SYSTEM_PREAMBLE}\n\n{prompt}"}]}
                ],
                "generationConfig": {
                    "temperature": TEMPERATURE,
                    "responseMimeType": "application/json",
                },
            },
        }

    def parse_response(self, payload: Dict[str, Any]) -> str:
        candidates = (payload or {}).get("candidates") or []
        if not candidates:
            return ""
        content = (candidates[0] or {}).get("content") or {}
        parts = content.get("parts") or []
        if not parts:
            return ""
        return (parts[0] or {}).get("text") or ""


PROVIDER_REGISTRY: Dict[ProviderKind, Type[LLMProvider]] = {
    ProviderKind.OPENAI: OpenAIProvider,
    ProviderKind.GEMINI: GeminiProvider,
    ProviderKind.QWEN: QwenProvider,
}


class LLMClient:
    """Holds the active provider. Safe to share; configure swaps the provider atomically."""

    def __init__(self, settings: LLMSettings = None):
        self.settings = settings or LLMSettings()
        self._provider: LLMProvider = self._build(self.settings.provider, "")
        if self.settings.api_key:
            self.configure(self.settings.provider, self.settings.api_key)

    def _build(self, kind: ProviderKind, api_key: str) -> LLMProvider:
        provider_cls = PROVIDER_REGISTRY.get(kind)
        if provider_cls is None:
            raise ConfigurationError(f"No provider registered for {kind}", config_key="provider", config_value=kind)
        # The model override only applies to the provider it was configured for
        model = self.settings.model if kind == self.settings.provider else None
        return provider_cls(api_key=api_key, model=model, timeout=self.settings.timeout)

    def configure(self, provider_kind, api_key: str) -> None:
        try:
            kind = ProviderKind.parse(provider_kind)
        except ValueError as e:
            raise ConfigurationError(str(e), config_key="provider", config_value=provider_kind, cause=e) from e
        self._provider = self._build(kind, (api_key or "").strip())
        logger.info(f"LLM client configured for {self._provider.display_name} ({self._provider.model})")

    def is_configured(self) -> bool:
        return self._provider.is_configured()

    @property
    def provider(self) -> LLMProvider:
        return self._provider

    @property
    def provider_kind(self) -> ProviderKind:
        return self._provider.kind

    @property
    def model(self) -> str:
        return self._provider.model

    def complete(self, prompt: str) -> str:
        return self._provider.complete(prompt)
