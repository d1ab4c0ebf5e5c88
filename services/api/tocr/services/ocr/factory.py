from __future__ import annotations

from typing import Callable

from tocr.core.config import Settings
from tocr.services.ocr.claude_provider import ClaudeOcrProvider
from tocr.services.ocr.gemini_provider import GeminiOcrProvider
from tocr.services.ocr.openai_provider import OpenAIOcrProvider
from tocr.services.ocr.provider import OcrProvider
from tocr.services.ocr.types import OcrProviderType


class UnknownOcrProviderError(ValueError):
    pass


class OcrProviderRegistry:
    """One lazily built provider instance per type.

    Built once at startup from settings and handed to routes through a
    dependency, so tests can swap in their own registry or builders.
    """

    def __init__(
        self,
        settings: Settings,
        builders: dict[OcrProviderType, Callable[[], OcrProvider]] | None = None,
    ) -> None:
        self._settings = settings
        self._builders = builders or self._default_builders(settings)
        self._instances: dict[OcrProviderType, OcrProvider] = {}

    @staticmethod
    def _default_builders(
        s: Settings,
    ) -> dict[OcrProviderType, Callable[[], OcrProvider]]:
        common = {"max_tokens": s.ocr_max_tokens, "timeout": s.ocr_timeout_secs}
        return {
            OcrProviderType.claude: lambda: ClaudeOcrProvider(
                api_key=s.anthropic_api_key, model=s.claude_model, **common
            ),
            OcrProviderType.openai: lambda: OpenAIOcrProvider(
                api_key=s.openai_api_key, model=s.openai_model, **common
            ),
            OcrProviderType.gemini: lambda: GeminiOcrProvider(
                api_key=s.google_ai_api_key, model=s.gemini_model, **common
            ),
        }

    @staticmethod
    def resolve_type(value: str | OcrProviderType) -> OcrProviderType:
        try:
            return OcrProviderType(str(getattr(value, "value", value)).strip().lower())
        except ValueError:
            raise UnknownOcrProviderError(f"Unknown OCR provider: {value}") from None

    @property
    def default_type(self) -> OcrProviderType:
        return self.resolve_type(self._settings.default_ocr_provider)

    def get(self, value: str | OcrProviderType) -> OcrProvider:
        kind = self.resolve_type(value)
        provider = self._instances.get(kind)
        if provider is None:
            builder = self._builders.get(kind)
            if builder is None:
                raise UnknownOcrProviderError(f"OCR provider not configured: {kind.value}")
            provider = builder()
            self._instances[kind] = provider
        return provider

    def default(self) -> OcrProvider:
        return self.get(self.default_type)

    def available(self) -> list[OcrProviderType]:
        """Provider types whose API key is set."""
        keys = {
            OcrProviderType.claude: self._settings.anthropic_api_key,
            OcrProviderType.openai: self._settings.openai_api_key,
            OcrProviderType.gemini: self._settings.google_ai_api_key,
        }
        return [kind for kind, key in keys.items() if key]

    def clear(self) -> None:
        self._instances.clear()
