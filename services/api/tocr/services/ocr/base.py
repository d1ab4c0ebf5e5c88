from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Sequence

import httpx

from tocr.services.ocr.parsing import parse_model_response
from tocr.services.ocr.types import (
    OcrImage,
    OcrProviderConfig,
    OcrProviderError,
    OcrResult,
)

logger = logging.getLogger(__name__)


class HttpVisionProvider(ABC):
    """Shared request/timing/normalization flow for HTTP vision backends.

    Subclasses only describe how to build their request and where the model
    text lives in the response.
    """

    name: str = ""
    default_base_url: str = ""

    def __init__(
        self,
        *,
        api_key: str | None,
        model: str,
        max_tokens: int = 4096,
        timeout: float = 120.0,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._max_tokens = max_tokens
        self._timeout = timeout
        self._base_url = (base_url or self.default_base_url).rstrip("/")
        self._transport = transport

    @abstractmethod
    def build_request(
        self,
        images: Sequence[OcrImage],
        *,
        api_key: str,
        model: str,
        max_tokens: int,
        temperature: float | None,
    ) -> tuple[str, dict[str, str], dict[str, Any]]:
        """Return (url, headers, json_body)."""

    @abstractmethod
    def extract_text(self, payload: dict[str, Any]) -> str:
        """Pull the model's reply text out of a decoded response body."""

    async def extract_table_of_contents(
        self,
        images: Sequence[OcrImage],
        config: OcrProviderConfig | None = None,
    ) -> OcrResult:
        cfg = config or OcrProviderConfig()
        api_key = cfg.api_key or self._api_key
        if not api_key:
            raise OcrProviderError(f"{self.name} OCR failed: API key is not configured")
        if not images:
            raise OcrProviderError(f"{self.name} OCR failed: no images given")

        url, headers, body = self.build_request(
            images,
            api_key=api_key,
            model=cfg.model or self._model,
            max_tokens=cfg.max_tokens or self._max_tokens,
            temperature=cfg.temperature,
        )

        started = time.monotonic()
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                resp = await client.post(url, headers=headers, json=body)
                resp.raise_for_status()
                payload = resp.json()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "%s OCR request rejected: status=%s", self.name, exc.response.status_code
            )
            raise OcrProviderError(
                f"{self.name} OCR failed: HTTP {exc.response.status_code}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("%s OCR request failed: %s", self.name, exc)
            raise OcrProviderError(f"{self.name} OCR failed: {exc}") from exc

        parsed = parse_model_response(self.extract_text(payload))
        elapsed_ms = int((time.monotonic() - started) * 1000)
        logger.info(
            "%s OCR finished: images=%d articles=%d ms=%d",
            self.name,
            len(images),
            len(parsed.articles),
            elapsed_ms,
        )
        return OcrResult(
            articles=parsed.articles,
            metadata=parsed.metadata,
            raw_text=parsed.raw_text,
            provider=self.name,
            processing_time=elapsed_ms,
        )
