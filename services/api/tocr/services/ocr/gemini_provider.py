from __future__ import annotations

from typing import Any, Sequence

from tocr.services.ocr.base import HttpVisionProvider
from tocr.services.ocr.prompts import TOC_EXTRACTION_PROMPT
from tocr.services.ocr.types import OcrImage


class GeminiOcrProvider(HttpVisionProvider):
    name = "gemini"
    default_base_url = "https://generativelanguage.googleapis.com"

    def build_request(
        self,
        images: Sequence[OcrImage],
        *,
        api_key: str,
        model: str,
        max_tokens: int,
        temperature: float | None,
    ) -> tuple[str, dict[str, str], dict[str, Any]]:
        parts: list[dict[str, Any]] = [
            {"inline_data": {"mime_type": img.mime_type, "data": img.base64}}
            for img in images
        ]
        parts.append({"text": TOC_EXTRACTION_PROMPT})

        body = {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": {
                "maxOutputTokens": max_tokens,
                "temperature": 0.1 if temperature is None else temperature,
            },
        }
        headers = {"x-goog-api-key": api_key}
        url = f"{self._base_url}/v1beta/models/{model}:generateContent"
        return url, headers, body

    def extract_text(self, payload: dict[str, Any]) -> str:
        candidates = payload.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(str(p.get("text") or "") for p in parts if isinstance(p, dict))
