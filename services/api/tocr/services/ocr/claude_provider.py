from __future__ import annotations

from typing import Any, Sequence

from tocr.services.ocr.base import HttpVisionProvider
from tocr.services.ocr.prompts import TOC_EXTRACTION_PROMPT
from tocr.services.ocr.types import OcrImage

ANTHROPIC_VERSION = "2023-06-01"


class ClaudeOcrProvider(HttpVisionProvider):
    name = "claude"
    default_base_url = "https://api.anthropic.com"

    def build_request(
        self,
        images: Sequence[OcrImage],
        *,
        api_key: str,
        model: str,
        max_tokens: int,
        temperature: float | None,
    ) -> tuple[str, dict[str, str], dict[str, Any]]:
        content: list[dict[str, Any]] = [
            {
                "type": "image",
                "source": {"type": "base64", "media_type": img.mime_type, "data": img.base64},
            }
            for img in images
        ]
        content.append({"type": "text", "text": TOC_EXTRACTION_PROMPT})

        body: dict[str, Any] = {
            "model": model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": content}],
        }
        if temperature is not None:
            body["temperature"] = temperature

        headers = {
            "x-api-key": api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }
        return f"{self._base_url}/v1/messages", headers, body

    def extract_text(self, payload: dict[str, Any]) -> str:
        for block in payload.get("content") or []:
            if isinstance(block, dict) and block.get("type") == "text":
                return str(block.get("text") or "")
        return ""
