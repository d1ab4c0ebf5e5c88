from __future__ import annotations

from typing import Any, Sequence

from tocr.services.ocr.base import HttpVisionProvider
from tocr.services.ocr.prompts import TOC_EXTRACTION_PROMPT
from tocr.services.ocr.types import OcrImage


class OpenAIOcrProvider(HttpVisionProvider):
    name = "openai"
    default_base_url = "https://api.openai.com"

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
                "type": "image_url",
                "image_url": {
                    "url": f"data:{img.mime_type};base64,{img.base64}",
                    "detail": "high",
                },
            }
            for img in images
        ]
        content.append({"type": "text", "text": TOC_EXTRACTION_PROMPT})

        body = {
            "model": model,
            "max_tokens": max_tokens,
            # Low temperature keeps the JSON shape stable.
            "temperature": 0.1 if temperature is None else temperature,
            "messages": [{"role": "user", "content": content}],
        }
        headers = {"Authorization": f"Bearer {api_key}"}
        return f"{self._base_url}/v1/chat/completions", headers, body

    def extract_text(self, payload: dict[str, Any]) -> str:
        choices = payload.get("choices") or []
        if not choices:
            return ""
        message = choices[0].get("message") or {}
        return str(message.get("content") or "")
