import asyncio
import json

import httpx
import pytest

from tocr.core.config import settings
from tocr.ingestion.fetch import ImageFetchError, fetch_image, resolve_image_url
from tocr.services.ocr.claude_provider import ClaudeOcrProvider
from tocr.services.ocr.factory import OcrProviderRegistry, UnknownOcrProviderError
from tocr.services.ocr.gemini_provider import GeminiOcrProvider
from tocr.services.ocr.openai_provider import OpenAIOcrProvider
from tocr.services.ocr.types import (
    OcrImage,
    OcrProviderConfig,
    OcrProviderError,
    OcrProviderType,
)

IMAGE = OcrImage(base64="aGVsbG8=", mime_type="image/png")
MODEL_TEXT = '```json\n{"articles": [{"title": "Cover story", "pageStart": 3}]}\n```'


def _run(coro):
    return asyncio.run(coro)


class Recorder:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def transport(self):
        return httpx.MockTransport(self)

    @property
    def body(self) -> dict:
        return json.loads(self.requests[-1].content)


def test_claude_request_and_response():
    rec = Recorder({"content": [{"type": "text", "text": MODEL_TEXT}]})
    provider = ClaudeOcrProvider(api_key="k-1", model="claude-test", transport=rec.transport)

    result = _run(provider.extract_table_of_contents([IMAGE, IMAGE]))

    req = rec.requests[0]
    assert req.url == "https://api.anthropic.com/v1/messages"
    assert req.headers["x-api-key"] == "k-1"
    assert req.headers["anthropic-version"] == "2023-06-01"
    content = rec.body["messages"][0]["content"]
    assert [c["type"] for c in content] == ["image", "image", "text"]
    assert content[0]["source"]["media_type"] == "image/png"
    assert rec.body["model"] == "claude-test"

    assert result.provider == "claude"
    assert result.articles[0].title == "Cover story"
    assert result.articles[0].page_start == 3
    assert result.processing_time >= 0


def test_openai_request_and_response():
    rec = Recorder({"choices": [{"message": {"content": MODEL_TEXT}}]})
    provider = OpenAIOcrProvider(api_key="sk-1", model="gpt-test", transport=rec.transport)

    result = _run(provider.extract_table_of_contents([IMAGE]))

    req = rec.requests[0]
    assert req.url == "https://api.openai.com/v1/chat/completions"
    assert req.headers["authorization"] == "Bearer sk-1"
    assert rec.body["temperature"] == 0.1
    image_part = rec.body["messages"][0]["content"][0]
    assert image_part["image_url"]["url"] == "data:image/png;base64,aGVsbG8="
    assert result.provider == "openai"
    assert len(result.articles) == 1


def test_gemini_request_and_response():
    rec = Recorder({"candidates": [{"content": {"parts": [{"text": MODEL_TEXT}]}}]})
    provider = GeminiOcrProvider(api_key="g-1", model="gemini-test", transport=rec.transport)

    result = _run(
        provider.extract_table_of_contents([IMAGE], OcrProviderConfig(max_tokens=256))
    )

    req = rec.requests[0]
    assert req.url.path == "/v1beta/models/gemini-test:generateContent"
    assert req.headers["x-goog-api-key"] == "g-1"
    assert rec.body["generationConfig"]["maxOutputTokens"] == 256
    assert rec.body["contents"][0]["parts"][0]["inline_data"]["data"] == "aGVsbG8="
    assert result.provider == "gemini"


def test_config_overrides_key_and_model():
    rec = Recorder({"content": [{"type": "text", "text": "[]"}]})
    provider = ClaudeOcrProvider(api_key=None, model="default", transport=rec.transport)

    _run(
        provider.extract_table_of_contents(
            [IMAGE], OcrProviderConfig(api_key="override", model="other", temperature=0.0)
        )
    )
    assert rec.requests[0].headers["x-api-key"] == "override"
    assert rec.body["model"] == "other"
    assert rec.body["temperature"] == 0.0


def test_unstructured_reply_keeps_raw_text():
    rec = Recorder({"content": [{"type": "text", "text": "no table of contents here"}]})
    provider = ClaudeOcrProvider(api_key="k", model="m", transport=rec.transport)

    result = _run(provider.extract_table_of_contents([IMAGE]))
    assert result.articles == []
    assert result.raw_text == "no table of contents here"


def test_http_error_raises_provider_error():
    rec = Recorder({"error": {"message": "invalid x-api-key"}}, status_code=401)
    provider = ClaudeOcrProvider(api_key="bad", model="m", transport=rec.transport)

    with pytest.raises(OcrProviderError, match="HTTP 401"):
        _run(provider.extract_table_of_contents([IMAGE]))


def test_missing_key_raises_before_any_request():
    rec = Recorder({})
    provider = OpenAIOcrProvider(api_key=None, model="m", transport=rec.transport)

    with pytest.raises(OcrProviderError, match="API key"):
        _run(provider.extract_table_of_contents([IMAGE]))
    assert rec.requests == []


def test_no_images_raises():
    provider = GeminiOcrProvider(api_key="g", model="m")
    with pytest.raises(OcrProviderError):
        _run(provider.extract_table_of_contents([]))


# ---- registry --------------------------------------------------------------


def _settings(**update):
    base = {
        "anthropic_api_key": None,
        "openai_api_key": None,
        "google_ai_api_key": None,
        "default_ocr_provider": "claude",
    }
    base.update(update)
    return settings.model_copy(update=base)


def test_registry_builds_each_provider_once():
    registry = OcrProviderRegistry(_settings(anthropic_api_key="k"))

    first = registry.get("claude")
    assert isinstance(first, ClaudeOcrProvider)
    assert registry.get(OcrProviderType.claude) is first
    assert registry.get(" Claude ") is first
    assert isinstance(registry.get("openai"), OpenAIOcrProvider)
    assert isinstance(registry.get("gemini"), GeminiOcrProvider)

    registry.clear()
    assert registry.get("claude") is not first


def test_registry_default_follows_settings():
    registry = OcrProviderRegistry(_settings(default_ocr_provider="gemini"))
    assert registry.default_type is OcrProviderType.gemini
    assert isinstance(registry.default(), GeminiOcrProvider)


def test_registry_available_lists_configured_keys():
    registry = OcrProviderRegistry(_settings(openai_api_key="sk", google_ai_api_key="g"))
    assert registry.available() == [OcrProviderType.openai, OcrProviderType.gemini]
    assert OcrProviderRegistry(_settings()).available() == []


def test_registry_rejects_unknown_provider():
    registry = OcrProviderRegistry(_settings())
    with pytest.raises(UnknownOcrProviderError):
        registry.get("tesseract")


def test_registry_uses_custom_builders():
    sentinel = object()
    registry = OcrProviderRegistry(_settings(), builders={OcrProviderType.claude: lambda: sentinel})
    assert registry.get("claude") is sentinel
    with pytest.raises(UnknownOcrProviderError):
        registry.get("openai")


# ---- image fetch -----------------------------------------------------------


def test_resolve_image_url():
    assert resolve_image_url("https://cdn.example.com/a.png", "http://site/") == (
        "https://cdn.example.com/a.png"
    )
    assert resolve_image_url("/uploads/toc.jpg", "http://site/") == "http://site/uploads/toc.jpg"


def test_fetch_image_encodes_body():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(
            200, content=b"hello", headers={"content-type": "image/jpeg; charset=binary"}
        )
    )
    image = _run(fetch_image("https://cdn.example.com/a.jpg", transport=transport))
    assert image.mime_type == "image/jpeg"
    assert image.base64 == "aGVsbG8="


def test_fetch_image_rejects_non_image():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, content=b"<html>", headers={"content-type": "text/html"})
    )
    with pytest.raises(ImageFetchError, match="Invalid image type"):
        _run(fetch_image("https://cdn.example.com/page", transport=transport))


def test_fetch_image_http_failure():
    transport = httpx.MockTransport(lambda request: httpx.Response(404))
    with pytest.raises(ImageFetchError, match="Failed to fetch"):
        _run(fetch_image("https://cdn.example.com/missing.png", transport=transport))
