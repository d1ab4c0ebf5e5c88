from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class OcrProviderType(str, Enum):
    claude = "claude"
    openai = "openai"
    gemini = "gemini"


ALLOWED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/webp", "image/gif"})


class _Camel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SuggestedTag(_Camel):
    name: str
    type: str = "GENERAL"


class OcrArticleResult(_Camel):
    title: str
    subtitle: str | None = None
    authors: list[str] = Field(default_factory=list)
    category: str | None = None
    page_start: int | None = None
    page_end: int | None = None
    summary: str | None = None
    suggested_tags: list[SuggestedTag] = Field(default_factory=list)
    suggested_games: list[str] = Field(default_factory=list)
    # 0..1
    confidence: float = 0.8


class OcrMetadata(_Camel):
    issue_title: str | None = None
    publish_date: str | None = None
    page_info: str | None = None


class OcrResult(_Camel):
    articles: list[OcrArticleResult] = Field(default_factory=list)
    metadata: OcrMetadata | None = None
    raw_text: str | None = None
    provider: str
    # milliseconds
    processing_time: int


class OcrImage(BaseModel):
    base64: str
    mime_type: str


class OcrProviderConfig(BaseModel):
    api_key: str | None = None
    model: str | None = None
    max_tokens: int | None = None
    temperature: float | None = None


class OcrProviderError(Exception):
    """Transport or authentication failure talking to a vision backend."""
