from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any

from tocr.domain.normalize import parse_positive_int
from tocr.models.tag import TagType
from tocr.services.ocr.types import OcrArticleResult, OcrMetadata, SuggestedTag

logger = logging.getLogger(__name__)

_fenced_json = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")

DEFAULT_CONFIDENCE = 0.8
_TAG_TYPES = {t.value for t in TagType}


@dataclass
class ParsedModelOutput:
    articles: list[OcrArticleResult] = field(default_factory=list)
    metadata: OcrMetadata | None = None
    raw_text: str | None = None


def _opt_str(v: Any) -> str | None:
    if v is None or v == "":
        return None
    return str(v)


def _page(v: Any) -> int | None:
    if isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v if v > 0 else None
    if isinstance(v, float) and v.is_integer():
        return int(v) if v > 0 else None
    if isinstance(v, str):
        return parse_positive_int(v)
    return None


def _confidence(v: Any) -> float:
    if isinstance(v, bool):
        return DEFAULT_CONFIDENCE
    try:
        c = float(v)
    except (TypeError, ValueError):
        return DEFAULT_CONFIDENCE
    if c != c:  # NaN
        return DEFAULT_CONFIDENCE
    return min(max(c, 0.0), 1.0)


def _str_list(v: Any) -> list[str]:
    if not isinstance(v, list):
        return []
    return [str(x) for x in v if x is not None and str(x).strip()]


def _tags(v: Any) -> list[SuggestedTag]:
    if not isinstance(v, list):
        return []
    out: list[SuggestedTag] = []
    for t in v:
        if isinstance(t, dict) and t.get("name"):
            kind = str(t.get("type") or "").upper()
            out.append(
                SuggestedTag(
                    name=str(t["name"]),
                    type=kind if kind in _TAG_TYPES else TagType.GENERAL.value,
                )
            )
        elif isinstance(t, str) and t.strip():
            out.append(SuggestedTag(name=t.strip()))
    return out


def normalize_articles(items: Any) -> list[OcrArticleResult]:
    if not isinstance(items, list):
        return []
    out: list[OcrArticleResult] = []
    for a in items:
        if not isinstance(a, dict):
            continue
        out.append(
            OcrArticleResult(
                title=str(a.get("title") or ""),
                subtitle=_opt_str(a.get("subtitle")),
                authors=_str_list(a.get("authors")),
                category=_opt_str(a.get("category")),
                page_start=_page(a.get("pageStart")),
                page_end=_page(a.get("pageEnd")),
                summary=_opt_str(a.get("summary")),
                suggested_tags=_tags(a.get("suggestedTags")),
                suggested_games=_str_list(a.get("suggestedGames")),
                confidence=_confidence(a.get("confidence")),
            )
        )
    return out


def _metadata(v: Any) -> OcrMetadata:
    if not isinstance(v, dict):
        return OcrMetadata()
    return OcrMetadata(
        issue_title=_opt_str(v.get("issueTitle")),
        publish_date=_opt_str(v.get("publishDate")),
        page_info=_opt_str(v.get("pageInfo")),
    )


def parse_model_response(text: str) -> ParsedModelOutput:
    """Turn raw model text into normalized articles.

    Never raises: output that is not the expected JSON yields no articles
    and keeps the raw text so the editor can still work from it.
    """
    m = _fenced_json.search(text or "")
    candidate = (m.group(1) if m else text or "").strip()

    if not candidate.startswith(("{", "[")):
        logger.warning("ocr output is not JSON; returning raw text only")
        return ParsedModelOutput(raw_text=text)

    try:
        payload = json.loads(candidate)
    except json.JSONDecodeError as exc:
        logger.warning("ocr output JSON could not be decoded: %s", exc)
        return ParsedModelOutput(raw_text=text)

    if isinstance(payload, list):
        return ParsedModelOutput(articles=normalize_articles(payload), raw_text=text)
    if not isinstance(payload, dict):
        return ParsedModelOutput(raw_text=text)

    return ParsedModelOutput(
        articles=normalize_articles(payload.get("articles")),
        metadata=_metadata(payload.get("metadata")),
        raw_text=text,
    )
