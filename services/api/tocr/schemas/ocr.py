from __future__ import annotations

from pydantic import BaseModel

from tocr.services.ocr.types import OcrResult


class OcrRunOut(BaseModel):
    id: str
    result: OcrResult


class OcrProvidersOut(BaseModel):
    providers: list[str]
    default: str
