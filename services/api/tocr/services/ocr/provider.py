from __future__ import annotations

from typing import Protocol, Sequence

from tocr.services.ocr.types import OcrImage, OcrProviderConfig, OcrResult


class OcrProvider(Protocol):
    name: str

    async def extract_table_of_contents(
        self,
        images: Sequence[OcrImage],
        config: OcrProviderConfig | None = None,
    ) -> OcrResult: ...
