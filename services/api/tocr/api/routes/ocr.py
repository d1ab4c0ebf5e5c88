from __future__ import annotations

import base64
import json
import logging

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from sqlalchemy.orm import Session

from tocr.api.deps import get_ocr_registry, require_editor
from tocr.api.errors import error_response
from tocr.db.session import get_db
from tocr.ingestion.fetch import ImageFetchError, fetch_image, resolve_image_url
from tocr.models.issue import Issue
from tocr.models.ocr_record import OcrRecord
from tocr.schemas.ocr import OcrProvidersOut, OcrRunOut
from tocr.services.ocr.factory import OcrProviderRegistry, UnknownOcrProviderError
from tocr.services.ocr.types import ALLOWED_IMAGE_TYPES, OcrImage, OcrProviderError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/ocr", tags=["ocr"])

_BAD_TYPE = "Invalid image type. Allowed: JPEG, PNG, WebP, GIF"


class _BadInput(Exception):
    pass


async def _read_upload(upload: UploadFile) -> OcrImage:
    if upload.content_type not in ALLOWED_IMAGE_TYPES:
        raise _BadInput(f"{_BAD_TYPE} (got {upload.content_type})")
    data = await upload.read()
    return OcrImage(base64=base64.b64encode(data).decode("ascii"), mime_type=upload.content_type)


async def _collect_images(
    request: Request,
    *,
    images: list[UploadFile],
    image_urls: str | None,
    image: UploadFile | None,
    image_url: str | None,
) -> list[OcrImage]:
    out = [await _read_upload(f) for f in images]

    if image_urls:
        try:
            urls = json.loads(image_urls)
        except json.JSONDecodeError:
            raise _BadInput("imageUrls must be a JSON array of strings")
        if not isinstance(urls, list) or not all(isinstance(u, str) for u in urls):
            raise _BadInput("imageUrls must be a JSON array of strings")
        base_url = str(request.base_url)
        for url in urls:
            out.append(await fetch_image(resolve_image_url(url, base_url)))

    # Single-image fields are only read when nothing else was sent.
    if not out:
        if image is not None:
            out.append(await _read_upload(image))
        elif image_url:
            out.append(await fetch_image(resolve_image_url(image_url, str(request.base_url))))

    return out


@router.post("", response_model=OcrRunOut)
async def run_ocr(
    request: Request,
    provider: str = Form(default=""),
    issue_id: str | None = Form(default=None, alias="issueId"),
    images: list[UploadFile] | None = File(default=None),
    image_urls: str | None = Form(default=None, alias="imageUrls"),
    image: UploadFile | None = File(default=None),
    image_url: str | None = Form(default=None, alias="imageUrl"),
    db: Session = Depends(get_db),
    user=Depends(require_editor),
    registry: OcrProviderRegistry = Depends(get_ocr_registry),
):
    try:
        kind = registry.resolve_type(provider) if provider else registry.default_type
    except UnknownOcrProviderError as exc:
        return error_response(400, str(exc))

    if issue_id and db.get(Issue, issue_id) is None:
        return error_response(404, "Issue not found")

    try:
        collected = await _collect_images(
            request,
            images=images or [],
            image_urls=image_urls,
            image=image,
            image_url=image_url,
        )
    except (_BadInput, ImageFetchError) as exc:
        return error_response(400, str(exc))

    if not collected:
        return error_response(
            400,
            "No images provided. Send 'images' files, 'imageUrls' JSON array, "
            "or single 'image'/'imageUrl'",
        )

    try:
        result = await registry.get(kind).extract_table_of_contents(collected)
    except OcrProviderError as exc:
        logger.error("ocr failed provider=%s images=%d: %s", kind.value, len(collected), exc)
        return error_response(500, "OCR processing failed", str(exc))

    record = OcrRecord(
        issue_id=issue_id or None,
        image_url=image_urls or image_url or "",
        provider=kind.value,
        raw_result=result.model_dump(mode="json", by_alias=True),
        status="COMPLETED",
    )
    db.add(record)
    db.commit()
    db.refresh(record)

    return OcrRunOut(id=record.id, result=result)


@router.get("", response_model=OcrProvidersOut)
def list_providers(
    user=Depends(require_editor),
    registry: OcrProviderRegistry = Depends(get_ocr_registry),
) -> OcrProvidersOut:
    return OcrProvidersOut(
        providers=[kind.value for kind in registry.available()],
        default=registry.default_type.value,
    )
