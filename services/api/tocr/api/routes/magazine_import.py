from __future__ import annotations

import json
import logging
from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Body, Depends, File, UploadFile
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tocr.api.deps import require_editor
from tocr.api.errors import error_response
from tocr.db.session import get_db
from tocr.ingestion.magazine_csv import parse_magazines_csv
from tocr.schemas.magazine_import import ImportRequest, ImportResultOut, ParseResult
from tocr.services.magazine_import import import_magazines

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/import", tags=["import"])


@router.post("/magazines-issues/preview", response_model=ParseResult)
def preview_magazines_csv(
    file: UploadFile = File(...),
    user=Depends(require_editor),
):
    raw = file.file.read()
    return parse_magazines_csv(raw)


@router.post(
    "/magazines-issues",
    response_model=ImportResultOut,
    status_code=201,
    responses={400: {"description": "Validation failed"}, 500: {"description": "Import rolled back"}},
)
def import_magazines_issues(
    payload: Any = Body(...),
    db: Session = Depends(get_db),
    user=Depends(require_editor),
):
    try:
        request = ImportRequest.model_validate(payload)
    except ValidationError as exc:
        return error_response(
            400, "Validation failed", json.loads(exc.json(include_url=False))
        )

    try:
        result = import_magazines(db, request.magazines)
    except (SQLAlchemyError, ValueError):
        # import_magazines has already rolled back and logged the cause.
        return error_response(500, "Failed to import magazines and issues")

    logger.info("import by user=%s: %d magazines in request", user.id, len(request.magazines))
    return ImportResultOut.model_validate(asdict(result))
