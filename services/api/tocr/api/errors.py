from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse


def error_response(status_code: int, error: str, details: Any = None) -> JSONResponse:
    """``{error, details?}`` body used by the import/export/OCR endpoints."""
    content: dict[str, Any] = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)
