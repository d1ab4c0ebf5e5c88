from __future__ import annotations

from fastapi import APIRouter

from tocr.api.routes import export, health, magazine_import, ocr

api_router = APIRouter()

# Registration order is the order routes show up in the OpenAPI document.
for _mod in (health, magazine_import, export, ocr):
    api_router.include_router(_mod.router)
