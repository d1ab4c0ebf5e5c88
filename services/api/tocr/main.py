from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tocr.api.router import api_router
from tocr.core.config import settings
from tocr.core.logging import configure_logging
from tocr.core.otel import init_otel
from tocr.middleware.request_id import RequestIdMiddleware
from tocr.services.ocr.factory import OcrProviderRegistry

configure_logging()

app = FastAPI(title=settings.api_name)

app.state.ocr_registry = OcrProviderRegistry(settings)

app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)

init_otel(app)
