from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# services/api/tocr/core/config.py -> BASE_DIR == services/api
BASE_DIR = Path(__file__).resolve().parents[2]

OCR_PROVIDER_TYPES = ("claude", "openai", "gemini")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        extra="ignore",
        env_prefix="",
        case_sensitive=False,
    )

    # Environment
    env: str = Field(default="dev", validation_alias="ENV")

    # Application
    api_name: str = Field(default="tocr-api", validation_alias="API_NAME")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    user_agent: str = Field(default="tocr/0.1", validation_alias="USER_AGENT")

    # Database
    database_url: str = Field(
        default="sqlite+pysqlite:///./tocr.db",
        validation_alias="DATABASE_URL",
    )

    # Auth (tokens are issued by the OAuth identity provider)
    auth_secret_key: str = Field(
        default="dev-secret-key", validation_alias="AUTH_SECRET_KEY"
    )
    auth_algorithm: str = Field(default="HS256", validation_alias="AUTH_ALGORITHM")
    auth_access_token_ttl_minutes: int = Field(
        default=60, validation_alias="AUTH_ACCESS_TOKEN_TTL_MINUTES"
    )
    auth_cookie_name: str = Field(
        default="tocr_session", validation_alias="AUTH_COOKIE_NAME"
    )

    # CORS
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        validation_alias="CORS_ORIGINS",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Any) -> list[str]:
        """
        Supported env formats:
          - JSON list: '["http://localhost:3000"]'
          - Bracket list (no quotes): '[http://localhost:3000, http://localhost:5173]'
          - Comma-separated: 'http://localhost:3000, http://localhost:5173'
          - '*' wildcard
        """
        if v is None:
            return []
        if isinstance(v, list):
            return [str(x).strip() for x in v if str(x).strip()]
        if not isinstance(v, str):
            raise TypeError("cors_origins must be a string or list of strings")

        s = v.strip()
        if not s:
            return []
        if s == "*":
            return ["*"]

        if s.startswith("[") and s.endswith("]"):
            try:
                parsed = json.loads(s)
                if isinstance(parsed, list):
                    return [str(x).strip() for x in parsed if str(x).strip()]
            except json.JSONDecodeError:
                inner = s[1:-1].strip()
                if not inner:
                    return []
                parts = [p.strip().strip('"').strip("'") for p in inner.split(",")]
                return [p for p in parts if p]

        parts = [p.strip() for p in s.split(",")]
        return [p for p in parts if p]

    # OCR providers
    default_ocr_provider: str = Field(
        default="claude", validation_alias="DEFAULT_OCR_PROVIDER"
    )
    anthropic_api_key: str | None = Field(
        default=None, validation_alias="ANTHROPIC_API_KEY"
    )
    openai_api_key: str | None = Field(default=None, validation_alias="OPENAI_API_KEY")
    google_ai_api_key: str | None = Field(
        default=None, validation_alias="GOOGLE_AI_API_KEY"
    )
    claude_model: str = Field(
        default="claude-sonnet-4-20250514", validation_alias="CLAUDE_MODEL"
    )
    openai_model: str = Field(default="gpt-4o", validation_alias="OPENAI_MODEL")
    gemini_model: str = Field(
        default="gemini-2.0-flash", validation_alias="GEMINI_MODEL"
    )
    ocr_max_tokens: int = Field(default=4096, validation_alias="OCR_MAX_TOKENS")
    ocr_timeout_secs: float = Field(default=120.0, validation_alias="OCR_TIMEOUT_SECS")
    image_fetch_timeout_secs: float = Field(
        default=15.0, validation_alias="IMAGE_FETCH_TIMEOUT_SECS"
    )

    @field_validator("default_ocr_provider", mode="before")
    @classmethod
    def normalize_ocr_provider(cls, v: Any) -> str:
        if v is None:
            return "claude"
        s = str(v).strip().lower()
        if s not in OCR_PROVIDER_TYPES:
            raise ValueError(
                f"DEFAULT_OCR_PROVIDER must be one of: {', '.join(OCR_PROVIDER_TYPES)}"
            )
        return s

    # OpenTelemetry
    otel_enabled: bool = Field(default=False, validation_alias="OTEL_ENABLED")
    otel_otlp_endpoint: str = Field(
        default="http://localhost:4317",
        validation_alias="OTEL_OTLP_ENDPOINT",
    )


settings = Settings()
