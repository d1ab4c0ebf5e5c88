from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from tocr.domain.normalize import empty_to_none, parse_loose_date


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ParsedIssue(CamelModel):
    issue_number: str
    volume_number: str | None = None
    title: str | None = None
    publish_date: str
    page_count: int | None = None
    price: float | None = None
    notes: str | None = None


class ParsedMagazine(CamelModel):
    name: str
    name_en: str | None = None
    publisher: str | None = None
    issn: str | None = None
    description: str | None = None
    founded_date: str | None = None
    # None means "not provided"; the importer defaults new magazines to active.
    is_active: bool | None = None
    issues: list[ParsedIssue] = Field(default_factory=list)


class RowError(BaseModel):
    row: int
    field: str
    message: str


class RowWarning(BaseModel):
    row: int
    message: str


class ParseResult(CamelModel):
    magazines: list[ParsedMagazine] = Field(default_factory=list)
    errors: list[RowError] = Field(default_factory=list)
    warnings: list[RowWarning] = Field(default_factory=list)
    total_rows: int = 0


# ---- import request (server-side re-validation) ---------------------------


def _blank_to_none(v: Any) -> Any:
    # Same rule as the CSV parser: a blank optional value means "not provided".
    return empty_to_none(v) if isinstance(v, str) else v


def _check_date(v: str | None) -> str | None:
    if v is None:
        return v
    parse_loose_date(v)
    return v


class ImportIssueIn(ParsedIssue):
    model_config = ConfigDict(str_strip_whitespace=True)

    issue_number: str = Field(min_length=1)
    publish_date: str = Field(min_length=1)
    page_count: int | None = Field(default=None, gt=0)
    price: float | None = Field(default=None, gt=0)

    @field_validator("volume_number", "title", "notes", mode="before")
    @classmethod
    def blank_is_unset(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("publish_date")
    @classmethod
    def publish_date_must_parse(cls, v: str) -> str:
        return _check_date(v)


class ImportMagazineIn(ParsedMagazine):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    issues: list[ImportIssueIn] = Field(default_factory=list)

    @field_validator(
        "name_en", "publisher", "issn", "description", "founded_date", mode="before"
    )
    @classmethod
    def blank_is_unset(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("founded_date")
    @classmethod
    def founded_date_must_parse(cls, v: str | None) -> str | None:
        return _check_date(v)


class ImportRequest(CamelModel):
    magazines: list[ImportMagazineIn]


# ---- import result ---------------------------------------------------------


class IssueImportDetailOut(CamelModel):
    issue_number: str
    status: Literal["created", "skipped"]


class MagazineImportDetailOut(CamelModel):
    magazine_name: str
    status: Literal["created", "existed"]
    issues: list[IssueImportDetailOut] = Field(default_factory=list)


class ImportResultOut(CamelModel):
    created_magazines: int
    skipped_magazines: int
    created_issues: int
    skipped_issues: int
    details: list[MagazineImportDetailOut] = Field(default_factory=list)
