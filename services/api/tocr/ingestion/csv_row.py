from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

CSV_COLUMNS = (
    "magazine_name",
    "magazine_name_en",
    "publisher",
    "issn",
    "description",
    "founded_date",
    "is_active",
    "issue_number",
    "volume_number",
    "issue_title",
    "publish_date",
    "page_count",
    "price",
    "notes",
)

REQUIRED_MESSAGES = {
    "magazine_name": "Magazine name is required",
    "issue_number": "Issue number is required",
    "publish_date": "Publish date is required",
}


def _required() -> Any:
    # Missing columns default to "" and still go through the required check.
    return Field(default="", validate_default=True)


class CsvRow(BaseModel):
    """One raw line of the magazine/issue import file.

    Values stay strings; coercion happens while grouping.
    """

    model_config = ConfigDict(extra="ignore")

    magazine_name: str = _required()
    magazine_name_en: str = ""
    publisher: str = ""
    issn: str = ""
    description: str = ""
    founded_date: str = ""
    is_active: str = ""
    issue_number: str = _required()
    volume_number: str = ""
    issue_title: str = ""
    publish_date: str = _required()
    page_count: str = ""
    price: str = ""
    notes: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def none_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("magazine_name", "issue_number", "publish_date")
    @classmethod
    def must_not_be_blank(cls, v: str, info) -> str:
        if not v.strip():
            raise PydanticCustomError("required", REQUIRED_MESSAGES[info.field_name])
        return v


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


def validate_row(raw: Mapping[Any, Any]) -> tuple[CsvRow | None, list[FieldError]]:
    """Check presence/shape of a raw CSV row.

    Returns ``(row, [])`` on success or ``(None, errors)`` with one entry per
    violated field. Keys that are not strings (csv overflow cells) are ignored.
    """
    data = {k: v for k, v in raw.items() if isinstance(k, str)}
    try:
        return CsvRow.model_validate(data), []
    except ValidationError as exc:
        errors = [
            FieldError(
                field=".".join(str(p) for p in err["loc"]),
                message=err["msg"],
            )
            for err in exc.errors(include_url=False)
        ]
        return None, errors
