from __future__ import annotations

import csv
import io
import logging

from tocr.domain.normalize import (
    empty_to_none,
    parse_active_flag,
    parse_positive_float,
    parse_positive_int,
)
from tocr.ingestion.csv_row import validate_row
from tocr.schemas.magazine_import import (
    ParsedIssue,
    ParsedMagazine,
    ParseResult,
    RowError,
    RowWarning,
)

logger = logging.getLogger(__name__)


class CsvStructureError(Exception):
    pass


def _read_rows(content: bytes) -> list[dict]:
    """Decode and split the whole file up front; blank lines are dropped."""
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise CsvStructureError(f"file must be UTF-8 encoded ({exc.reason})") from exc

    reader = csv.DictReader(io.StringIO(text, newline=""), strict=True)
    try:
        if reader.fieldnames:
            reader.fieldnames = [(h or "").strip() for h in reader.fieldnames]
        rows = list(reader)
    except csv.Error as exc:
        raise CsvStructureError(str(exc)) from exc

    return [
        row
        for row in rows
        if any(isinstance(v, str) and v.strip() for v in row.values())
    ]


def parse_magazines_csv(content: bytes) -> ParseResult:
    """Group a flat magazine/issue CSV into magazines with nested issues.

    Row numbers are 1-based with the header as row 1. A row with any field
    error is left out entirely and reported in ``errors``; a repeated issue
    number within the same magazine is dropped with a warning. Magazines are
    returned in the order their key was first seen, and the first row of a
    magazine decides its magazine-level fields.

    Only a structurally broken file is fatal: the result then carries no
    magazines and a single error at row 0.
    """
    try:
        rows = _read_rows(content)
    except CsvStructureError as exc:
        logger.warning("magazine csv rejected: %s", exc)
        return ParseResult(
            errors=[RowError(row=0, field="", message=f"CSV parse failed: {exc}")],
        )

    errors: list[RowError] = []
    warnings: list[RowWarning] = []
    magazines: dict[str, ParsedMagazine] = {}
    seen_issues: set[str] = set()

    for idx, raw in enumerate(rows):
        row_num = idx + 2  # header is row 1

        row, field_errors = validate_row(raw)
        if row is None:
            errors.extend(
                RowError(row=row_num, field=e.field, message=e.message)
                for e in field_errors
            )
            continue

        issn = empty_to_none(row.issn)
        name = row.magazine_name.strip()
        magazine_key = issn or name

        magazine = magazines.get(magazine_key)
        if magazine is None:
            magazine = ParsedMagazine(
                name=name,
                name_en=empty_to_none(row.magazine_name_en),
                publisher=empty_to_none(row.publisher),
                issn=issn,
                description=empty_to_none(row.description),
                founded_date=empty_to_none(row.founded_date),
                is_active=parse_active_flag(row.is_active),
            )
            magazines[magazine_key] = magazine

        issue_number = row.issue_number.strip()
        dedup_key = f"{magazine_key}::{issue_number}"
        if dedup_key in seen_issues:
            warnings.append(
                RowWarning(
                    row=row_num,
                    message=(
                        f'Issue "{issue_number}" of magazine "{magazine.name}" '
                        "is duplicated; row skipped"
                    ),
                )
            )
            continue
        seen_issues.add(dedup_key)

        magazine.issues.append(
            ParsedIssue(
                issue_number=issue_number,
                volume_number=empty_to_none(row.volume_number),
                title=empty_to_none(row.issue_title),
                publish_date=row.publish_date.strip(),
                page_count=parse_positive_int(row.page_count),
                price=parse_positive_float(row.price),
                notes=empty_to_none(row.notes),
            )
        )

    logger.info(
        "parsed magazine csv: rows=%d magazines=%d errors=%d warnings=%d",
        len(rows),
        len(magazines),
        len(errors),
        len(warnings),
    )
    return ParseResult(
        magazines=list(magazines.values()),
        errors=errors,
        warnings=warnings,
        total_rows=len(rows),
    )
