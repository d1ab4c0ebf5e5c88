from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from tocr.domain.normalize import parse_loose_date
from tocr.models.issue import Issue
from tocr.models.magazine import Magazine
from tocr.schemas.magazine_import import ParsedMagazine

logger = logging.getLogger(__name__)


@dataclass
class IssueImportDetail:
    issue_number: str
    status: Literal["created", "skipped"]


@dataclass
class MagazineImportDetail:
    magazine_name: str
    status: Literal["created", "existed"]
    issues: list[IssueImportDetail] = field(default_factory=list)


@dataclass
class ImportResult:
    created_magazines: int = 0
    skipped_magazines: int = 0
    created_issues: int = 0
    skipped_issues: int = 0
    details: list[MagazineImportDetail] = field(default_factory=list)


def find_existing_magazine(
    db: Session, *, name: str, issn: str | None
) -> Magazine | None:
    """ISSN match first (when given), then exact name."""
    if issn:
        by_issn = db.execute(
            select(Magazine).where(Magazine.issn == issn)
        ).scalar_one_or_none()
        if by_issn is not None:
            return by_issn

    return (
        db.execute(select(Magazine).where(Magazine.name == name).limit(1))
        .scalars()
        .first()
    )


def _find_issue(db: Session, *, magazine_id: str, issue_number: str) -> Issue | None:
    return db.execute(
        select(Issue)
        .where(Issue.magazine_id == magazine_id)
        .where(Issue.issue_number == issue_number)
    ).scalar_one_or_none()


def _import_one(db: Session, mag: ParsedMagazine, result: ImportResult) -> None:
    existing = find_existing_magazine(db, name=mag.name, issn=mag.issn)

    if existing is not None:
        # Metadata is first-write-wins: an existing magazine is never updated.
        magazine_id = existing.id
        detail = MagazineImportDetail(magazine_name=mag.name, status="existed")
        result.skipped_magazines += 1
    else:
        created = Magazine(
            name=mag.name,
            name_en=mag.name_en,
            publisher=mag.publisher,
            issn=mag.issn or None,
            description=mag.description,
            founded_date=parse_loose_date(mag.founded_date) if mag.founded_date else None,
            is_active=True if mag.is_active is None else mag.is_active,
        )
        db.add(created)
        db.flush()
        magazine_id = created.id
        detail = MagazineImportDetail(magazine_name=mag.name, status="created")
        result.created_magazines += 1

    for iss in mag.issues:
        if _find_issue(db, magazine_id=magazine_id, issue_number=iss.issue_number):
            result.skipped_issues += 1
            detail.issues.append(
                IssueImportDetail(issue_number=iss.issue_number, status="skipped")
            )
            continue

        db.add(
            Issue(
                magazine_id=magazine_id,
                issue_number=iss.issue_number,
                volume_number=iss.volume_number,
                title=iss.title,
                publish_date=parse_loose_date(iss.publish_date),
                page_count=iss.page_count,
                price=iss.price,
                notes=iss.notes,
            )
        )
        # Flush per row so later lookups in this run see it and the unique
        # constraint fires here rather than at commit.
        db.flush()
        result.created_issues += 1
        detail.issues.append(
            IssueImportDetail(issue_number=iss.issue_number, status="created")
        )

    result.details.append(detail)


def import_magazines(db: Session, magazines: Sequence[ParsedMagazine]) -> ImportResult:
    """Create missing magazines/issues in one transaction.

    Existing magazines (by ISSN, then name) and issues (by magazine + issue
    number) are reported as ``existed``/``skipped`` and left untouched, so the
    call is idempotent. Any failure rolls back the whole batch and re-raises.
    """
    result = ImportResult()
    try:
        for mag in magazines:
            _import_one(db, mag, result)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("magazine import rolled back (%d magazines)", len(magazines))
        raise

    logger.info(
        "magazine import committed: magazines created=%d existed=%d, issues created=%d skipped=%d",
        result.created_magazines,
        result.skipped_magazines,
        result.created_issues,
        result.skipped_issues,
    )
    return result
