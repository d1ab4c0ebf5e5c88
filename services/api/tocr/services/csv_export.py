from __future__ import annotations

import csv
import io
from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from tocr.models.article import Article, ArticleGame, ArticleTag
from tocr.models.issue import Issue
from tocr.models.magazine import Magazine

EXPORT_COLUMNS = (
    "magazine_name",
    "magazine_name_en",
    "publisher",
    "issn",
    "is_active",
    "issue_number",
    "volume_number",
    "issue_title",
    "publish_date",
    "page_count",
    "price",
    "article_title",
    "article_subtitle",
    "authors",
    "category",
    "page_start",
    "page_end",
    "summary",
    "tags",
    "games",
)

_ISSUE_WIDTH = 6
_ARTICLE_WIDTH = 9

BOM = "\ufeff"


def _fmt_date(d: date | None) -> str:
    return d.isoformat() if d else ""


def _fmt_number(v: int | float | None) -> str:
    if v is None:
        return ""
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v)


def _magazine_fields(mag: Magazine) -> list[str]:
    return [
        mag.name,
        mag.name_en or "",
        mag.publisher or "",
        mag.issn or "",
        "true" if mag.is_active else "false",
    ]


def _issue_fields(issue: Issue) -> list[str]:
    return [
        issue.issue_number,
        issue.volume_number or "",
        issue.title or "",
        _fmt_date(issue.publish_date),
        _fmt_number(issue.page_count),
        _fmt_number(issue.price),
    ]


def _article_fields(article: Article) -> list[str]:
    tags = ";".join(f"{at.tag.name}[{at.tag.type}]" for at in article.article_tags)
    games = ";".join(ag.game.name for ag in article.article_games)
    return [
        article.title,
        article.subtitle or "",
        ";".join(article.authors or []),
        article.category or "",
        _fmt_number(article.page_start),
        _fmt_number(article.page_end),
        article.summary or "",
        tags,
        games,
    ]


def build_export_rows(db: Session, *, magazine_id: str | None = None) -> list[list[str]]:
    """Flatten magazines into one row per (magazine, issue, article).

    Magazines without issues and issues without articles still produce a
    row, with the missing trailing columns left blank.
    """
    stmt = (
        select(Magazine)
        .options(
            selectinload(Magazine.issues)
            .selectinload(Issue.articles)
            .selectinload(Article.article_tags)
            .selectinload(ArticleTag.tag),
            selectinload(Magazine.issues)
            .selectinload(Issue.articles)
            .selectinload(Article.article_games)
            .selectinload(ArticleGame.game),
        )
        .order_by(Magazine.name)
    )
    if magazine_id:
        stmt = stmt.where(Magazine.id == magazine_id)

    rows: list[list[str]] = []
    for mag in db.execute(stmt).scalars().all():
        mag_fields = _magazine_fields(mag)
        if not mag.issues:
            rows.append(mag_fields + [""] * (_ISSUE_WIDTH + _ARTICLE_WIDTH))
            continue

        for issue in mag.issues:
            issue_fields = _issue_fields(issue)
            if not issue.articles:
                rows.append(mag_fields + issue_fields + [""] * _ARTICLE_WIDTH)
                continue
            for article in issue.articles:
                rows.append(mag_fields + issue_fields + _article_fields(article))

    return rows


def render_export_csv(rows: list[list[str]]) -> str:
    """Header + rows as BOM-prefixed CSV with CRLF line endings."""
    buf = io.StringIO(newline="")
    writer = csv.writer(buf, lineterminator="\r\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(EXPORT_COLUMNS)
    writer.writerows(rows)
    return BOM + buf.getvalue()
