"""initial catalog schema (users, magazines, issues, articles, tags, games, ocr)

Revision ID: 3f1c2a9d7e10
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7e10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    # ---- users -------------------------------------------------------------
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=True),
        sa.Column("image", sa.String(length=2000), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="VIEWER"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    # ---- magazines / issues -----------------------------------------------
    op.create_table(
        "magazines",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=300), nullable=False),
        sa.Column("name_en", sa.String(length=300), nullable=True),
        sa.Column("publisher", sa.String(length=300), nullable=True),
        sa.Column("issn", sa.String(length=20), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("cover_image", sa.String(length=2000), nullable=True),
        sa.Column("founded_date", sa.Date(), nullable=True),
        sa.Column("ended_date", sa.Date(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("issn"),
    )
    op.create_index(op.f("ix_magazines_name"), "magazines", ["name"], unique=False)

    op.create_table(
        "issues",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("magazine_id", sa.String(length=36), nullable=False),
        sa.Column("issue_number", sa.String(length=50), nullable=False),
        sa.Column("volume_number", sa.String(length=50), nullable=True),
        sa.Column("title", sa.String(length=300), nullable=True),
        sa.Column("publish_date", sa.Date(), nullable=False),
        sa.Column("cover_image", sa.String(length=2000), nullable=True),
        sa.Column("toc_images", sa.JSON(), nullable=False),
        sa.Column("page_count", sa.Integer(), nullable=True),
        sa.Column("price", sa.Float(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["magazine_id"], ["magazines.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "magazine_id", "issue_number", name="uq_issues_magazine_issue_number"
        ),
    )
    op.create_index(op.f("ix_issues_magazine_id"), "issues", ["magazine_id"], unique=False)

    # ---- tags / games ------------------------------------------------------
    op.create_table(
        "tags",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("slug", sa.String(length=200), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False, server_default="GENERAL"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )

    op.create_table(
        "games",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=300), nullable=False),
        sa.Column("name_original", sa.String(length=300), nullable=True),
        sa.Column("name_en", sa.String(length=300), nullable=True),
        sa.Column("slug", sa.String(length=300), nullable=False),
        sa.Column("release_date", sa.Date(), nullable=True),
        sa.Column("platforms", sa.JSON(), nullable=False),
        sa.Column("developer", sa.String(length=300), nullable=True),
        sa.Column("publisher", sa.String(length=300), nullable=True),
        sa.Column("genres", sa.JSON(), nullable=False),
        sa.Column("cover_image", sa.String(length=2000), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )

    # ---- articles and links -----------------------------------------------
    op.create_table(
        "articles",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("issue_id", sa.String(length=36), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("subtitle", sa.String(length=500), nullable=True),
        sa.Column("authors", sa.JSON(), nullable=False),
        sa.Column("category", sa.String(length=120), nullable=True),
        sa.Column("page_start", sa.Integer(), nullable=True),
        sa.Column("page_end", sa.Integer(), nullable=True),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["issue_id"], ["issues.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_articles_issue_id"), "articles", ["issue_id"], unique=False)

    op.create_table(
        "article_tags",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("article_id", sa.String(length=36), nullable=False),
        sa.Column("tag_id", sa.String(length=36), nullable=False),
        sa.ForeignKeyConstraint(["article_id"], ["articles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tag_id"], ["tags.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("article_id", "tag_id", name="uq_article_tags_pair"),
    )
    op.create_index(op.f("ix_article_tags_article_id"), "article_tags", ["article_id"])
    op.create_index(op.f("ix_article_tags_tag_id"), "article_tags", ["tag_id"])

    op.create_table(
        "article_games",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("article_id", sa.String(length=36), nullable=False),
        sa.Column("game_id", sa.String(length=36), nullable=False),
        sa.ForeignKeyConstraint(["article_id"], ["articles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["game_id"], ["games.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("article_id", "game_id", name="uq_article_games_pair"),
    )
    op.create_index(op.f("ix_article_games_article_id"), "article_games", ["article_id"])
    op.create_index(op.f("ix_article_games_game_id"), "article_games", ["game_id"])

    # ---- ocr_records -------------------------------------------------------
    op.create_table(
        "ocr_records",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("issue_id", sa.String(length=36), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=False, server_default=""),
        sa.Column("provider", sa.String(length=20), nullable=False),
        sa.Column("raw_result", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="PENDING"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["issue_id"], ["issues.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_ocr_records_issue_id"), "ocr_records", ["issue_id"])


def downgrade() -> None:
    op.drop_index(op.f("ix_ocr_records_issue_id"), table_name="ocr_records")
    op.drop_table("ocr_records")
    op.drop_index(op.f("ix_article_games_game_id"), table_name="article_games")
    op.drop_index(op.f("ix_article_games_article_id"), table_name="article_games")
    op.drop_table("article_games")
    op.drop_index(op.f("ix_article_tags_tag_id"), table_name="article_tags")
    op.drop_index(op.f("ix_article_tags_article_id"), table_name="article_tags")
    op.drop_table("article_tags")
    op.drop_index(op.f("ix_articles_issue_id"), table_name="articles")
    op.drop_table("articles")
    op.drop_table("games")
    op.drop_table("tags")
    op.drop_index(op.f("ix_issues_magazine_id"), table_name="issues")
    op.drop_table("issues")
    op.drop_index(op.f("ix_magazines_name"), table_name="magazines")
    op.drop_table("magazines")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
