"""Initial ebook schema: themes, ebooks, pages

Revision ID: 0001
Revises: None
Create Date: 2026-10-12 09:30:00
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import mysql

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- themes ---
    op.create_table(
        "themes",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("primary_color", sa.String(20), nullable=False),
        sa.Column("secondary_color", sa.String(20), nullable=False),
        sa.Column("accent_color", sa.String(20), nullable=False),
        sa.Column("background_color", sa.String(20), nullable=False),
        sa.Column("text_color", sa.String(20), nullable=False),
        sa.Column("heading_font", sa.String(100), nullable=False),
        sa.Column("body_font", sa.String(100), nullable=False),
        sa.Column("h1_size", sa.String(20), nullable=False),
        sa.Column("h2_size", sa.String(20), nullable=False),
        sa.Column("h3_size", sa.String(20), nullable=False),
        sa.Column("body_size", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=True, server_default=sa.func.now()),
        mysql_charset="utf8mb4",
        mysql_collate="utf8mb4_unicode_ci",
    )

    # --- ebooks ---
    op.create_table(
        "ebooks",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("theme_id", sa.String(36), sa.ForeignKey("themes.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=True, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, nullable=True, server_default=sa.func.now()),
        mysql_charset="utf8mb4",
        mysql_collate="utf8mb4_unicode_ci",
    )
    op.create_index("ix_ebooks_theme_id", "ebooks", ["theme_id"])

    # --- pages ---
    op.create_table(
        "pages",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("ebook_id", sa.String(36), sa.ForeignKey("ebooks.id", ondelete="CASCADE"), nullable=False),
        sa.Column("order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text().with_variant(mysql.LONGTEXT, "mysql"), nullable=False),
        sa.Column("template", sa.String(50), nullable=False, server_default="text-only"),
        sa.Column("image_url", sa.String(1024), nullable=True),
        sa.Column("custom_styles", sa.JSON, nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=True, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, nullable=True, server_default=sa.func.now()),
        mysql_charset="utf8mb4",
        mysql_collate="utf8mb4_unicode_ci",
    )
    op.create_index("ix_pages_ebook_id", "pages", ["ebook_id"])


def downgrade() -> None:
    op.drop_index("ix_pages_ebook_id", table_name="pages")
    op.drop_table("pages")
    op.drop_index("ix_ebooks_theme_id", table_name="ebooks")
    op.drop_table("ebooks")
    op.drop_table("themes")
