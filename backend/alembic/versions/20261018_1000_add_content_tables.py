"""Add site content tables

Creates:
- content_groups: one row per declared (namespace, name) content group
- content_html_areas: ordered rich-text areas of a group
- content_image_areas: ordered image areas (stored path, client file name, alt text)
- content_metadata: ordered metadata values of a group

Area rows are deleted with their group (ON DELETE CASCADE).

Revision ID: add_content_tables
Revises:
Create Date: 2026-10-18
"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = "add_content_tables"
down_revision = None
branch_labels = None
depends_on = None


def _uuid():
    return sa.String(36).with_variant(postgresql.UUID(as_uuid=True), "postgresql")


def _area_table(name: str, *columns: sa.Column) -> None:
    op.create_table(
        name,
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "group_id",
            _uuid(),
            sa.ForeignKey("content_groups.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("name", sa.String(255), nullable=False),
        *columns,
        sa.UniqueConstraint("group_id", "name", name=f"uq_{name}_group_id_name"),
    )
    op.create_index(f"ix_{name}_group_id", name, ["group_id"])


def upgrade() -> None:
    op.create_table(
        "content_groups",
        sa.Column("id", _uuid(), primary_key=True),
        sa.Column("namespace", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("namespace", "name", name="uq_content_groups_namespace_name"),
    )
    op.create_index("ix_content_groups_namespace", "content_groups", ["namespace"])

    _area_table(
        "content_html_areas",
        sa.Column("html", sa.Text(), nullable=False, server_default=""),
    )
    _area_table(
        "content_image_areas",
        sa.Column("image_path", sa.String(1024), nullable=False, server_default=""),
        sa.Column("client_file_name", sa.String(255), nullable=True),
        sa.Column("alt_text", sa.String(1024), nullable=False, server_default=""),
    )
    _area_table(
        "content_metadata",
        sa.Column("value", sa.Text(), nullable=False, server_default=""),
    )


def downgrade() -> None:
    for name in ("content_metadata", "content_image_areas", "content_html_areas"):
        op.drop_index(f"ix_{name}_group_id", table_name=name)
        op.drop_table(name)

    op.drop_index("ix_content_groups_namespace", table_name="content_groups")
    op.drop_table("content_groups")
