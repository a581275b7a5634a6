"""create compa companies, competitors, followers and reviews tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "compa_companies",
        sa.Column("company_id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("address", sa.String(length=500), nullable=True),
        sa.Column(
            "google_review_url",
            sa.String(length=1000),
            nullable=True,
            comment="Direct Google Maps review link, when known",
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("company_id"),
    )

    op.create_table(
        "compa_competitors",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("company_id", sa.BigInteger(), nullable=False),
        sa.Column("compet_company_id", sa.BigInteger(), nullable=False),
        sa.Column("facebook_url", sa.String(length=1000), nullable=True),
        sa.Column("instagram_url", sa.String(length=1000), nullable=True),
        sa.Column("linkedin_url", sa.String(length=1000), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["company_id"], ["compa_companies.company_id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["compet_company_id"], ["compa_companies.company_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("company_id", "compet_company_id", name="uq_compa_competitors_company_competitor"),
    )
    op.create_index(
        "ix_compa_competitors_compet_company_id",
        "compa_competitors",
        ["compet_company_id"],
        unique=False,
    )

    op.create_table(
        "smp_followers",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("company_id", sa.BigInteger(), nullable=True),
        sa.Column("compet_company_id", sa.BigInteger(), nullable=False),
        sa.Column("facebook_follower_count", sa.BigInteger(), nullable=True),
        sa.Column("facebook_page_url", sa.String(length=1000), nullable=True),
        sa.Column("instagram_follower_count", sa.BigInteger(), nullable=True),
        sa.Column("instagram_page_url", sa.String(length=1000), nullable=True),
        sa.Column("linkedin_follower_count", sa.BigInteger(), nullable=True),
        sa.Column("linkedin_page_url", sa.String(length=1000), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("compet_company_id"),
    )
    op.create_index("ix_smp_followers_company_id", "smp_followers", ["company_id"], unique=False)

    op.create_table(
        "company_reviews",
        sa.Column("review_id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("company_id", sa.BigInteger(), nullable=False),
        sa.Column("reviewer_name", sa.String(length=255), nullable=False),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column("review_text", sa.Text(), nullable=False),
        sa.Column("review_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("sentiment", sa.String(length=16), nullable=True, comment="POSITIVE, NEGATIVE or NEUTRAL"),
        sa.Column("polarity", sa.Float(), nullable=True),
        sa.Column("source", sa.String(length=32), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["company_id"], ["compa_companies.company_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("review_id"),
    )
    op.create_index(
        "ix_company_reviews_company_created",
        "company_reviews",
        ["company_id", "created_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_company_reviews_company_created", table_name="company_reviews")
    op.drop_table("company_reviews")
    op.drop_index("ix_smp_followers_company_id", table_name="smp_followers")
    op.drop_table("smp_followers")
    op.drop_index("ix_compa_competitors_compet_company_id", table_name="compa_competitors")
    op.drop_table("compa_competitors")
    op.drop_table("compa_companies")
