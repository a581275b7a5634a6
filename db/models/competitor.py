"""
db/models/competitor.py

Competitor link between a company and a competing company, with the
competitor's social profile URLs.
"""

from sqlalchemy import BigInteger, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class Competitor(Base, TimestampMixin):
    __tablename__ = "compa_competitors"

    id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=True,
    )

    company_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("compa_companies.company_id", ondelete="CASCADE"),
        nullable=False,
    )

    compet_company_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("compa_companies.company_id", ondelete="CASCADE"),
        nullable=False,
    )

    facebook_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    instagram_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    linkedin_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "company_id",
            "compet_company_id",
            name="uq_compa_competitors_company_competitor",
        ),
        Index("ix_compa_competitors_compet_company_id", "compet_company_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Competitor company_id={self.company_id} "
            f"compet_company_id={self.compet_company_id}>"
        )
