"""
db/models/company_review.py

Scraped Google reviews per company.
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Float, ForeignKey, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class CompanyReview(Base):
    __tablename__ = "company_reviews"

    review_id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=True,
    )

    company_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("compa_companies.company_id", ondelete="CASCADE"),
        nullable=False,
    )

    reviewer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    review_text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    review_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    sentiment: Mapped[str | None] = mapped_column(
        String(16),
        nullable=True,
        comment="POSITIVE, NEGATIVE or NEUTRAL",
    )
    polarity: Mapped[float | None] = mapped_column(Float, nullable=True)
    source: Mapped[str] = mapped_column(String(32), nullable=False, default="GOOGLE")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        Index("ix_company_reviews_company_created", "company_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<CompanyReview review_id={self.review_id} company_id={self.company_id}>"
