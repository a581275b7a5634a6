"""
db/models/social_followers.py

Latest follower counts per competitor, one row per competitor.
"""

from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class SocialFollowers(Base, TimestampMixin):
    """
    Upserted per platform by the follower scraper jobs.
    """

    __tablename__ = "smp_followers"

    id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=True,
    )

    company_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True, index=True)

    compet_company_id: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        unique=True,
    )

    facebook_follower_count: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    facebook_page_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    instagram_follower_count: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    instagram_page_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    linkedin_follower_count: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    linkedin_page_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="ACTIVE",
    )

    def __repr__(self) -> str:
        return f"<SocialFollowers compet_company_id={self.compet_company_id}>"
