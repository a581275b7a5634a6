"""
db/models/company.py

Company model: a registered company or a competitor of one.
"""

from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class Company(Base, TimestampMixin):
    """
    Registered company. Competitors are companies too, linked via Competitor.
    """

    __tablename__ = "compa_companies"

    company_id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=True,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    address: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
    )

    google_review_url: Mapped[str | None] = mapped_column(
        String(1000),
        nullable=True,
        comment="Direct Google Maps review link, when known",
    )

    def __repr__(self) -> str:
        return f"<Company company_id={self.company_id} name={self.name!r}>"
