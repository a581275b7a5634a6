"""
tests/test_text_extraction.py

Pytest unit tests for the pure text extraction helpers.

Coverage
--------
- Abbreviated follower counts (K/M suffixes, separators, surrounding words)
- Relative review dates, including the "a year ago" form and month clamping
- Star rating labels and the advisory "N reviews" total
- Card content hashing
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from app.scraping.text_extraction import (
    hash_content,
    is_relative_date_text,
    parse_abbreviated_count,
    parse_rating,
    parse_relative_date,
    parse_total_reviews,
)

NOW = datetime(2024, 3, 31, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# parse_abbreviated_count
# ---------------------------------------------------------------------------


class TestParseAbbreviatedCount:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("12.3K", 12300),
            ("1,234", 1234),
            ("2M", 2_000_000),
            ("15.2K followers", 15200),
            ("1.5m", 1_500_000),
            ("4,567 followers", 4567),
            ("999", 999),
        ],
    )
    def test_parses_counts(self, text: str, expected: int) -> None:
        assert parse_abbreviated_count(text) == expected

    @pytest.mark.parametrize("text", ["N/A", "", None, "followers", "K"])
    def test_returns_none_without_digits(self, text: str | None) -> None:
        assert parse_abbreviated_count(text) is None

    def test_product_is_floored(self) -> None:
        assert parse_abbreviated_count("1.2345K") == 1234

    def test_suffix_must_follow_number(self) -> None:
        assert parse_abbreviated_count("850 MEMBERS") == 850


# ---------------------------------------------------------------------------
# parse_relative_date
# ---------------------------------------------------------------------------


class TestParseRelativeDate:
    def test_weeks(self) -> None:
        assert parse_relative_date("2 weeks ago", now=NOW) == "2024-03-17T12:00:00+00:00"

    def test_quantity_defaults_to_one(self) -> None:
        assert parse_relative_date("a year ago", now=NOW) == "2023-03-31T12:00:00+00:00"

    def test_month_offset_clamps_to_month_end(self) -> None:
        assert parse_relative_date("1 month ago", now=NOW) == "2024-02-29T12:00:00+00:00"

    def test_hours_and_minutes(self) -> None:
        assert parse_relative_date("3 hours ago", now=NOW) == "2024-03-31T09:00:00+00:00"
        assert parse_relative_date("45 minutes ago", now=NOW) == "2024-03-31T11:15:00+00:00"

    def test_unrecognized_text_returns_none(self) -> None:
        assert parse_relative_date("Edited recently", now=NOW) is None
        assert parse_relative_date(None, now=NOW) is None

    def test_is_relative_date_text(self) -> None:
        assert is_relative_date_text("5 days ago")
        assert not is_relative_date_text("Local Guide")


# ---------------------------------------------------------------------------
# Ratings and totals
# ---------------------------------------------------------------------------


def test_parse_rating_reads_leading_number() -> None:
    assert parse_rating("4 stars") == 4.0
    assert parse_rating("4.5 stars") == 4.5
    assert parse_rating("Rated") is None
    assert parse_rating(None) is None


def test_parse_total_reviews_is_advisory() -> None:
    assert parse_total_reviews("4.6 (1,204 reviews)") == 1204
    assert parse_total_reviews("1 review") == 1
    assert parse_total_reviews("Overview About") == 0


# ---------------------------------------------------------------------------
# hash_content
# ---------------------------------------------------------------------------


class TestHashContent:
    def test_known_values(self) -> None:
        assert hash_content("") == 0
        assert hash_content("a") == 97
        assert hash_content("hello") == 99162322

    def test_wraps_to_signed_32_bits(self) -> None:
        value = hash_content("<div class='jftiEf'>A long review body that overflows</div>")
        assert -(2**31) <= value < 2**31

    def test_identical_markup_hashes_identically(self) -> None:
        assert hash_content("<span>Great</span>") == hash_content("<span>Great</span>")
        assert hash_content("<span>Great</span>") != hash_content("<span>Good</span>")
