"""
Unit tests for the Card model.
"""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from promptgallery.models.card import DEFAULT_CATEGORIES, DEFAULT_CATEGORY, Card, parse_timestamp


class TestParseTimestamp:
    """Test cases for parse_timestamp."""

    def test_iso_string_with_z_suffix(self):
        assert parse_timestamp("2024-03-01T10:20:30Z") == datetime(2024, 3, 1, 10, 20, 30, tzinfo=UTC)

    def test_iso_string_with_offset(self):
        parsed = parse_timestamp("2024-03-01T10:20:30.123456+05:30")

        assert parsed.utcoffset() == timedelta(hours=5, minutes=30)
        assert parsed.microsecond == 123456

    def test_naive_datetime_is_treated_as_utc(self):
        assert parse_timestamp(datetime(2024, 3, 1, 10, 0)).tzinfo is UTC

    def test_aware_datetime_is_kept(self):
        tz = timezone(timedelta(hours=9))
        value = datetime(2024, 3, 1, 10, 0, tzinfo=tz)

        assert parse_timestamp(value) is value

    def test_unsupported_value_raises(self):
        with pytest.raises(ValueError):
            parse_timestamp(12345)


class TestCard:
    """Test cases for Card."""

    def setup_method(self):
        """Set up test fixtures."""
        self.row = {
            "id": 42,
            "image_url": "https://example.com/a.jpg",
            "prompt": "Neon city at night",
            "category": "Leo",
            "created_at": "2024-01-02T03:04:05+00:00",
        }

    def test_from_row(self):
        card = Card.from_row(self.row)

        assert card.id == "42"
        assert card.image_url == "https://example.com/a.jpg"
        assert card.prompt == "Neon city at night"
        assert card.category == "Leo"
        assert card.created_at == datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)

    @pytest.mark.parametrize("category", [None, ""])
    def test_from_row_missing_category_is_none(self, category):
        self.row["category"] = category

        assert Card.from_row(self.row).category is None

    def test_from_row_without_category_key(self):
        del self.row["category"]

        assert Card.from_row(self.row).category is None

    def test_from_row_missing_required_column(self):
        del self.row["image_url"]

        with pytest.raises(KeyError):
            Card.from_row(self.row)

    def test_card_is_immutable(self):
        card = Card.from_row(self.row)

        with pytest.raises(AttributeError):
            card.prompt = "changed"

    def test_to_dict(self):
        data = Card.from_row(self.row).to_dict()

        assert data["id"] == "42"
        assert data["created_at"] == "2024-01-02T03:04:05+00:00"

    def test_new_row_leaves_identity_to_store(self):
        row = Card.new_row("prompt", "https://example.com/x.jpg", "GOAT")

        assert row == {"prompt": "prompt", "image_url": "https://example.com/x.jpg", "category": "GOAT"}

    def test_short_prompt(self):
        card = Card.from_row({**self.row, "prompt": "word " * 50})

        short = card.short_prompt(20)
        assert len(short) <= 20
        assert short.endswith("…")
        assert Card.from_row(self.row).short_prompt(20) == "Neon city at night"


class TestDefaultCategories:
    """Test cases for the known category labels."""

    def test_default_category_is_first_label(self):
        assert DEFAULT_CATEGORY == "GOAT"
        assert DEFAULT_CATEGORIES[0] == DEFAULT_CATEGORY

    def test_labels(self):
        assert "The Greatest Of All Time" in DEFAULT_CATEGORIES
        assert DEFAULT_CATEGORIES[-1] == "Other"
        assert len(set(DEFAULT_CATEGORIES)) == len(DEFAULT_CATEGORIES) == 10
