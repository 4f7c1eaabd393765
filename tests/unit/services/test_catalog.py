"""
Unit tests for the catalog store and category filtering.
"""

from promptgallery.services.catalog import ALL_CATEGORIES_LABEL, CatalogStore, derive_categories, filter_by_category
from tests.fakes import make_card


class TestCatalogStore:
    """Test cases for CatalogStore."""

    def setup_method(self):
        """Set up test fixtures."""
        self.a = make_card("a", category="GOAT", minutes_ago=1)
        self.b = make_card("b", category="Leo", minutes_ago=2)
        self.c = make_card("c", category="Leo", minutes_ago=3)
        self.store = CatalogStore([self.a, self.b, self.c])

    def test_cards_snapshot_is_read_only(self):
        snapshot = self.store.cards

        assert isinstance(snapshot, tuple)
        self.store.remove("a")
        assert len(snapshot) == 3

    def test_container_protocol(self):
        assert len(self.store) == 3
        assert "b" in self.store
        assert "zzz" not in self.store
        assert list(self.store) == [self.a, self.b, self.c]

    def test_get(self):
        assert self.store.get("b") is self.b
        assert self.store.get("missing") is None

    def test_prepend_does_not_resort(self):
        older = make_card("old", minutes_ago=100)

        self.store.prepend(older)

        assert [card.id for card in self.store] == ["old", "a", "b", "c"]

    def test_remove_returns_card(self):
        assert self.store.remove("b") is self.b
        assert [card.id for card in self.store] == ["a", "c"]

    def test_remove_missing_returns_none(self):
        assert self.store.remove("missing") is None
        assert len(self.store) == 3

    def test_replace_all(self):
        self.store.replace_all([self.c])

        assert list(self.store) == [self.c]

    def test_select_and_clear(self):
        assert self.store.select("b") is self.b
        assert self.store.selected_id == "b"
        assert self.store.selected is self.b

        self.store.clear_selection()

        assert self.store.selected is None
        assert self.store.selected_id is None

    def test_select_unknown_closes_detail_view(self):
        self.store.select("a")

        assert self.store.select("missing") is None
        assert self.store.selected_id is None

    def test_remove_selected_closes_detail_view(self):
        self.store.select("a")

        self.store.remove("a")

        assert self.store.selected is None

    def test_replace_all_drops_stale_selection(self):
        self.store.select("a")

        self.store.replace_all([self.b, self.c])

        assert self.store.selected_id is None

    def test_replace_all_keeps_valid_selection(self):
        self.store.select("b")

        self.store.replace_all([self.b])

        assert self.store.selected_id == "b"


class TestFilterByCategory:
    """Test cases for filter_by_category."""

    def setup_method(self):
        """Set up test fixtures."""
        self.cards = [
            make_card("1", category="GOAT"),
            make_card("2", category="Leo"),
            make_card("3", category=None),
            make_card("4", category="Leo"),
        ]

    def test_filters_and_preserves_order(self):
        assert [card.id for card in filter_by_category(self.cards, "Leo")] == ["2", "4"]

    def test_all_label_returns_everything(self):
        assert filter_by_category(self.cards, ALL_CATEGORIES_LABEL) == self.cards

    def test_none_returns_everything(self):
        assert filter_by_category(self.cards, None) == self.cards

    def test_unknown_category_returns_empty(self):
        assert filter_by_category(self.cards, "Bigil") == []

    def test_accepts_catalog_store(self):
        assert [card.id for card in filter_by_category(CatalogStore(self.cards), "GOAT")] == ["1"]


class TestDeriveCategories:
    """Test cases for derive_categories."""

    def test_defaults_first_then_discovered_labels(self):
        cards = [make_card("1", category="Kaththi"), make_card("2", category="Leo"), make_card("3", category="Theri")]

        categories = derive_categories(cards, defaults=("GOAT", "Leo"))

        assert categories == ["GOAT", "Leo", "Kaththi", "Theri"]

    def test_empty_and_missing_labels_are_skipped(self):
        cards = [make_card("1", category=None), make_card("2", category="")]

        assert derive_categories(cards, defaults=()) == []

    def test_discovered_labels_are_unique(self):
        cards = [make_card("1", category="Theri"), make_card("2", category="Theri")]

        assert derive_categories(cards, defaults=()) == ["Theri"]

    def test_uses_known_categories_by_default(self):
        categories = derive_categories([])

        assert categories[0] == "GOAT"
        assert categories[-1] == "Other"
