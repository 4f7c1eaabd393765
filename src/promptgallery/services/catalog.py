"""In-memory catalog of cards and category filtering."""

from collections.abc import Iterable, Iterator

from ..logging_config import get_logger
from ..models.card import DEFAULT_CATEGORIES, Card

logger = get_logger(__name__)

ALL_CATEGORIES_LABEL = "All"


class CatalogStore:
    """
    Ordered collection of cards shown by the gallery, newest first.

    The store is a cache of the metadata table as of the last fetch or
    mutation. It is owned by one session and is not thread-safe.
    """

    def __init__(self, cards: Iterable[Card] | None = None) -> None:
        self._cards: list[Card] = list(cards or [])
        self._selected_id: str | None = None

    @property
    def cards(self) -> tuple[Card, ...]:
        return tuple(self._cards)

    def replace_all(self, cards: Iterable[Card]) -> None:
        """Replace the contents with a freshly fetched, already ordered list."""
        self._cards = list(cards)
        if self._selected_id is not None and self._selected_id not in self:
            self._selected_id = None
        logger.debug("catalog_replaced", count=len(self._cards))

    def prepend(self, card: Card) -> None:
        """Insert a newly created card at the head without re-sorting."""
        self._cards.insert(0, card)

    def remove(self, card_id: str) -> Card | None:
        """Remove and return the card with ``card_id``, closing its detail view."""
        for index, card in enumerate(self._cards):
            if card.id == card_id:
                del self._cards[index]
                if self._selected_id == card_id:
                    self._selected_id = None
                return card
        return None

    def get(self, card_id: str) -> Card | None:
        return next((card for card in self._cards if card.id == card_id), None)

    def __contains__(self, card_id: object) -> bool:
        return any(card.id == card_id for card in self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(tuple(self._cards))

    # Detail view

    @property
    def selected_id(self) -> str | None:
        return self._selected_id

    @property
    def selected(self) -> Card | None:
        return self.get(self._selected_id) if self._selected_id is not None else None

    def select(self, card_id: str) -> Card | None:
        """Open the detail view for ``card_id``; unknown ids close it."""
        card = self.get(card_id)
        self._selected_id = card.id if card else None
        return card

    def clear_selection(self) -> None:
        self._selected_id = None


def filter_by_category(cards: Iterable[Card], active: str | None) -> list[Card]:
    """
    Keep the cards whose category equals ``active``, preserving order.

    ``None`` and the "All" label select every card.
    """
    if active is None or active == ALL_CATEGORIES_LABEL:
        return list(cards)
    return [card for card in cards if card.category == active]


def derive_categories(cards: Iterable[Card], defaults: Iterable[str] = DEFAULT_CATEGORIES) -> list[str]:
    """Known categories first, then labels found on cards in first-seen order."""
    categories: list[str] = []
    seen: set[str] = set()
    for label in [*defaults, *(card.category for card in cards)]:
        if label and label not in seen:
            seen.add(label)
            categories.append(label)
    return categories
