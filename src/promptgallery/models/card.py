"""
Card model for the promptgallery application.

A Card is one gallery entry: a stored image, the prompt that produced it and
the movie category it belongs to. Identity and creation time are assigned by
the metadata store, so Cards are only ever built from rows it returned.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

DEFAULT_CATEGORIES: tuple[str, ...] = (
    "GOAT",
    "Leo",
    "Master",
    "Beast",
    "Varisu",
    "Bigil",
    "Mersal",
    "Sarkar",
    "The Greatest Of All Time",
    "Other",
)

DEFAULT_CATEGORY = DEFAULT_CATEGORIES[0]


def parse_timestamp(value: Any) -> datetime:
    """
    Normalize a stored timestamp to an aware UTC datetime.

    Args:
        value: ISO-8601 string or datetime; naive values are taken as UTC

    Returns:
        datetime: Timezone-aware datetime

    Raises:
        ValueError: If the value cannot be interpreted as a timestamp
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        # PostgREST may answer with a trailing "Z"
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise ValueError(f"Unsupported timestamp value: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@dataclass(frozen=True)
class Card:
    """Represents one catalog entry as stored in the metadata table."""

    id: str
    image_url: str
    prompt: str
    category: str | None
    created_at: datetime

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Card":
        """
        Create a Card from a metadata-store row.

        Args:
            row: Mapping with id, image_url, prompt, category and created_at keys

        Returns:
            Card instance

        Raises:
            KeyError: If a required column is missing
            ValueError: If created_at cannot be parsed
        """
        return cls(
            id=str(row["id"]),
            image_url=row["image_url"],
            prompt=row["prompt"],
            category=row.get("category") or None,
            created_at=parse_timestamp(row["created_at"]),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert the Card to a plain dictionary."""
        return {
            "id": self.id,
            "image_url": self.image_url,
            "prompt": self.prompt,
            "category": self.category,
            "created_at": self.created_at.isoformat(),
        }

    @staticmethod
    def new_row(prompt: str, image_url: str, category: str) -> dict[str, str]:
        """Build the insert payload; id and created_at are left to the store."""
        return {"prompt": prompt, "image_url": image_url, "category": category}

    def short_prompt(self, limit: int = 120) -> str:
        """Get the prompt truncated for card previews."""
        if len(self.prompt) <= limit:
            return self.prompt
        return self.prompt[: limit - 1].rstrip() + "…"
