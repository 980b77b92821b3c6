"""Favorite routines and exercises."""

from dataclasses import dataclass, field
from enum import Enum

from .session import now_millis

KEY_SEPARATOR = "::"


class FavoriteItemType(str, Enum):
    """Kinds of library items that can be favorited."""

    ROUTINE = "routine"
    EXERCISE = "exercise"


def favorite_key(item_type: FavoriteItemType | str, item_id: str) -> str:
    """Composite key `itemType::itemId` shared by the store and the cache."""
    return f"{FavoriteItemType(item_type).value}{KEY_SEPARATOR}{item_id}"


def parse_favorite_key(key: str) -> tuple[FavoriteItemType, str]:
    """Split a composite key back into its item type and id."""
    item_type, sep, item_id = key.partition(KEY_SEPARATOR)
    if not sep or not item_id:
        raise ValueError(f"Invalid favorite key: {key!r}")
    return FavoriteItemType(item_type), item_id


@dataclass
class Favorite:
    """A favorited routine or exercise."""

    item_type: FavoriteItemType
    item_id: str
    created_at: int = field(default_factory=now_millis)

    @property
    def key(self) -> str:
        return favorite_key(self.item_type, self.item_id)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "itemType": self.item_type.value,
            "itemId": self.item_id,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Favorite":
        """Create from dictionary."""
        return cls(
            item_type=FavoriteItemType(data["itemType"]),
            item_id=str(data["itemId"]),
            created_at=data.get("createdAt") or 0,
        )
