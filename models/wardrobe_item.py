"""Clothing item data model and helpers."""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime, timezone
from typing import Any, Dict, Optional

DESCRIPTIVE_FIELDS = (
    "color",
    "style",
    "pattern",
    "season",
    "brand",
    "fabric",
    "occasion",
    "gender",
    "name",
)


def _clean(value: Any) -> Optional[str]:
    """Coerce a loose attribute into a stripped string, mapping blanks to ``None``."""

    if value is None:
        return None
    text = str(value).strip()
    return text or None


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ClothingItem:
    """Represents an item in the user's wardrobe."""

    item_id: str
    user_id: str
    category: str
    image_url: str
    color: Optional[str] = None
    style: Optional[str] = None
    pattern: Optional[str] = None
    season: Optional[str] = None
    brand: Optional[str] = None
    fabric: Optional[str] = None
    occasion: Optional[str] = None
    gender: Optional[str] = None
    name: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def __post_init__(self) -> None:
        self.item_id = str(self.item_id).strip()
        self.user_id = str(self.user_id).strip()
        self.category = _clean(self.category) or ""
        self.image_url = _clean(self.image_url) or ""
        for name in DESCRIPTIVE_FIELDS:
            setattr(self, name, _clean(getattr(self, name)))

    def attribute(self, name: str) -> str:
        """Return a lower-cased attribute, or an empty string when unset."""

        return (getattr(self, name, None) or "").lower()

    @property
    def display_name(self) -> str:
        return self.name or self.category or "item"


_FIELD_NAMES = {f.name for f in fields(ClothingItem)}


def from_raw_metadata(metadata: Dict[str, Any]) -> ClothingItem:
    """Factory to build a :class:`ClothingItem` from a loose record.

    Accepts ``id`` as an alias for ``item_id`` and ignores unknown keys.
    """

    payload = dict(metadata)
    if "item_id" not in payload and "id" in payload:
        payload["item_id"] = payload.pop("id")
    required_fields = ["item_id", "user_id", "category"]
    missing = [field for field in required_fields if not _clean(payload.get(field))]
    if missing:
        raise ValueError(f"Missing required fields for ClothingItem: {missing}")

    payload.setdefault("image_url", "")
    return ClothingItem(**{key: value for key, value in payload.items() if key in _FIELD_NAMES})


__all__ = ["ClothingItem", "DESCRIPTIVE_FIELDS", "from_raw_metadata", "utc_timestamp"]
