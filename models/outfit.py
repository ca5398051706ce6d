"""Outfit schemas produced by the generation engine."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from models.wardrobe_item import ClothingItem

# Percent-encoding never emits "*" or "|", so neither can come from an item id.
NO_SHOES = "*"
SIGNATURE_SEPARATOR = "|"


def outfit_signature(top: ClothingItem, bottom: ClothingItem, shoes: Optional[ClothingItem] = None) -> str:
    """Deterministic key for a top/bottom/shoes triple used for duplicate detection.

    Ids are percent-encoded before joining so distinct triples never share a key.
    """

    parts = [quote(top.item_id, safe=""), quote(bottom.item_id, safe="")]
    parts.append(quote(shoes.item_id, safe="") if shoes else NO_SHOES)
    return SIGNATURE_SEPARATOR.join(parts)


@dataclass
class GeneratedOutfit:
    top: ClothingItem
    bottom: ClothingItem
    shoes: Optional[ClothingItem]
    accessories: List[ClothingItem]
    occasion: str
    style_notes: str
    match_score: int
    segment: str
    generation_id: str
    dominant_style: str = "casual"
    rationale: List[str] = field(default_factory=list)

    @property
    def signature(self) -> str:
        return outfit_signature(self.top, self.bottom, self.shoes)

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["signature"] = self.signature
        return payload


@dataclass
class SavedOutfit:
    """A generated outfit the user chose to keep."""

    outfit_id: str
    user_id: str
    name: str
    description: str
    items: Dict[str, Any]
    occasion: str
    style: str
    ai_score: int
    gender: str
    created_at: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["GeneratedOutfit", "NO_SHOES", "SIGNATURE_SEPARATOR", "SavedOutfit", "outfit_signature"]
