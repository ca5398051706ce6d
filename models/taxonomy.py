"""Canonical taxonomy definitions for wardrobe items.

This module centralises the demographic segments, category buckets and the
keyword tables used to classify free-form item attributes. Helper functions keep
keyword matching consistent across filtering, scoring and storage.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, List, Optional


class Segment(str, Enum):
    """Demographic styling context used to filter inventory and weight scoring."""

    ALL = "All"
    MALE = "Male"
    FEMALE = "Female"
    UNISEX = "Unisex"
    KIDS = "Kids"
    UNKNOWN = "Unknown"


class CategoryBucket(str, Enum):
    """Outfit slot an item is assigned to by :func:`classify_category`."""

    TOPS = "tops"
    BOTTOMS = "bottoms"
    SHOES = "shoes"
    ACCESSORIES = "accessories"


class FilterMode(str, Enum):
    """Segment filter variants.

    ``strict`` is used when browsing the wardrobe; ``permissive`` is used during
    outfit generation and treats items without a gender as Male/Female wildcards.
    """

    STRICT = "strict"
    PERMISSIVE = "permissive"


# Ordered: the first bucket whose keywords match decides the assignment.
CATEGORY_KEYWORDS: Dict[CategoryBucket, List[str]] = {
    CategoryBucket.TOPS: [
        "top",
        "shirt",
        "blouse",
        "t-shirt",
        "tshirt",
        "sweater",
        "hoodie",
        "cardigan",
        "jacket",
        "coat",
    ],
    CategoryBucket.BOTTOMS: ["pant", "pants", "jeans", "trouser", "short", "skirt", "legging"],
    CategoryBucket.SHOES: ["shoe", "sneaker", "boot", "heel", "loafer", "oxford", "sandals", "trainer"],
    CategoryBucket.ACCESSORIES: [
        "accessory",
        "bag",
        "purse",
        "scarf",
        "belt",
        "hat",
        "cap",
        "watch",
        "necklace",
        "earring",
        "bracelet",
    ],
}

ACCESSORY_LIMIT = 12

COLOR_GROUPS: Dict[str, List[str]] = {
    "neutrals": ["black", "white", "gray", "grey", "navy", "beige", "brown", "cream", "charcoal"],
    "warm": ["red", "orange", "yellow", "pink", "burgundy", "coral", "gold", "peach", "rose", "rust"],
    "cool": ["blue", "green", "purple", "teal", "turquoise", "silver", "lavender", "mint", "sky"],
    "earth": ["brown", "olive", "tan", "khaki", "cream", "taupe", "camel", "sand"],
    "pastel": ["pastel", "light pink", "baby blue", "lavender", "mint", "peach", "cream"],
    "kids": ["bright", "neon", "rainbow", "multicolor", "primary", "pastel", "colorful"],
}

STYLE_GROUPS: Dict[str, List[str]] = {
    "casual": ["casual", "everyday", "comfort", "relaxed", "street", "basic"],
    "formal": ["formal", "business", "professional", "office", "elegant", "sophisticated"],
    "sporty": ["sport", "athletic", "active", "gym", "workout", "training"],
    "trendy": ["trendy", "fashion", "modern", "contemporary", "chic"],
    "vintage": ["vintage", "retro", "classic", "traditional", "heritage"],
    "playful": ["playful", "fun", "colorful", "whimsical", "cartoon"],
    "feminine": ["feminine", "delicate", "romantic", "flowy", "chic"],
    "masculine": ["masculine", "sharp", "structured", "tailored"],
}

DEFAULT_STYLE = "casual"


def _normalize_key(value: str) -> str:
    """Normalise a free-form string for case-insensitive comparisons."""

    return value.strip().lower()


def validate_segment(value: str | Segment | None) -> Segment:
    """Validate and normalise a segment value.

    ``None`` and empty strings resolve to :attr:`Segment.ALL`. Raises a
    :class:`ValueError` if the value is not a known segment.
    """

    if isinstance(value, Segment):
        return value
    key = _normalize_key(value or "")
    if not key:
        return Segment.ALL
    for segment in Segment:
        if segment.value.lower() == key:
            return segment
    raise ValueError(f"Unsupported segment '{value}'. Allowed: {[s.value for s in Segment]}")


def contains_any(value: str | None, keywords: Iterable[str]) -> bool:
    """Return True when any keyword is a substring of the lower-cased value."""

    text = _normalize_key(value or "")
    if not text:
        return False
    return any(keyword in text for keyword in keywords)


def classify_category(category: str | None) -> Optional[CategoryBucket]:
    """Return the first bucket whose keywords match ``category``.

    Items matching no keyword list return ``None``; they may still be used as
    accessories by the categorizer.
    """

    for bucket, keywords in CATEGORY_KEYWORDS.items():
        if contains_any(category, keywords):
            return bucket
    return None


__all__ = [
    "Segment",
    "CategoryBucket",
    "FilterMode",
    "CATEGORY_KEYWORDS",
    "ACCESSORY_LIMIT",
    "COLOR_GROUPS",
    "STYLE_GROUPS",
    "DEFAULT_STYLE",
    "validate_segment",
    "contains_any",
    "classify_category",
]
