"""Mappings between demographic segments and stylistic guidance."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List

from models.taxonomy import Segment, validate_segment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SegmentProfile:
    """Represents styling preferences for a demographic segment."""

    name: str
    preferred_categories: List[str]
    style_emphasis: List[str]
    color_preferences: List[str]
    avoid_categories: List[str]
    fit_preferences: List[str]
    accessory_types: List[str]


_SEGMENT_PROFILES: Dict[Segment, SegmentProfile] = {
    Segment.MALE: SegmentProfile(
        name="Male",
        preferred_categories=[
            "shirt",
            "pants",
            "jacket",
            "shoes",
            "t-shirt",
            "jeans",
            "sweater",
            "blazer",
            "trousers",
            "shorts",
        ],
        style_emphasis=["formal", "casual", "sporty", "business", "smart", "classic"],
        color_preferences=["black", "navy", "gray", "white", "blue", "brown", "olive", "charcoal", "burgundy"],
        avoid_categories=["dress", "skirt", "heels", "purse", "lingerie"],
        fit_preferences=["slim", "regular", "tailored"],
        accessory_types=["watch", "belt", "tie", "wallet"],
    ),
    Segment.FEMALE: SegmentProfile(
        name="Female",
        preferred_categories=[
            "dress",
            "top",
            "skirt",
            "shoes",
            "accessories",
            "blouse",
            "heels",
            "purse",
            "handbag",
            "jumpsuit",
            "leggings",
            "cardigan",
        ],
        style_emphasis=["elegant", "casual", "trendy", "feminine", "chic", "bohemian", "romantic"],
        color_preferences=["pink", "purple", "red", "pastel", "floral", "print", "rose", "lavender", "coral", "mauve"],
        avoid_categories=["mens suit", "tie", "boxers", "mens watch"],
        fit_preferences=["fitted", "flowy", "wrap", "bodycon"],
        accessory_types=["necklace", "earrings", "bracelet", "handbag", "scarf"],
    ),
    Segment.KIDS: SegmentProfile(
        name="Kids",
        preferred_categories=[
            "t-shirt",
            "pants",
            "dress",
            "shoes",
            "sweater",
            "jacket",
            "shorts",
            "kids",
            "child",
            "children",
            "toddler",
            "baby",
            "boy",
            "girl",
            "hoodie",
            "jeans",
            "leggings",
            "skirt",
            "blouse",
            "shirt",
            "onesie",
            "romper",
            "overall",
            "pajama",
            "playwear",
            "sneakers",
            "rainboots",
        ],
        style_emphasis=["playful", "comfortable", "colorful", "durable", "fun", "casual", "practical"],
        color_preferences=[
            "bright",
            "primary",
            "rainbow",
            "cartoon",
            "fun print",
            "colorful",
            "red",
            "blue",
            "yellow",
            "green",
            "pink",
            "purple",
            "orange",
        ],
        avoid_categories=["formal suit", "high heels", "business attire", "tie", "blazer", "cocktail dress"],
        fit_preferences=["comfortable", "roomy", "easy wear"],
        accessory_types=["backpack", "hair clip", "fun socks", "sun hat"],
    ),
    Segment.UNISEX: SegmentProfile(
        name="Unisex",
        preferred_categories=["shirt", "pants", "jacket", "shoes", "hoodie", "jeans", "sweatshirt", "sneakers"],
        style_emphasis=["casual", "sporty", "minimal", "comfortable", "urban"],
        color_preferences=["neutral", "black", "white", "gray", "blue", "green", "beige"],
        avoid_categories=[],
        fit_preferences=["regular", "comfortable"],
        accessory_types=["beanie", "backpack", "sunglasses"],
    ),
}


def get_segment_profile(segment: Segment | str | None) -> SegmentProfile:
    """Return the :class:`SegmentProfile` for the given segment.

    Segments without a dedicated profile (All, Unknown) use the ``Unisex``
    profile.
    """

    key = validate_segment(segment)
    profile = _SEGMENT_PROFILES.get(key)
    if profile is None:
        logger.debug("No dedicated profile for segment '%s', using Unisex", key.value)
        profile = _SEGMENT_PROFILES[Segment.UNISEX]
    return profile


__all__ = ["SegmentProfile", "get_segment_profile"]
