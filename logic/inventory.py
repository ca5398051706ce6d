"""Deterministic segment filtering and category bucketing for wardrobe items."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from models.taxonomy import (
    ACCESSORY_LIMIT,
    CategoryBucket,
    FilterMode,
    Segment,
    classify_category,
    validate_segment,
)
from models.wardrobe_item import ClothingItem

logger = logging.getLogger(__name__)

_WILDCARD_SEGMENTS = {Segment.MALE, Segment.FEMALE}


@dataclass(frozen=True)
class CategorizedInventory:
    """Items partitioned into outfit slots."""

    tops: List[ClothingItem] = field(default_factory=list)
    bottoms: List[ClothingItem] = field(default_factory=list)
    shoes: List[ClothingItem] = field(default_factory=list)
    accessories: List[ClothingItem] = field(default_factory=list)

    @property
    def can_build_outfit(self) -> bool:
        return bool(self.tops) and bool(self.bottoms)

    def counts(self) -> Dict[str, int]:
        return {
            "tops": len(self.tops),
            "bottoms": len(self.bottoms),
            "shoes": len(self.shoes),
            "accessories": len(self.accessories),
        }


def _gender_matches(item: ClothingItem, segment: Segment) -> bool:
    return item.attribute("gender") == segment.value.lower()


def filter_segment_strict(items: Iterable[ClothingItem], segment: Segment | str) -> List[ClothingItem]:
    """Browsing filter: every segment other than All/Unknown needs an exact gender match."""

    key = validate_segment(segment)
    items = list(items)
    if key is Segment.ALL:
        return items
    if key is Segment.UNKNOWN:
        return [item for item in items if not item.gender]
    return [item for item in items if _gender_matches(item, key)]


def filter_segment_permissive(items: Iterable[ClothingItem], segment: Segment | str) -> List[ClothingItem]:
    """Generation filter: like the strict filter, but Male/Female also accept items without a gender."""

    key = validate_segment(segment)
    if key not in _WILDCARD_SEGMENTS:
        return filter_segment_strict(items, key)
    return [item for item in items if not item.gender or _gender_matches(item, key)]


def filter_by_segment(
    items: Iterable[ClothingItem], segment: Segment | str, mode: FilterMode | str = FilterMode.STRICT
) -> List[ClothingItem]:
    """Filter items for a segment using the requested filter variant."""

    if FilterMode(mode) is FilterMode.PERMISSIVE:
        filtered = filter_segment_permissive(items, segment)
    else:
        filtered = filter_segment_strict(items, segment)
    logger.debug("Segment filter %s (%s) kept %s items", segment, FilterMode(mode).value, len(filtered))
    return filtered


def categorize(items: Iterable[ClothingItem]) -> CategorizedInventory:
    """Assign each item to at most one outfit slot by ordered keyword matching.

    Accessories are the items matching accessory keywords, followed by up to
    :data:`ACCESSORY_LIMIT` items matching no keyword list at all; the combined
    list is capped at the same limit.
    """

    buckets: Dict[CategoryBucket, List[ClothingItem]] = {bucket: [] for bucket in CategoryBucket}
    unmatched: List[ClothingItem] = []
    for item in items:
        bucket = classify_category(item.category)
        if bucket is None:
            unmatched.append(item)
        else:
            buckets[bucket].append(item)

    accessories = (buckets[CategoryBucket.ACCESSORIES] + unmatched[:ACCESSORY_LIMIT])[:ACCESSORY_LIMIT]
    return CategorizedInventory(
        tops=buckets[CategoryBucket.TOPS],
        bottoms=buckets[CategoryBucket.BOTTOMS],
        shoes=buckets[CategoryBucket.SHOES],
        accessories=accessories,
    )


def wardrobe_stats(
    items: Iterable[ClothingItem], segment: Segment | str, mode: FilterMode | str = FilterMode.STRICT
) -> Dict[str, int]:
    """Counts of the filtered inventory per outfit slot."""

    filtered = filter_by_segment(items, segment, mode)
    inventory = categorize(filtered)
    return {"total": len(filtered), **inventory.counts()}


__all__ = [
    "CategorizedInventory",
    "filter_segment_strict",
    "filter_segment_permissive",
    "filter_by_segment",
    "categorize",
    "wardrobe_stats",
]
