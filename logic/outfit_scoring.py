"""Deterministic compatibility scoring for candidate outfits."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from models.color_theory import harmonious, in_color_group, is_neutral
from models.occasion import OccasionContext
from models.segment_profiles import SegmentProfile, get_segment_profile
from models.taxonomy import DEFAULT_STYLE, STYLE_GROUPS, Segment, contains_any, validate_segment
from models.wardrobe_item import ClothingItem

SCORER_CAP = 15
COMBINED_CAP = SCORER_CAP * 2

# Per-garment bonuses as (top, bottom, shoes).
CATEGORY_BONUS = (3, 3, 2)
GENDER_BONUS: Dict[Segment, tuple] = {
    Segment.KIDS: (3, 3, 2),
    Segment.FEMALE: (2, 2, 1),
    Segment.MALE: (2, 2, 1),
}


@dataclass(frozen=True)
class CompatibilityScore:
    """Bounded score plus the rationale fragments that produced it."""

    score: int
    notes: List[str] = field(default_factory=list)
    dominant_style: Optional[str] = None


def _cap(value: int) -> int:
    return max(0, min(SCORER_CAP, value))


def _color(item: Optional[ClothingItem]) -> str:
    return item.attribute("color") if item else ""


def _style(item: Optional[ClothingItem]) -> str:
    if item is None:
        return DEFAULT_STYLE
    return item.attribute("style") or DEFAULT_STYLE


def score_color_harmony(
    top: ClothingItem,
    bottom: ClothingItem,
    shoes: Optional[ClothingItem],
    segment: Segment | str,
) -> CompatibilityScore:
    """Score color agreement with the segment's palette and between garments."""

    key = validate_segment(segment)
    profile = get_segment_profile(key)
    top_color, bottom_color, shoes_color = _color(top), _color(bottom), _color(shoes)
    score = 0
    notes: List[str] = []

    if contains_any(top_color, profile.color_preferences):
        score += 2
        notes.append(f"{key.value}-appropriate top color")
    if contains_any(bottom_color, profile.color_preferences):
        score += 2
        notes.append(f"{key.value}-appropriate bottom color")
    if key is Segment.KIDS and (in_color_group(top_color, "kids") or in_color_group(bottom_color, "kids")):
        score += 3
        notes.append("Kid-friendly bright colors")
    if key is Segment.FEMALE and (in_color_group(top_color, "pastel") or in_color_group(bottom_color, "pastel")):
        score += 2
        notes.append("Soft feminine pastel tones")
    if is_neutral(top_color) or is_neutral(bottom_color):
        score += 2
        notes.append("Versatile neutral foundation")
    if harmonious(top_color, bottom_color):
        score += 3
        notes.append("Harmonious top and bottom colors")
    if shoes_color and (harmonious(shoes_color, top_color) or harmonious(shoes_color, bottom_color)):
        score += 2
        notes.append("Shoes complement the outfit colors")

    return CompatibilityScore(score=_cap(score), notes=notes)


def dominant_style(styles: List[str]) -> str:
    """Style group with the most matches across ``styles``.

    Ties go to the group encountered first while scanning ``styles`` in order.
    """

    counts: Dict[str, int] = {}
    for style in styles:
        for name, keywords in STYLE_GROUPS.items():
            if contains_any(style, keywords):
                counts[name] = counts.get(name, 0) + 1
    best, best_count = DEFAULT_STYLE, 0
    for name, count in counts.items():
        if count > best_count:
            best, best_count = name, count
    return best


def style_consistent(style1: str, style2: str) -> bool:
    """Return True when both styles share a style group."""

    return any(
        contains_any(style1, keywords) and contains_any(style2, keywords) for keywords in STYLE_GROUPS.values()
    )


def score_style_compatibility(
    top: ClothingItem,
    bottom: ClothingItem,
    shoes: Optional[ClothingItem],
    segment: Segment | str,
    occasion: Optional[OccasionContext] = None,
) -> CompatibilityScore:
    """Score style agreement with the segment, between garments and with the occasion."""

    key = validate_segment(segment)
    profile = get_segment_profile(key)
    top_style, bottom_style, shoes_style = _style(top), _style(bottom), _style(shoes)
    score = 0
    notes: List[str] = []

    if contains_any(top_style, profile.style_emphasis):
        score += 2
        notes.append(f"{key.value}-style top")
    if contains_any(bottom_style, profile.style_emphasis):
        score += 2
        notes.append(f"{key.value}-style bottom")
    playful = STYLE_GROUPS["playful"]
    if key is Segment.KIDS and (contains_any(top_style, playful) or contains_any(bottom_style, playful)):
        score += 3
        notes.append("Playful, kid-appropriate styling")
    feminine = STYLE_GROUPS["feminine"]
    if key is Segment.FEMALE and (contains_any(top_style, feminine) or contains_any(bottom_style, feminine)):
        score += 3
        notes.append("Feminine styling")

    dominant = dominant_style([top_style, bottom_style, shoes_style])
    if style_consistent(top_style, bottom_style):
        score += 3
        notes.append(f"Coherent {dominant} style throughout")
    if shoes is not None and contains_any(shoes_style, STYLE_GROUPS[dominant]):
        score += 2
        notes.append("Matching shoe style")
    if occasion is not None and dominant == occasion.tag:
        score += 3
        notes.append(f"Suited to the {occasion.occasion} occasion")

    return CompatibilityScore(score=_cap(score), notes=notes, dominant_style=dominant)


def category_preference_bonus(
    top: ClothingItem, bottom: ClothingItem, shoes: Optional[ClothingItem], profile: SegmentProfile
) -> int:
    """Bonus for garments whose category matches the segment's preferred categories."""

    top_bonus, bottom_bonus, shoes_bonus = CATEGORY_BONUS
    bonus = 0
    if contains_any(top.category, profile.preferred_categories):
        bonus += top_bonus
    if contains_any(bottom.category, profile.preferred_categories):
        bonus += bottom_bonus
    if shoes is not None and contains_any(shoes.category, profile.preferred_categories):
        bonus += shoes_bonus
    return bonus


def gender_match_bonus(
    top: ClothingItem, bottom: ClothingItem, shoes: Optional[ClothingItem], segment: Segment | str
) -> int:
    """Bonus for garments explicitly labelled with the active segment's gender."""

    key = validate_segment(segment)
    weights = GENDER_BONUS.get(key)
    if weights is None:
        return 0
    target = key.value.lower()
    bonus = 0
    for item, weight in zip((top, bottom, shoes), weights):
        if item is not None and item.attribute("gender") == target:
            bonus += weight
    return bonus


def is_avoided(item: ClothingItem, profile: SegmentProfile) -> bool:
    """Return True when the item's category contains one of the segment's avoid keywords."""

    return contains_any(item.category, profile.avoid_categories)


__all__ = [
    "SCORER_CAP",
    "COMBINED_CAP",
    "CompatibilityScore",
    "score_color_harmony",
    "score_style_compatibility",
    "dominant_style",
    "style_consistent",
    "category_preference_bonus",
    "gender_match_bonus",
    "is_avoided",
]
