"""Outfit assembly: match percentage, style notes and analysis summary."""
from __future__ import annotations

import uuid
from typing import List, Optional

from logic.outfit_scoring import COMBINED_CAP, CompatibilityScore
from models.occasion import OccasionContext
from models.outfit import GeneratedOutfit
from models.segment_profiles import get_segment_profile
from models.taxonomy import Segment, validate_segment
from models.wardrobe_item import ClothingItem

EVERYDAY = "Everyday"

_CLOSING_SENTENCES = {
    Segment.KIDS: "This playful {style} ensemble is perfect for active kids with comfortable and durable materials",
    Segment.FEMALE: "This elegant {style} look showcases feminine sophistication with beautiful color coordination",
    Segment.MALE: "This sharp {style} outfit demonstrates classic masculine styling with excellent fit",
}
_DEFAULT_CLOSING = "This unique {style} ensemble showcases excellent fashion sense"

_SUMMARY_SIGNOFFS = {
    Segment.KIDS: "Kid-friendly outfit focusing on comfort, fun and practicality!",
    Segment.FEMALE: "Sophisticated feminine styling with elegant touches",
    Segment.MALE: "Sharp masculine styling with classic appeal",
}
_DEFAULT_SIGNOFF = "Versatile styling for your preferred look"


def match_percentage(color_score: int, style_score: int) -> int:
    """Normalise the two scorers' combined score to 0-100."""

    percentage = round(100 * (color_score + style_score) / COMBINED_CAP)
    return max(0, min(100, int(percentage)))


def _describe(item: ClothingItem, noun: Optional[str] = None) -> str:
    parts = [item.color, noun or item.display_name]
    return " ".join(part for part in parts if part)


def build_style_notes(
    top: ClothingItem,
    bottom: ClothingItem,
    shoes: Optional[ClothingItem],
    accessories: List[ClothingItem],
    segment: Segment | str,
    dominant_style: str,
    occasion: Optional[OccasionContext] = None,
) -> str:
    key = validate_segment(segment)
    label = key.value
    notes = [f"Fresh {label} styling: {_describe(top)} with {_describe(bottom, bottom.category)}"]
    if shoes is not None:
        notes.append(f"Completed with {label.lower()}-appropriate {_describe(shoes, shoes.category)}")
    if accessories:
        notes.append(f"Enhanced with {len(accessories)} {label.lower()}-style accessories")
    notes.append(_CLOSING_SENTENCES.get(key, _DEFAULT_CLOSING).format(style=dominant_style))
    if occasion is not None:
        notes.append(f"Perfectly suited for {occasion.occasion} event")
    return ". ".join(notes)


def build_analysis_summary(
    segment: Segment | str,
    percentage: int,
    color: CompatibilityScore,
    style: CompatibilityScore,
    occasion: Optional[OccasionContext] = None,
) -> str:
    """Multi-line explanation shown next to a generated outfit."""

    key = validate_segment(segment)
    profile = get_segment_profile(key)
    lines = [
        f"{key.value} Outfit Analysis: Scored {percentage}%",
        f"- Tailored for {key.value} fashion preferences",
        f"- {len(profile.preferred_categories)} recommended categories considered",
        *color.notes,
        *style.notes,
    ]
    if occasion is not None:
        lines.append(f'Customized for "{occasion.title}" ({occasion.occasion})')
    else:
        lines.append("Suited for everyday wear")
    lines.append(_SUMMARY_SIGNOFFS.get(key, _DEFAULT_SIGNOFF))
    return "\n".join(lines)


def assemble_outfit(
    top: ClothingItem,
    bottom: ClothingItem,
    shoes: Optional[ClothingItem],
    accessories: List[ClothingItem],
    segment: Segment | str,
    color: CompatibilityScore,
    style: CompatibilityScore,
    occasion: Optional[OccasionContext] = None,
) -> GeneratedOutfit:
    """Package the winning candidate into a :class:`GeneratedOutfit`."""

    key = validate_segment(segment)
    dominant = style.dominant_style or "casual"
    return GeneratedOutfit(
        top=top,
        bottom=bottom,
        shoes=shoes,
        accessories=list(accessories),
        occasion=occasion.title if occasion is not None else EVERYDAY,
        style_notes=build_style_notes(top, bottom, shoes, accessories, key, dominant, occasion),
        match_score=match_percentage(color.score, style.score),
        segment=key.value,
        generation_id=uuid.uuid4().hex,
        dominant_style=dominant,
        rationale=[*color.notes, *style.notes],
    )


__all__ = [
    "EVERYDAY",
    "match_percentage",
    "build_style_notes",
    "build_analysis_summary",
    "assemble_outfit",
]
