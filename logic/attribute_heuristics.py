"""Heuristic attribute analysis from image proportions and filename tokens.

The analyzer has no access to pixel content: it infers a provisional category
from the aspect ratio and refines every attribute from substrings of the
uploaded filename. Each value carries a confidence so callers can show how much
the guess should be trusted. It never raises; undecodable images produce a
fixed low-confidence record.
"""

from __future__ import annotations

import io
import logging
from pathlib import PurePath
from typing import Dict, List, Optional, Sequence, Tuple

from PIL import Image, UnidentifiedImageError

from models.attributes import AttributeAnalysis, AttributeGuess, mean_confidence

logger = logging.getLogger(__name__)

KeywordRule = Tuple[Sequence[str], str, int]

COLOR_RULES: List[KeywordRule] = [
    (("black", "dark"), "Black", 85),
    (("white", "light"), "White", 85),
    (("blue", "navy", "denim"), "Blue", 80),
    (("red", "burgundy", "maroon"), "Red", 80),
    (("green", "olive"), "Green", 80),
    (("gray", "grey"), "Gray", 80),
    (("pink",), "Pink", 85),
    (("yellow",), "Yellow", 85),
]
STYLE_RULES: List[KeywordRule] = [
    (("formal", "suit", "dress"), "formal", 80),
    (("sport", "active", "gym"), "sporty", 85),
    (("elegant", "luxury", "designer"), "elegant", 70),
]
PATTERN_RULES: List[KeywordRule] = [
    (("strip", "line"), "striped", 80),
    (("floral", "flower"), "floral", 85),
    (("check", "plaid", "tartan"), "checkered", 80),
    (("print", "pattern"), "printed", 65),
]
FABRIC_RULES: List[KeywordRule] = [
    (("denim", "jean"), "denim", 90),
    (("silk", "satin"), "silk", 85),
    (("wool", "sweater"), "wool", 80),
    (("leather",), "leather", 90),
    (("linen",), "linen", 75),
]
GENDER_RULES: List[KeywordRule] = [
    (("women", "female", "lady"), "Female", 70),
    (("unisex",), "Unisex", 80),
]
OCCASION_RULES: List[KeywordRule] = [
    (("business", "office"), "business", 75),
    (("party", "night"), "party", 80),
]
SEASON_RULES: List[KeywordRule] = [
    (("winter", "cold", "wool"), "winter", 80),
    (("summer", "light", "linen"), "summer", 75),
]

DEFAULTS: Dict[str, Tuple[str, int]] = {
    "color": ("Multi-color", 65),
    "style": ("casual", 75),
    "pattern": ("solid", 70),
    "fabric": ("cotton", 60),
    # No visual signal exists for gender, so the default stays low-confidence.
    "gender": ("Male", 60),
    "occasion": ("casual", 70),
    "season": ("all-season", 70),
}

FALLBACK_ATTRIBUTES: Dict[str, Tuple[str, int]] = {
    "category": ("clothing", 50),
    "color": ("Multi-color", 40),
    "style": ("casual", 60),
    "pattern": ("solid", 50),
    "season": ("all-season", 55),
    "brand": ("Unknown", 20),
    "fabric": ("cotton", 45),
    "occasion": ("casual", 60),
    "gender": ("unisex", 50),
}
FALLBACK_OVERALL_CONFIDENCE = 50
BRAND_GUESS = ("Unknown", 30)
NAME_CONFIDENCE = 90


def _stem(filename: str) -> str:
    return PurePath(filename or "").stem if filename else ""


def _first_match(filename: str, rules: Sequence[KeywordRule], default: Tuple[str, int]) -> AttributeGuess:
    for keywords, value, confidence in rules:
        if any(keyword in filename for keyword in keywords):
            return AttributeGuess(value=value, confidence=confidence)
    return AttributeGuess(value=default[0], confidence=default[1])


def _guess_category(aspect_ratio: float, filename: str) -> AttributeGuess:
    has = lambda *tokens: any(token in filename for token in tokens)  # noqa: E731
    if 0.8 < aspect_ratio < 1.2:
        if has("shoe", "sneaker", "boot"):
            return AttributeGuess(value="shoes", confidence=88)
        return AttributeGuess(value="accessories", confidence=75)
    if aspect_ratio > 1.2:
        if has("pant", "jean", "trouser"):
            return AttributeGuess(value="pants", confidence=85)
        if has("dress", "gown"):
            return AttributeGuess(value="dress", confidence=90)
        return AttributeGuess(value="pants", confidence=70)
    if has("shirt", "tshirt", "top"):
        return AttributeGuess(value="shirt", confidence=90)
    if has("jacket", "coat", "hoodie"):
        return AttributeGuess(value="jacket", confidence=85)
    return AttributeGuess(value="shirt", confidence=75)


def _guess_occasion(style: AttributeGuess, filename: str) -> AttributeGuess:
    if style.value == "formal":
        return AttributeGuess(value="formal", confidence=80)
    if style.value == "sporty":
        return AttributeGuess(value="sport", confidence=85)
    return _first_match(filename, OCCASION_RULES, DEFAULTS["occasion"])


def analyze_dimensions(width: int, height: int, filename: str) -> AttributeAnalysis:
    """Derive provisional attributes from image dimensions and filename tokens."""

    if width <= 0 or height <= 0:
        logger.info("Non-positive image dimensions %sx%s, using fallback attributes", width, height)
        return fallback_analysis(filename)

    lowered = (filename or "").lower()
    aspect_ratio = width / height
    style = _first_match(lowered, STYLE_RULES, DEFAULTS["style"])
    attributes: Dict[str, AttributeGuess] = {
        "category": _guess_category(aspect_ratio, lowered),
        "color": _first_match(lowered, COLOR_RULES, DEFAULTS["color"]),
        "style": style,
        "pattern": _first_match(lowered, PATTERN_RULES, DEFAULTS["pattern"]),
        "season": _first_match(lowered, SEASON_RULES, DEFAULTS["season"]),
        "brand": AttributeGuess(value=BRAND_GUESS[0], confidence=BRAND_GUESS[1]),
        "fabric": _first_match(lowered, FABRIC_RULES, DEFAULTS["fabric"]),
        "occasion": _guess_occasion(style, lowered),
        "gender": _first_match(lowered, GENDER_RULES, DEFAULTS["gender"]),
    }
    overall = mean_confidence(attributes)
    attributes["name"] = AttributeGuess(value=_stem(filename), confidence=NAME_CONFIDENCE)
    logger.debug(
        "Heuristic analysis ratio=%.2f category=%s overall=%s",
        aspect_ratio,
        attributes["category"].value,
        overall,
    )
    return AttributeAnalysis(attributes=attributes, overall_confidence=overall, source="heuristic")


def fallback_analysis(filename: str) -> AttributeAnalysis:
    """Fixed attribute set used when the image cannot be decoded."""

    attributes = {
        name: AttributeGuess(value=value, confidence=confidence)
        for name, (value, confidence) in FALLBACK_ATTRIBUTES.items()
    }
    attributes["name"] = AttributeGuess(value=_stem(filename), confidence=NAME_CONFIDENCE)
    return AttributeAnalysis(
        attributes=attributes, overall_confidence=FALLBACK_OVERALL_CONFIDENCE, source="fallback"
    )


def analyze_image(image_bytes: Optional[bytes], filename: str) -> AttributeAnalysis:
    """Decode ``image_bytes`` for its dimensions and run the heuristic analysis."""

    if not image_bytes:
        return fallback_analysis(filename)
    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            width, height = image.size
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        logger.warning("Could not decode image '%s': %s", filename, exc)
        return fallback_analysis(filename)
    return analyze_dimensions(width, height, filename)


__all__ = ["analyze_dimensions", "analyze_image", "fallback_analysis"]
