"""Attribute analysis schemas shared by the heuristic analyzer and the vision client."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

ANALYZED_ATTRIBUTES = (
    "category",
    "color",
    "style",
    "pattern",
    "season",
    "fabric",
    "occasion",
    "gender",
    "brand",
)

VALID_VISION_CATEGORIES = {
    "shirt",
    "t-shirt",
    "pants",
    "jeans",
    "dress",
    "skirt",
    "shoes",
    "sneakers",
    "boots",
    "jacket",
    "coat",
    "sweater",
    "hoodie",
    "shorts",
    "blouse",
    "accessories",
    "bag",
    "jewelry",
    "watch",
    "glasses",
    "hat",
}


class AttributeGuess(BaseModel):
    """A single attribute value with a 0-100 confidence."""

    value: Optional[str] = None
    confidence: int = Field(default=50, ge=0, le=100)

    @field_validator("confidence", mode="before")
    @classmethod
    def _round_confidence(cls, value: Any) -> int:
        if value is None:
            return 0
        return max(0, min(100, int(round(float(value)))))


class AttributeAnalysis(BaseModel):
    """Analyzer output: ``{success, attributes: {attr: {value, confidence}}, overall_confidence}``."""

    success: bool = True
    attributes: Dict[str, AttributeGuess]
    overall_confidence: int = Field(default=0, ge=0, le=100)
    source: str = "heuristic"
    outfit_suggestions: List[str] = Field(default_factory=list)

    @field_validator("attributes", mode="before")
    @classmethod
    def _coerce_plain_values(cls, value: Any) -> Any:
        """Accept ``{"color": "red"}`` as well as ``{"color": {"value": "red", ...}}``."""

        if not isinstance(value, dict):
            return value
        coerced: Dict[str, Any] = {}
        for key, raw in value.items():
            if isinstance(raw, dict) or isinstance(raw, AttributeGuess):
                coerced[key] = raw
            else:
                coerced[key] = {"value": raw, "confidence": 50}
        return coerced

    def value_of(self, name: str) -> Optional[str]:
        guess = self.attributes.get(name)
        return guess.value if guess else None

    def as_item_fields(self) -> Dict[str, Optional[str]]:
        """Flatten the analysis into :class:`ClothingItem` keyword arguments."""

        fields = {name: self.value_of(name) for name in ANALYZED_ATTRIBUTES}
        if self.value_of("name"):
            fields["name"] = self.value_of("name")
        return fields


def mean_confidence(attributes: Dict[str, AttributeGuess]) -> int:
    """Rounded mean confidence across the analyzed (non-name) attributes."""

    scores = [attributes[name].confidence for name in ANALYZED_ATTRIBUTES if name in attributes]
    if not scores:
        return 0
    return int(round(sum(scores) / len(scores)))


__all__ = [
    "ANALYZED_ATTRIBUTES",
    "VALID_VISION_CATEGORIES",
    "AttributeGuess",
    "AttributeAnalysis",
    "mean_confidence",
]
