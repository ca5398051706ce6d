"""Pydantic schemas for validating API and service payloads."""

from __future__ import annotations

from datetime import date as dt_date
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

from models.taxonomy import Segment


class ItemAttributes(BaseModel):
    """Descriptive attributes shared by create and update payloads."""

    name: Optional[str] = None
    color: Optional[str] = None
    style: Optional[str] = None
    pattern: Optional[str] = None
    season: Optional[str] = None
    brand: Optional[str] = None
    fabric: Optional[str] = None
    occasion: Optional[str] = None
    gender: Optional[str] = None


class ItemCreateRequest(ItemAttributes):
    user_id: str = Field(min_length=1)
    category: str = Field(min_length=1)
    image_url: str = ""
    item_id: Optional[str] = None


class ItemUpdateRequest(ItemAttributes):
    user_id: str = Field(min_length=1)
    category: Optional[str] = Field(default=None, min_length=1)
    image_url: Optional[str] = None


class AnalyzeItemRequest(BaseModel):
    """Input contract for attribute analysis of an uploaded image."""

    image_url: str = Field(min_length=1)
    filename: Optional[str] = None
    use_vision: bool = True


class UploadItemRequest(AnalyzeItemRequest):
    """Analyze an image and store the result as a new wardrobe item."""

    user_id: str = Field(min_length=1)


class SessionRequest(BaseModel):
    """Omitting ``segment`` starts the session in the user's remembered segment."""

    user_id: str = Field(min_length=1)
    segment: Optional[str] = None


class SegmentChangeRequest(BaseModel):
    """Segment names are parsed by the route so unknown values map to HTTP 400."""

    segment: str


class GenerateOutfitRequest(BaseModel):
    """Shared envelope for outfit generation."""

    user_id: str = Field(min_length=1)
    session_id: str = Field(min_length=1)
    occasion_id: Optional[str] = None
    day: Optional[dt_date] = None


class SaveOutfitRequest(BaseModel):
    user_id: str = Field(min_length=1)
    outfit: Dict[str, Any]


class ProfileRequest(BaseModel):
    """Full profile payload used to create or replace a profile."""

    email: str = ""
    full_name: str = ""
    preferred_style: str = ""
    favorite_colors: str = ""
    avatar_url: str = ""
    segment_preference: str = Segment.ALL.value
    sizes: Dict[str, str] = Field(default_factory=dict)


class ProfileUpdateRequest(BaseModel):
    email: Optional[str] = None
    full_name: Optional[str] = None
    preferred_style: Optional[str] = None
    favorite_colors: Optional[str] = None
    avatar_url: Optional[str] = None
    segment_preference: Optional[str] = None
    sizes: Optional[Dict[str, str]] = None


class OccasionCreateRequest(BaseModel):
    user_id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    date: dt_date
    occasion: str = "casual"
    description: str = ""
    dress_code: str = ""


class GenerateOutfitResponse(BaseModel):
    """Minimal structure returned from generation."""

    status: Literal["ok", "no_matching_items", "insufficient_items", "no_new_combinations"]
    outfit: Optional[Dict[str, Any]] = None
    analysis: str = ""
    history_size: int = 0
    diagnostics: Dict[str, Any] = {}


__all__ = [
    "ItemAttributes",
    "ItemCreateRequest",
    "ItemUpdateRequest",
    "AnalyzeItemRequest",
    "UploadItemRequest",
    "SessionRequest",
    "SegmentChangeRequest",
    "GenerateOutfitRequest",
    "SaveOutfitRequest",
    "ProfileRequest",
    "ProfileUpdateRequest",
    "OccasionCreateRequest",
    "GenerateOutfitResponse",
]
