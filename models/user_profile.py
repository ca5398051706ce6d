"""User profile record, including the remembered segment preference."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Optional

from models.taxonomy import Segment, validate_segment


@dataclass
class UserProfile:
    user_id: str
    email: str = ""
    full_name: str = ""
    preferred_style: str = ""
    favorite_colors: str = ""
    avatar_url: str = ""
    segment_preference: str = Segment.ALL.value
    sizes: Dict[str, str] = field(default_factory=dict)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def __post_init__(self) -> None:
        self.user_id = str(self.user_id).strip()
        if not self.user_id:
            raise ValueError("UserProfile requires a user_id")
        self.segment_preference = validate_segment(self.segment_preference).value
        self.sizes = {str(key): str(value) for key, value in (self.sizes or {}).items()}

    @property
    def segment(self) -> Segment:
        return validate_segment(self.segment_preference)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


PROFILE_FIELDS = tuple(f.name for f in fields(UserProfile))
EDITABLE_PROFILE_FIELDS = tuple(name for name in PROFILE_FIELDS if name not in {"user_id", "created_at", "updated_at"})


__all__ = ["EDITABLE_PROFILE_FIELDS", "PROFILE_FIELDS", "UserProfile"]
