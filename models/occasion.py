"""Occasion contexts used to steer outfit generation."""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Iterable, List, Optional


@dataclass(frozen=True)
class OccasionContext:
    """An event or built-in occasion selected before generating an outfit."""

    occasion_id: str
    title: str
    occasion: str
    date: Optional[str] = None
    description: str = ""
    dress_code: str = ""

    @property
    def tag(self) -> str:
        """Lower-cased occasion tag, ``casual`` when unset."""

        return (self.occasion or "casual").strip().lower()


DEFAULT_OCCASIONS: List[OccasionContext] = [
    OccasionContext(
        occasion_id="casual",
        title="Casual Day",
        occasion="casual",
        description="Everyday casual outfit",
        dress_code="Casual",
    ),
    OccasionContext(
        occasion_id="work",
        title="Work/Office",
        occasion="formal",
        description="Professional work attire",
        dress_code="Business Casual",
    ),
    OccasionContext(
        occasion_id="date",
        title="Date Night",
        occasion="smart casual",
        description="Evening out or special occasion",
        dress_code="Smart Casual",
    ),
    OccasionContext(
        occasion_id="sports",
        title="Sports/Activity",
        occasion="sporty",
        description="Physical activity or workout",
        dress_code="Athletic",
    ),
]


def default_occasions(on_date: date | None = None) -> List[OccasionContext]:
    """Return the built-in occasions stamped with ``on_date`` (today by default)."""

    stamp = (on_date or date.today()).isoformat()
    return [replace(occasion, date=stamp) for occasion in DEFAULT_OCCASIONS]


def available_occasions(events: Iterable[OccasionContext], on_date: date | None = None) -> List[OccasionContext]:
    """List the day's events first, followed by the built-in defaults."""

    return list(events) + default_occasions(on_date)


def resolve_occasion(
    occasion_id: str | None, events: Iterable[OccasionContext], on_date: date | None = None
) -> OccasionContext:
    """Pick an occasion by id.

    Without an id the first available occasion is used, which is the newest
    event listed for the day when there is one; an unknown id resolves to the
    built-in casual occasion.
    """

    options = available_occasions(events, on_date)
    if not occasion_id:
        return options[0]
    for option in options:
        if option.occasion_id == occasion_id:
            return option
    return default_occasions(on_date)[0]


__all__ = [
    "OccasionContext",
    "DEFAULT_OCCASIONS",
    "default_occasions",
    "available_occasions",
    "resolve_occasion",
]
