"""Lightweight color harmony helpers built on named color groups."""
from __future__ import annotations

import logging

from models.taxonomy import COLOR_GROUPS, contains_any

logger = logging.getLogger(__name__)


def in_color_group(color: str | None, group: str) -> bool:
    """Return True when ``color`` contains any keyword of the named group."""

    return contains_any(color, COLOR_GROUPS[group])


def is_neutral(color: str | None) -> bool:
    return in_color_group(color, "neutrals")


def harmonious(color1: str | None, color2: str | None) -> bool:
    """Return True when both colors fall in at least one shared color group."""

    for name, keywords in COLOR_GROUPS.items():
        if contains_any(color1, keywords) and contains_any(color2, keywords):
            logger.debug("harmony check (%s, %s) -> %s", color1, color2, name)
            return True
    return False


__all__ = ["in_color_group", "is_neutral", "harmonious"]
