"""Randomised outfit candidate search with transparent diagnostics.

The search samples top/bottom/shoes triples from a categorized inventory,
discards combinations already produced this session or containing garments the
segment avoids, and keeps the best scoring survivor. The random source is
injectable so callers can make the search deterministic.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Set

from logic.inventory import CategorizedInventory, categorize, filter_by_segment
from logic.outfit_narrative import assemble_outfit, build_analysis_summary
from logic.outfit_scoring import (
    CompatibilityScore,
    category_preference_bonus,
    gender_match_bonus,
    is_avoided,
    score_color_harmony,
    score_style_compatibility,
)
from models.occasion import OccasionContext
from models.outfit import GeneratedOutfit, outfit_signature
from models.segment_profiles import SegmentProfile, get_segment_profile
from models.taxonomy import FilterMode, Segment, validate_segment
from models.wardrobe_item import ClothingItem

logger = logging.getLogger(__name__)

MAX_TRIALS = 100
MAX_ACCESSORIES = 2
JITTER_RANGE = 3.0
DEFAULT_MAX_HISTORY_RESETS = 1

STATUS_OK = "ok"
STATUS_NO_MATCHING_ITEMS = "no_matching_items"
STATUS_INSUFFICIENT_ITEMS = "insufficient_items"
STATUS_NO_NEW_COMBINATIONS = "no_new_combinations"

ProgressCallback = Callable[[int], None]


class GenerationHistory:
    """Signatures of outfits already produced in a session.

    The caller owns the history; the search only reads it and clears it when
    every combination has been exhausted.
    """

    def __init__(self, signatures: Iterable[str] | None = None) -> None:
        self._signatures: Set[str] = set(signatures or [])

    def __contains__(self, signature: object) -> bool:
        return signature in self._signatures

    def __len__(self) -> int:
        return len(self._signatures)

    def add(self, signature: str) -> None:
        self._signatures.add(signature)

    def clear(self) -> None:
        self._signatures.clear()

    def signatures(self) -> List[str]:
        return sorted(self._signatures)


@dataclass
class GenerationContext:
    """Everything a generation call needs besides the inventory."""

    segment: Segment = Segment.ALL
    occasion: Optional[OccasionContext] = None
    history: GenerationHistory = field(default_factory=GenerationHistory)

    def __post_init__(self) -> None:
        self.segment = validate_segment(self.segment)


@dataclass(frozen=True)
class ScoredCandidate:
    top: ClothingItem
    bottom: ClothingItem
    shoes: Optional[ClothingItem]
    score: float
    color: CompatibilityScore
    style: CompatibilityScore

    @property
    def signature(self) -> str:
        return outfit_signature(self.top, self.bottom, self.shoes)


@dataclass(frozen=True)
class SearchResult:
    candidate: Optional[ScoredCandidate]
    diagnostics: Dict[str, object]


@dataclass(frozen=True)
class GenerationResult:
    status: str
    outfit: Optional[GeneratedOutfit]
    analysis: str
    diagnostics: Dict[str, object]

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK


def trial_count(inventory: CategorizedInventory) -> int:
    return min(MAX_TRIALS, len(inventory.tops) * len(inventory.bottoms) * max(len(inventory.shoes), 1))


def _score_candidate(
    top: ClothingItem,
    bottom: ClothingItem,
    shoes: Optional[ClothingItem],
    context: GenerationContext,
    profile: SegmentProfile,
    rng: random.Random,
) -> ScoredCandidate:
    color = score_color_harmony(top, bottom, shoes, context.segment)
    style = score_style_compatibility(top, bottom, shoes, context.segment, context.occasion)
    score = (
        color.score
        + style.score
        + category_preference_bonus(top, bottom, shoes, profile)
        + gender_match_bonus(top, bottom, shoes, context.segment)
        + rng.random() * JITTER_RANGE
    )
    return ScoredCandidate(top=top, bottom=bottom, shoes=shoes, score=score, color=color, style=style)


def _run_trials(
    inventory: CategorizedInventory,
    context: GenerationContext,
    rng: random.Random,
    on_progress: Optional[ProgressCallback],
) -> SearchResult:
    profile = get_segment_profile(context.segment)
    trials = trial_count(inventory)
    diagnostics: Dict[str, object] = {
        "trials": trials,
        "scored": 0,
        "skipped_history": 0,
        "skipped_avoid": 0,
        "best_score": None,
    }
    best: Optional[ScoredCandidate] = None
    for index in range(trials):
        top = rng.choice(inventory.tops)
        bottom = rng.choice(inventory.bottoms)
        shoes = rng.choice(inventory.shoes) if inventory.shoes else None

        if outfit_signature(top, bottom, shoes) in context.history:
            diagnostics["skipped_history"] += 1
        elif is_avoided(top, profile) or is_avoided(bottom, profile):
            diagnostics["skipped_avoid"] += 1
        else:
            candidate = _score_candidate(top, bottom, shoes, context, profile, rng)
            diagnostics["scored"] += 1
            if best is None or candidate.score > best.score:
                best = candidate

        if on_progress is not None:
            on_progress(round((index + 1) / trials * 100))

    if best is not None:
        diagnostics["best_score"] = round(best.score, 2)
        diagnostics["signature"] = best.signature
    return SearchResult(candidate=best, diagnostics=diagnostics)


def search_outfit(
    inventory: CategorizedInventory,
    context: GenerationContext,
    rng: random.Random | None = None,
    on_progress: Optional[ProgressCallback] = None,
    max_history_resets: int = DEFAULT_MAX_HISTORY_RESETS,
) -> SearchResult:
    """Find the best scoring candidate not already in the session history.

    When no trial survives and the history is non-empty, the history is cleared
    and the search is repeated, at most ``max_history_resets`` times.
    """

    if not inventory.can_build_outfit:
        raise ValueError("search_outfit requires at least one top and one bottom")

    rng = rng or random.Random()
    resets = 0
    while True:
        result = _run_trials(inventory, context, rng, on_progress)
        if result.candidate is not None or len(context.history) == 0 or resets >= max_history_resets:
            result.diagnostics["history_resets"] = resets
            return result
        logger.info("No new combinations found, clearing %s history entries", len(context.history))
        context.history.clear()
        resets += 1


def select_accessories(
    accessories: Iterable[ClothingItem], segment: Segment | str, limit: int = MAX_ACCESSORIES
) -> List[ClothingItem]:
    """Attach up to ``limit`` accessories in categorization order, skipping avoided categories."""

    profile = get_segment_profile(segment)
    return [item for item in accessories if not is_avoided(item, profile)][:limit]


def generate_outfit(
    items: Iterable[ClothingItem],
    context: GenerationContext,
    rng: random.Random | None = None,
    on_progress: Optional[ProgressCallback] = None,
    max_history_resets: int = DEFAULT_MAX_HISTORY_RESETS,
) -> GenerationResult:
    """Filter, categorize, search and assemble an outfit for the given context.

    The winner's signature is not recorded; callers add it to their history.
    """

    filtered = filter_by_segment(items, context.segment, FilterMode.PERMISSIVE)
    inventory = categorize(filtered)
    diagnostics: Dict[str, object] = {
        "segment": context.segment.value,
        "filtered_count": len(filtered),
        **inventory.counts(),
    }
    logger.info("Generating %s outfit from %s items", context.segment.value, len(filtered))

    if not filtered:
        return GenerationResult(status=STATUS_NO_MATCHING_ITEMS, outfit=None, analysis="", diagnostics=diagnostics)
    if not inventory.can_build_outfit:
        logger.info("Not enough items to generate outfit: %s", inventory.counts())
        return GenerationResult(status=STATUS_INSUFFICIENT_ITEMS, outfit=None, analysis="", diagnostics=diagnostics)

    search = search_outfit(inventory, context, rng=rng, on_progress=on_progress, max_history_resets=max_history_resets)
    diagnostics.update(search.diagnostics)
    winner = search.candidate
    if winner is None:
        return GenerationResult(
            status=STATUS_NO_NEW_COMBINATIONS, outfit=None, analysis="", diagnostics=diagnostics
        )

    accessories = select_accessories(inventory.accessories, context.segment)
    outfit = assemble_outfit(
        winner.top,
        winner.bottom,
        winner.shoes,
        accessories,
        context.segment,
        winner.color,
        winner.style,
        context.occasion,
    )
    analysis = build_analysis_summary(context.segment, outfit.match_score, winner.color, winner.style, context.occasion)
    logger.info("Selected outfit %s with match %s%%", outfit.signature, outfit.match_score)
    return GenerationResult(status=STATUS_OK, outfit=outfit, analysis=analysis, diagnostics=diagnostics)


__all__ = [
    "MAX_TRIALS",
    "STATUS_OK",
    "STATUS_NO_MATCHING_ITEMS",
    "STATUS_INSUFFICIENT_ITEMS",
    "STATUS_NO_NEW_COMBINATIONS",
    "GenerationHistory",
    "GenerationContext",
    "ScoredCandidate",
    "SearchResult",
    "GenerationResult",
    "trial_count",
    "search_outfit",
    "select_accessories",
    "generate_outfit",
]
