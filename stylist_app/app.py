"""Stylist service bootstrap: wires stores, sessions and the outfit engine."""

from __future__ import annotations

import logging
import random
from datetime import date as dt_date
from typing import Any, Dict, List, Mapping, Optional
from uuid import uuid4

from logic.inventory import filter_by_segment, wardrobe_stats
from logic.outfit_builder import GenerationResult, ProgressCallback, generate_outfit
from memory.generation_sessions import (
    GenerationSession,
    GenerationSessionManager,
    UnknownSessionError,
    build_session_store,
)
from models.attributes import AttributeAnalysis
from models.occasion import OccasionContext, available_occasions, resolve_occasion
from models.outfit import SavedOutfit
from models.taxonomy import FilterMode, Segment, validate_segment
from models.user_profile import UserProfile
from models.wardrobe_item import ClothingItem, from_raw_metadata
from stylist_app.config import AppConfig
from stylist_app.logging_config import configure_logging, get_logger, log_event, operation_context
from tools.occasion_store import SQLiteOccasionStore
from tools.outfit_store import SQLiteOutfitStore
from tools.profile_store import SQLiteProfileStore
from tools.vision_client import GeminiVisionClient, analyze_clothing_item
from tools.wardrobe_store import SQLiteWardrobeStore

LOGGER = get_logger(__name__)


class StylistApp:
    """Service facade used by the HTTP API and the command line demo."""

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        wardrobe_store: SQLiteWardrobeStore | None = None,
        outfit_store: SQLiteOutfitStore | None = None,
        occasion_store: SQLiteOccasionStore | None = None,
        profile_store: SQLiteProfileStore | None = None,
        session_manager: GenerationSessionManager | None = None,
        vision_client: GeminiVisionClient | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or AppConfig.from_env()
        configure_logging()

        db_path = self.config.wardrobe_db_path
        self.wardrobe_store = wardrobe_store or SQLiteWardrobeStore(db_path)
        self.outfit_store = outfit_store or SQLiteOutfitStore(db_path)
        self.occasion_store = occasion_store or SQLiteOccasionStore(db_path)
        self.profile_store = profile_store or SQLiteProfileStore(db_path)
        self.session_manager = session_manager or GenerationSessionManager(
            build_session_store(self.config.session_store_backend, self.config.session_store_path)
        )
        if vision_client is None and self.config.gemini_api_key:
            vision_client = GeminiVisionClient(
                api_key=self.config.gemini_api_key,
                model=self.config.vision_model,
                timeout_seconds=self.config.vision_timeout_seconds,
            )
        self.vision_client = vision_client
        self.rng = rng or random.Random()

    # Wardrobe items

    def analyze_item(self, image_url: str, filename: str | None = None, use_vision: bool = True) -> AttributeAnalysis:
        with operation_context("app:analyze_item", LOGGER):
            analysis = analyze_clothing_item(
                image_url,
                filename=filename,
                vision_client=self.vision_client if use_vision else None,
            )
            log_event(
                LOGGER,
                logging.INFO,
                "item_analyzed",
                source=analysis.source,
                category=analysis.value_of("category"),
                overall_confidence=analysis.overall_confidence,
            )
            return analysis

    def add_item(
        self,
        user_id: str,
        category: str,
        image_url: str = "",
        item_id: str | None = None,
        **attributes: Any,
    ) -> ClothingItem:
        item = from_raw_metadata(
            {
                **attributes,
                "item_id": item_id or uuid4().hex,
                "user_id": user_id,
                "category": category,
                "image_url": image_url,
            }
        )
        with operation_context("app:add_item", LOGGER):
            stored = self.wardrobe_store.create_item(item)
            log_event(LOGGER, logging.INFO, "item_added", item_id=stored.item_id, category=stored.category)
            return stored

    def add_item_from_image(
        self, user_id: str, image_url: str, filename: str | None = None, use_vision: bool = True
    ) -> tuple[ClothingItem, AttributeAnalysis]:
        """Analyze an uploaded image and store the detected attributes as a new item."""

        analysis = self.analyze_item(image_url, filename=filename, use_vision=use_vision)
        fields = analysis.as_item_fields()
        category = fields.pop("category", None) or "clothing"
        return self.add_item(user_id, category, image_url=image_url, **fields), analysis

    def update_item(self, user_id: str, item_id: str, fields: Mapping[str, Any]) -> Optional[ClothingItem]:
        changes = {key: value for key, value in fields.items() if value is not None}
        with operation_context("app:update_item", LOGGER):
            return self.wardrobe_store.update_item(user_id, item_id, changes)

    def delete_item(self, user_id: str, item_id: str) -> bool:
        with operation_context("app:delete_item", LOGGER):
            return self.wardrobe_store.delete_item(user_id, item_id)

    def list_items(self, user_id: str, segment: Segment | str = Segment.ALL) -> List[ClothingItem]:
        """Browse the wardrobe with the strict segment filter."""

        items = self.wardrobe_store.list_items_for_user(user_id)
        return filter_by_segment(items, segment, FilterMode.STRICT)

    def wardrobe_stats(
        self, user_id: str, segment: Segment | str = Segment.ALL, mode: FilterMode | str = FilterMode.STRICT
    ) -> Dict[str, int]:
        return wardrobe_stats(self.wardrobe_store.list_items_for_user(user_id), segment, mode)

    # Occasions

    def list_occasions(self, user_id: str, on_date: dt_date | None = None) -> List[OccasionContext]:
        """The day's events followed by the built-in occasions."""

        on_date = on_date or dt_date.today()
        return available_occasions(self.occasion_store.list_events_for_date(user_id, on_date), on_date)

    def create_occasion(
        self,
        user_id: str,
        title: str,
        on_date: dt_date,
        occasion: str = "casual",
        description: str = "",
        dress_code: str = "",
    ) -> OccasionContext:
        return self.occasion_store.create_event(
            user_id, title, on_date, occasion=occasion, description=description, dress_code=dress_code
        )

    # Profiles

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        return self.profile_store.get_profile(user_id)

    def upsert_profile(self, user_id: str, **fields: Any) -> UserProfile:
        with operation_context("app:upsert_profile", LOGGER):
            return self.profile_store.upsert_profile(UserProfile(user_id=user_id, **fields))

    def update_profile(self, user_id: str, fields: Mapping[str, Any]) -> Optional[UserProfile]:
        with operation_context("app:update_profile", LOGGER):
            return self.profile_store.update_profile(user_id, fields)

    def preferred_segment(self, user_id: str) -> Segment:
        profile = self.profile_store.get_profile(user_id)
        return profile.segment if profile else Segment.ALL

    # Sessions

    def start_session(self, user_id: str, segment: Segment | str | None = None) -> GenerationSession:
        """Start a session in ``segment``, or in the user's remembered segment when omitted."""

        if segment is None:
            segment = self.preferred_segment(user_id)
        session = self.session_manager.start_session(user_id, segment)
        log_event(LOGGER, logging.INFO, "session_started", session_id=session.session_id, segment=session.segment)
        return session

    def change_segment(self, session_id: str, segment: Segment | str) -> GenerationSession:
        session = self.session_manager.set_segment(session_id, validate_segment(segment))
        self.profile_store.set_segment_preference(session.user_id, session.segment)
        log_event(LOGGER, logging.INFO, "segment_changed", session_id=session_id, segment=session.segment)
        return session

    def refresh_session(self, session_id: str) -> GenerationSession:
        return self.session_manager.refresh(session_id)

    # Outfits

    def generate_outfit(
        self,
        user_id: str,
        session_id: str,
        occasion_id: str | None = None,
        on_date: dt_date | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> GenerationResult:
        """Generate an outfit for the session and record it in the session history."""

        with operation_context("app:generate_outfit", LOGGER, session_id=session_id) as correlation_id:
            session = self.session_manager.get_session(session_id)
            if session.user_id != user_id:
                raise UnknownSessionError(session_id)

            on_date = on_date or dt_date.today()
            occasion = resolve_occasion(
                occasion_id, self.occasion_store.list_events_for_date(user_id, on_date), on_date
            )
            context = self.session_manager.get_context(session_id, occasion)
            items = self.wardrobe_store.list_items_for_user(user_id)
            result = generate_outfit(
                items,
                context,
                rng=self.rng,
                on_progress=on_progress,
                max_history_resets=self.config.max_history_resets,
            )

            self.session_manager.save_history(session_id, context.history)
            if result.ok and result.outfit is not None:
                self.session_manager.record_outfit(session_id, result.outfit.signature)
            result.diagnostics["history_size"] = len(self.session_manager.get_session(session_id).history)

            log_event(
                LOGGER,
                logging.INFO,
                "outfit_generated",
                status=result.status,
                segment=context.segment.value,
                occasion=occasion.occasion_id,
                match_score=result.outfit.match_score if result.outfit else None,
                correlation_id=correlation_id,
            )
            return result

    def save_outfit(self, user_id: str, outfit: Mapping[str, Any]) -> SavedOutfit:
        with operation_context("app:save_outfit", LOGGER):
            return self.outfit_store.save_outfit(user_id, outfit)

    def list_saved(self, user_id: str) -> List[SavedOutfit]:
        return self.outfit_store.list_saved(user_id)

    def delete_saved(self, user_id: str, outfit_id: str) -> bool:
        return self.outfit_store.delete_saved(user_id, outfit_id)


__all__ = ["StylistApp"]
