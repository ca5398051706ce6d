"""SQLite persistence for outfits the user saved."""
from __future__ import annotations

import json
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping

from models.outfit import GeneratedOutfit, SavedOutfit
from models.wardrobe_item import utc_timestamp
from tools.observability import instrument_tool

_ITEM_SLOTS = ("top", "bottom", "shoes", "accessories")


def outfit_name(segment: str, saved_on: datetime | None = None) -> str:
    stamp = (saved_on or datetime.now(timezone.utc)).date().isoformat()
    return f"{segment} Outfit - {stamp}"


def style_label(style_notes: str, words: int = 3) -> str:
    """Short style label taken from the opening words of the style notes."""

    return " ".join(style_notes.split()[:words])


class SQLiteOutfitStore:
    """Stores generated outfits verbatim alongside a few display fields."""

    def __init__(self, database_path: str | Path = "data/wardrobe.db") -> None:
        self.database_path = Path(database_path)
        if self.database_path.parent and not self.database_path.parent.exists():
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.database_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_tables(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS saved_outfits (
                    outfit_id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    name TEXT,
                    description TEXT,
                    items TEXT,
                    occasion TEXT,
                    style TEXT,
                    ai_score INTEGER,
                    gender TEXT,
                    created_at TEXT
                );
                """
            )

    @instrument_tool("outfit_store.save_outfit")
    def save_outfit(self, user_id: str, outfit: GeneratedOutfit | Mapping[str, Any]) -> SavedOutfit:
        payload = outfit.to_dict() if isinstance(outfit, GeneratedOutfit) else dict(outfit)
        if not payload.get("top") or not payload.get("bottom"):
            raise ValueError("A saved outfit needs at least a top and a bottom")
        style_notes = str(payload.get("style_notes") or "")
        segment = str(payload.get("segment") or "All")
        saved = SavedOutfit(
            outfit_id=uuid.uuid4().hex,
            user_id=user_id,
            name=outfit_name(segment),
            description=style_notes,
            items={slot: payload.get(slot) for slot in _ITEM_SLOTS},
            occasion=str(payload.get("occasion") or ""),
            style=style_label(style_notes),
            ai_score=int(payload.get("match_score") or 0),
            gender=segment,
            created_at=utc_timestamp(),
        )
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO saved_outfits (
                    outfit_id, user_id, name, description, items, occasion, style, ai_score, gender, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    saved.outfit_id,
                    saved.user_id,
                    saved.name,
                    saved.description,
                    json.dumps(saved.items),
                    saved.occasion,
                    saved.style,
                    saved.ai_score,
                    saved.gender,
                    saved.created_at,
                ),
            )
        return saved

    @staticmethod
    def _row_to_outfit(row: sqlite3.Row) -> SavedOutfit:
        record: Dict[str, Any] = dict(row)
        record["items"] = json.loads(record["items"]) if record["items"] else {}
        return SavedOutfit(**record)

    def list_saved(self, user_id: str) -> List[SavedOutfit]:
        """Saved outfits, newest first."""

        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM saved_outfits WHERE user_id = ? ORDER BY created_at DESC",
                (user_id,),
            ).fetchall()
        return [self._row_to_outfit(row) for row in rows]

    @instrument_tool("outfit_store.delete_saved")
    def delete_saved(self, user_id: str, outfit_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM saved_outfits WHERE user_id = ? AND outfit_id = ?",
                (user_id, outfit_id),
            )
            return cursor.rowcount > 0


__all__ = ["SQLiteOutfitStore", "outfit_name", "style_label"]
