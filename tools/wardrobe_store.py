"""Wardrobe storage abstractions and SQLite implementation."""
from __future__ import annotations

import logging
import sqlite3
from dataclasses import asdict
from pathlib import Path
from typing import Dict, List, Optional

from models.wardrobe_item import DESCRIPTIVE_FIELDS, ClothingItem, from_raw_metadata, utc_timestamp
from tools.observability import instrument_tool

logger = logging.getLogger(__name__)

_COLUMNS = ("user_id", "item_id", "category", "image_url", *DESCRIPTIVE_FIELDS, "created_at", "updated_at")
_IMMUTABLE_FIELDS = {"user_id", "item_id", "created_at", "updated_at"}


class WardrobeStore:
    """Persistence interface for clothing items."""

    def create_item(self, item: ClothingItem) -> ClothingItem:
        raise NotImplementedError

    def get_item(self, user_id: str, item_id: str) -> Optional[ClothingItem]:
        raise NotImplementedError

    def list_items_for_user(self, user_id: str) -> List[ClothingItem]:
        raise NotImplementedError

    def update_item(self, user_id: str, item_id: str, updated_fields: Dict[str, object]) -> Optional[ClothingItem]:
        raise NotImplementedError

    def delete_item(self, user_id: str, item_id: str) -> bool:
        raise NotImplementedError


class SQLiteWardrobeStore(WardrobeStore):
    """Local SQLite-backed store for clothing items."""

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
                CREATE TABLE IF NOT EXISTS clothing_items (
                    user_id TEXT NOT NULL,
                    item_id TEXT NOT NULL,
                    category TEXT,
                    image_url TEXT,
                    color TEXT,
                    style TEXT,
                    pattern TEXT,
                    season TEXT,
                    brand TEXT,
                    fabric TEXT,
                    occasion TEXT,
                    gender TEXT,
                    name TEXT,
                    created_at TEXT,
                    updated_at TEXT,
                    PRIMARY KEY (user_id, item_id)
                );
                """
            )

    def _write(self, item: ClothingItem) -> ClothingItem:
        record = asdict(item)
        placeholders = ", ".join("?" for _ in _COLUMNS)
        with self._connect() as conn:
            conn.execute(
                f"INSERT OR REPLACE INTO clothing_items ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
                tuple(record[column] for column in _COLUMNS),
            )
        return item

    @instrument_tool("wardrobe_store.create_item")
    def create_item(self, item: ClothingItem) -> ClothingItem:
        now = utc_timestamp()
        item.created_at = item.created_at or now
        item.updated_at = now
        return self._write(item)

    @staticmethod
    def _row_to_item(row: sqlite3.Row) -> ClothingItem:
        return from_raw_metadata(dict(row))

    def get_item(self, user_id: str, item_id: str) -> Optional[ClothingItem]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM clothing_items WHERE user_id = ? AND item_id = ?",
                (user_id, item_id),
            ).fetchone()
        return self._row_to_item(row) if row else None

    @instrument_tool("wardrobe_store.list_items")
    def list_items_for_user(self, user_id: str) -> List[ClothingItem]:
        """Return the user's items newest first, skipping malformed rows."""

        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM clothing_items WHERE user_id = ? ORDER BY created_at DESC, rowid DESC",
                (user_id,),
            ).fetchall()
        items: List[ClothingItem] = []
        for row in rows:
            try:
                items.append(self._row_to_item(row))
            except ValueError as exc:
                logger.warning("Skipping wardrobe entry due to validation error: %s", exc)
        return items

    @instrument_tool("wardrobe_store.update_item")
    def update_item(self, user_id: str, item_id: str, updated_fields: Dict[str, object]) -> Optional[ClothingItem]:
        current = self.get_item(user_id, item_id)
        if not current:
            return None

        record = asdict(current)
        for key, value in updated_fields.items():
            if key in _IMMUTABLE_FIELDS or key not in record:
                continue
            record[key] = value
        record["updated_at"] = utc_timestamp()
        return self._write(from_raw_metadata(record))

    @instrument_tool("wardrobe_store.delete_item")
    def delete_item(self, user_id: str, item_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM clothing_items WHERE user_id = ? AND item_id = ?",
                (user_id, item_id),
            )
            return cursor.rowcount > 0


__all__ = ["WardrobeStore", "SQLiteWardrobeStore"]
