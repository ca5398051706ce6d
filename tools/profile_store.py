"""SQLite store for user profiles and their remembered segment preference."""
from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Any, Mapping, Optional

from models.taxonomy import Segment
from models.user_profile import EDITABLE_PROFILE_FIELDS, PROFILE_FIELDS, UserProfile
from models.wardrobe_item import utc_timestamp
from tools.observability import instrument_tool


class SQLiteProfileStore:
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
                CREATE TABLE IF NOT EXISTS profiles (
                    user_id TEXT PRIMARY KEY,
                    email TEXT,
                    full_name TEXT,
                    preferred_style TEXT,
                    favorite_colors TEXT,
                    avatar_url TEXT,
                    segment_preference TEXT,
                    sizes TEXT,
                    created_at TEXT,
                    updated_at TEXT
                );
                """
            )

    @staticmethod
    def _row_to_profile(row: sqlite3.Row) -> UserProfile:
        record = dict(row)
        record["sizes"] = json.loads(record["sizes"] or "{}")
        for name in EDITABLE_PROFILE_FIELDS:
            if record.get(name) is None and name != "sizes":
                record.pop(name)
        return UserProfile(**record)

    def _write(self, profile: UserProfile) -> UserProfile:
        record = profile.to_dict()
        record["sizes"] = json.dumps(record["sizes"], sort_keys=True)
        placeholders = ", ".join("?" for _ in PROFILE_FIELDS)
        with self._connect() as conn:
            conn.execute(
                f"INSERT OR REPLACE INTO profiles ({', '.join(PROFILE_FIELDS)}) VALUES ({placeholders})",
                tuple(record[name] for name in PROFILE_FIELDS),
            )
        return profile

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM profiles WHERE user_id = ?", (user_id,)).fetchone()
        return self._row_to_profile(row) if row else None

    @instrument_tool("profile_store.upsert_profile")
    def upsert_profile(self, profile: UserProfile) -> UserProfile:
        """Create or replace a profile, keeping the original creation time."""

        existing = self.get_profile(profile.user_id)
        now = utc_timestamp()
        profile.created_at = existing.created_at if existing else (profile.created_at or now)
        profile.updated_at = now
        return self._write(profile)

    @instrument_tool("profile_store.update_profile")
    def update_profile(self, user_id: str, updated_fields: Mapping[str, Any]) -> Optional[UserProfile]:
        current = self.get_profile(user_id)
        if current is None:
            return None

        record = current.to_dict()
        for key, value in updated_fields.items():
            if key in EDITABLE_PROFILE_FIELDS and value is not None:
                record[key] = value
        record["updated_at"] = utc_timestamp()
        return self._write(UserProfile(**record))

    @instrument_tool("profile_store.set_segment_preference")
    def set_segment_preference(self, user_id: str, segment: Segment | str) -> UserProfile:
        """Remember ``segment`` for the user, creating a bare profile when needed."""

        profile = self.get_profile(user_id) or UserProfile(user_id=user_id)
        profile.segment_preference = segment.value if isinstance(segment, Segment) else segment
        return self.upsert_profile(UserProfile(**profile.to_dict()))


__all__ = ["SQLiteProfileStore"]
