"""SQLite store for user calendar events used as outfit occasions."""
from __future__ import annotations

import sqlite3
import uuid
from datetime import date
from pathlib import Path
from typing import List

from models.occasion import OccasionContext
from models.wardrobe_item import utc_timestamp
from tools.observability import instrument_tool


class SQLiteOccasionStore:
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
                CREATE TABLE IF NOT EXISTS events (
                    occasion_id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    title TEXT NOT NULL,
                    date TEXT NOT NULL,
                    occasion TEXT,
                    description TEXT,
                    dress_code TEXT,
                    created_at TEXT
                );
                """
            )

    @instrument_tool("occasion_store.create_event")
    def create_event(
        self,
        user_id: str,
        title: str,
        on_date: date,
        occasion: str = "casual",
        description: str = "",
        dress_code: str = "",
    ) -> OccasionContext:
        event = OccasionContext(
            occasion_id=uuid.uuid4().hex,
            title=title,
            occasion=occasion or "casual",
            date=on_date.isoformat(),
            description=description,
            dress_code=dress_code,
        )
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO events (occasion_id, user_id, title, date, occasion, description, dress_code, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    event.occasion_id,
                    user_id,
                    event.title,
                    event.date,
                    event.occasion,
                    event.description,
                    event.dress_code,
                    utc_timestamp(),
                ),
            )
        return event

    def list_events_for_date(self, user_id: str, on_date: date) -> List[OccasionContext]:
        """Events on ``on_date``, newest first."""

        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM events WHERE user_id = ? AND date = ? ORDER BY created_at DESC, rowid DESC",
                (user_id, on_date.isoformat()),
            ).fetchall()
        return [
            OccasionContext(
                occasion_id=row["occasion_id"],
                title=row["title"],
                occasion=row["occasion"] or "casual",
                date=row["date"],
                description=row["description"] or "",
                dress_code=row["dress_code"] or "",
            )
            for row in rows
        ]


__all__ = ["SQLiteOccasionStore"]
