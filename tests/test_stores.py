"""SQLite wardrobe, saved outfit and occasion stores."""

from __future__ import annotations

import sqlite3
import sys
from datetime import date
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models.user_profile import UserProfile
from models.wardrobe_item import ClothingItem
from tools.occasion_store import SQLiteOccasionStore
from tools.outfit_store import SQLiteOutfitStore, outfit_name, style_label
from tools.profile_store import SQLiteProfileStore
from tools.wardrobe_store import SQLiteWardrobeStore


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "nested" / "wardrobe.db"


def _item(item_id: str, category: str, **attributes: str) -> ClothingItem:
    return ClothingItem(
        item_id=item_id, user_id="user-1", category=category, image_url="https://example.com/x.png", **attributes
    )


def test_wardrobe_store_crud(db_path: Path) -> None:
    store = SQLiteWardrobeStore(db_path)
    created = store.create_item(_item("item-1", "shirt", color="Navy", gender="Male"))
    store.create_item(_item("item-2", "jeans"))

    assert created.created_at is not None
    fetched = store.get_item("user-1", "item-1")
    assert fetched is not None
    assert fetched.color == "Navy"
    assert [item.item_id for item in store.list_items_for_user("user-1")] == ["item-2", "item-1"]
    assert store.list_items_for_user("someone-else") == []

    updated = store.update_item("user-1", "item-1", {"color": "White", "item_id": "hijack", "unknown": 1})
    assert updated is not None
    assert updated.item_id == "item-1"
    assert updated.color == "White"
    assert updated.created_at == created.created_at
    assert store.update_item("user-1", "missing", {"color": "Red"}) is None

    assert store.delete_item("user-1", "item-2")
    assert not store.delete_item("user-1", "item-2")
    assert store.get_item("user-1", "item-2") is None


def test_wardrobe_store_skips_malformed_rows(db_path: Path) -> None:
    store = SQLiteWardrobeStore(db_path)
    store.create_item(_item("good", "shirt"))
    with sqlite3.connect(db_path) as conn:
        conn.execute(
            "INSERT INTO clothing_items (user_id, item_id, category, created_at) VALUES (?, ?, ?, ?)",
            ("user-1", "bad", "", "2024-01-01T00:00:00+00:00"),
        )

    items = store.list_items_for_user("user-1")

    assert [item.item_id for item in items] == ["good"]


def test_outfit_store_saves_and_lists(db_path: Path) -> None:
    store = SQLiteOutfitStore(db_path)
    outfit = {
        "top": {"item_id": "t1"},
        "bottom": {"item_id": "b1"},
        "shoes": None,
        "accessories": [],
        "occasion": "Casual Day",
        "style_notes": "Fresh Female styling: Pink blouse with Cream skirt",
        "match_score": 72,
        "segment": "Female",
    }

    saved = store.save_outfit("user-1", outfit)

    assert saved.name.startswith("Female Outfit - ")
    assert saved.style == "Fresh Female styling:"
    assert saved.ai_score == 72
    assert saved.items["top"] == {"item_id": "t1"}

    listed = store.list_saved("user-1")
    assert [entry.outfit_id for entry in listed] == [saved.outfit_id]
    assert listed[0].items == saved.items

    assert store.delete_saved("user-1", saved.outfit_id)
    assert store.list_saved("user-1") == []


def test_outfit_store_rejects_incomplete_outfits(db_path: Path) -> None:
    with pytest.raises(ValueError):
        SQLiteOutfitStore(db_path).save_outfit("user-1", {"top": {"item_id": "t1"}})


def test_outfit_naming_helpers() -> None:
    from datetime import datetime

    assert outfit_name("Kids", datetime(2024, 5, 17, 9, 30)) == "Kids Outfit - 2024-05-17"
    assert style_label("Elegant look") == "Elegant look"
    assert style_label("") == ""


def test_occasion_store_lists_events_by_date(db_path: Path) -> None:
    store = SQLiteOccasionStore(db_path)
    first = store.create_event("user-1", "Team offsite", date(2024, 6, 3), occasion="formal")
    store.create_event("user-1", "Birthday", date(2024, 6, 3), occasion="party")
    store.create_event("user-1", "Hike", date(2024, 6, 4))
    store.create_event("user-2", "Other", date(2024, 6, 3))

    events = store.list_events_for_date("user-1", date(2024, 6, 3))

    assert [event.title for event in events] == ["Birthday", "Team offsite"]
    assert events[1].occasion_id == first.occasion_id
    assert events[1].tag == "formal"
    assert events[0].tag == "party"


def test_profile_store_upsert_update_and_segment_preference(db_path: Path) -> None:
    store = SQLiteProfileStore(db_path)
    assert store.get_profile("user-1") is None

    created = store.upsert_profile(
        UserProfile(user_id="user-1", email="ana@example.com", full_name="Ana", sizes={"top": "M"})
    )
    assert created.segment_preference == "All"

    replaced = store.upsert_profile(UserProfile(user_id="user-1", email="ana@example.com", favorite_colors="navy"))
    assert replaced.created_at == created.created_at
    assert replaced.full_name == ""

    updated = store.update_profile("user-1", {"full_name": "Ana B", "sizes": {"shoes": "38"}, "user_id": "hijack"})
    assert updated is not None
    assert updated.user_id == "user-1"
    assert updated.full_name == "Ana B"
    assert updated.favorite_colors == "navy"
    assert store.get_profile("user-1").sizes == {"shoes": "38"}
    assert store.update_profile("missing", {"full_name": "x"}) is None

    with pytest.raises(ValueError):
        store.update_profile("user-1", {"segment_preference": "robots"})

    remembered = store.set_segment_preference("user-2", "female")
    assert remembered.segment_preference == "Female"
    assert store.get_profile("user-2").segment_preference == "Female"
