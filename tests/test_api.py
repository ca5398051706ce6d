"""End-to-end API behaviour through FastAPI's TestClient."""

from __future__ import annotations

import base64
import io
import random
import sys
from datetime import date
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from PIL import Image

sys.path.append(str(Path(__file__).resolve().parents[1]))

from server.api import create_app
from stylist_app.app import StylistApp
from stylist_app.config import AppConfig

USER = "user-1"


@pytest.fixture()
def client(tmp_path: Path) -> TestClient:
    config = AppConfig(wardrobe_db_path=str(tmp_path / "wardrobe.db"), session_store_backend="memory")
    stylist = StylistApp(config, rng=random.Random(7))
    return TestClient(create_app(stylist))


def _add(client: TestClient, category: str, **attributes: str) -> dict:
    response = client.post("/items", json={"user_id": USER, "category": category, **attributes})
    assert response.status_code == 201
    return response.json()


def _session(client: TestClient, segment: str = "All") -> str:
    response = client.post("/sessions", json={"user_id": USER, "segment": segment})
    assert response.status_code == 201
    return response.json()["session_id"]


def test_healthcheck(client: TestClient) -> None:
    body = client.get("/healthz").json()
    assert body["status"] == "ok"
    assert body["vision_enabled"] is False


def test_item_crud_and_segment_browsing(client: TestClient) -> None:
    shirt = _add(client, "shirt", color="Navy", gender="Male", item_id="shirt-1")
    _add(client, "skirt", color="Pink", gender="Female")
    _add(client, "sneakers")

    assert client.get("/items", params={"user_id": USER}).json()["count"] == 3
    male = client.get("/items", params={"user_id": USER, "segment": "male"}).json()
    assert [item["item_id"] for item in male["items"]] == ["shirt-1"]
    unknown = client.get("/items", params={"user_id": USER, "segment": "Unknown"}).json()
    assert [item["category"] for item in unknown["items"]] == ["sneakers"]
    assert client.get("/items", params={"user_id": USER, "segment": "robots"}).status_code == 400

    patched = client.patch(f"/items/{shirt['item_id']}", json={"user_id": USER, "color": "White"})
    assert patched.status_code == 200
    assert patched.json()["color"] == "White"
    assert patched.json()["gender"] == "Male"
    assert client.patch("/items/missing", json={"user_id": USER, "color": "Red"}).status_code == 404

    assert client.delete(f"/items/{shirt['item_id']}", params={"user_id": USER}).status_code == 200
    assert client.delete(f"/items/{shirt['item_id']}", params={"user_id": USER}).status_code == 404


def test_wardrobe_stats_by_filter_mode(client: TestClient) -> None:
    _add(client, "shirt", gender="Male")
    _add(client, "chinos pants")

    strict = client.get("/wardrobe/stats", params={"user_id": USER, "segment": "Male"}).json()
    permissive = client.get(
        "/wardrobe/stats", params={"user_id": USER, "segment": "Male", "mode": "permissive"}
    ).json()

    assert strict == {"total": 1, "tops": 1, "bottoms": 0, "shoes": 0, "accessories": 0}
    assert permissive["total"] == 2
    assert permissive["bottoms"] == 1


def test_generate_records_history_and_resets_when_exhausted(client: TestClient) -> None:
    _add(client, "shirt", color="Navy", style="casual", item_id="t1")
    _add(client, "jeans", color="Blue", style="casual", item_id="b1")
    _add(client, "sneakers", color="White", style="casual", item_id="s1")
    session_id = _session(client)
    payload = {"user_id": USER, "session_id": session_id, "occasion_id": "casual"}

    first = client.post("/outfits/generate", json=payload)
    assert first.status_code == 200
    body = first.json()
    assert body["outfit"]["signature"] == "t1|b1|s1"
    assert body["outfit"]["occasion"] == "Casual Day"
    assert body["outfit"]["match_score"] >= 33
    assert body["history_size"] == 1

    second = client.post("/outfits/generate", json=payload).json()
    assert second["outfit"]["signature"] == "t1|b1|s1"
    assert second["diagnostics"]["history_resets"] == 1
    assert second["history_size"] == 1


def test_generate_error_statuses(client: TestClient) -> None:
    session_id = _session(client, "Kids")
    _add(client, "shirt", gender="Male")

    no_match = client.post("/outfits/generate", json={"user_id": USER, "session_id": session_id})
    assert no_match.status_code == 422
    assert no_match.json()["detail"]["status"] == "no_matching_items"

    assert client.put(f"/sessions/{session_id}/segment", json={"segment": "Male"}).status_code == 200
    insufficient = client.post("/outfits/generate", json={"user_id": USER, "session_id": session_id})
    assert insufficient.status_code == 422
    assert insufficient.json()["detail"]["status"] == "insufficient_items"

    missing = client.post("/outfits/generate", json={"user_id": USER, "session_id": "nope"})
    assert missing.status_code == 404
    wrong_user = client.post("/outfits/generate", json={"user_id": "intruder", "session_id": session_id})
    assert wrong_user.status_code == 404


def test_avoided_wardrobe_returns_conflict(client: TestClient) -> None:
    _add(client, "shirt dress", gender="Male")
    _add(client, "dress pants", gender="Male")
    session_id = _session(client, "Male")

    response = client.post("/outfits/generate", json={"user_id": USER, "session_id": session_id})

    assert response.status_code == 409
    assert response.json()["detail"]["status"] == "no_new_combinations"


def test_session_segment_and_refresh_endpoints(client: TestClient) -> None:
    assert client.post("/sessions", json={"user_id": USER, "segment": "robots"}).status_code == 400
    session_id = _session(client, "Female")

    assert client.put(f"/sessions/{session_id}/segment", json={"segment": "plants"}).status_code == 400
    assert client.put("/sessions/missing/segment", json={"segment": "Male"}).status_code == 404
    refreshed = client.post(f"/sessions/{session_id}/refresh").json()
    assert refreshed["history"] == []
    assert client.post("/sessions/missing/refresh").status_code == 404


def test_occasions_list_events_before_defaults(client: TestClient) -> None:
    today = date.today().isoformat()
    created = client.post(
        "/occasions", json={"user_id": USER, "title": "Wedding", "date": today, "occasion": "formal"}
    )
    assert created.status_code == 201

    occasions = client.get("/occasions", params={"user_id": USER}).json()["occasions"]
    assert occasions[0]["title"] == "Wedding"
    assert [o["occasion_id"] for o in occasions[1:]] == ["casual", "work", "date", "sports"]

    other_day = client.get("/occasions", params={"user_id": USER, "date": "2001-01-01"}).json()["occasions"]
    assert len(other_day) == 4
    assert other_day[0]["date"] == "2001-01-01"


def test_saved_outfit_lifecycle(client: TestClient) -> None:
    _add(client, "blouse", color="Pink", gender="Female")
    _add(client, "skirt", color="Cream", gender="Female")
    session_id = _session(client, "Female")
    outfit = client.post("/outfits/generate", json={"user_id": USER, "session_id": session_id}).json()["outfit"]

    saved = client.post("/outfits/saved", json={"user_id": USER, "outfit": outfit})
    assert saved.status_code == 201
    saved_body = saved.json()
    assert saved_body["name"].startswith("Female Outfit - ")
    assert saved_body["ai_score"] == outfit["match_score"]

    listed = client.get("/outfits/saved", params={"user_id": USER}).json()["outfits"]
    assert [entry["outfit_id"] for entry in listed] == [saved_body["outfit_id"]]

    outfit_id = saved_body["outfit_id"]
    assert client.delete(f"/outfits/saved/{outfit_id}", params={"user_id": USER}).status_code == 200
    assert client.delete(f"/outfits/saved/{outfit_id}", params={"user_id": USER}).status_code == 404
    assert client.post("/outfits/saved", json={"user_id": USER, "outfit": {}}).status_code == 422


def test_analyze_uses_heuristics_without_vision(client: TestClient) -> None:
    buffer = io.BytesIO()
    Image.new("RGB", (120, 60)).save(buffer, format="PNG")
    data_url = "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode()

    response = client.post(
        "/items/analyze", json={"image_url": data_url, "filename": "grey_trousers.png", "use_vision": False}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["source"] == "heuristic"
    assert body["attributes"]["category"]["value"] == "pants"
    assert body["attributes"]["color"]["value"] == "Gray"


def test_upload_stores_analyzed_item(client: TestClient) -> None:
    buffer = io.BytesIO()
    Image.new("RGB", (80, 80)).save(buffer, format="PNG")
    data_url = "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode()

    response = client.post(
        "/items/upload",
        json={"user_id": USER, "image_url": data_url, "filename": "black_leather_boots.png", "use_vision": False},
    )

    assert response.status_code == 201
    item = response.json()["item"]
    assert item["category"] == "shoes"
    assert item["color"] == "Black"
    assert item["fabric"] == "leather"
    assert item["name"] == "black_leather_boots"
    assert client.get("/items", params={"user_id": USER}).json()["count"] == 1


def test_blank_category_is_rejected_instead_of_crashing(client: TestClient) -> None:
    shirt = _add(client, "shirt", item_id="i1")

    empty = client.patch(f"/items/{shirt['item_id']}", json={"user_id": USER, "category": ""})
    assert empty.status_code == 422
    blank = client.patch(f"/items/{shirt['item_id']}", json={"user_id": USER, "category": "   "})
    assert blank.status_code == 422
    created = client.post("/items", json={"user_id": USER, "category": "   "})
    assert created.status_code == 422

    items = client.get("/items", params={"user_id": USER}).json()["items"]
    assert [item["category"] for item in items] == ["shirt"]


def test_newest_event_is_the_default_occasion(client: TestClient) -> None:
    _add(client, "shirt", style="casual")
    _add(client, "jeans", style="casual")
    today = date.today().isoformat()
    client.post("/occasions", json={"user_id": USER, "title": "Older", "date": today, "occasion": "formal"})
    client.post("/occasions", json={"user_id": USER, "title": "Newer", "date": today, "occasion": "sporty"})

    titles = [o["title"] for o in client.get("/occasions", params={"user_id": USER}).json()["occasions"][:2]]
    assert titles == ["Newer", "Older"]

    outfit = client.post("/outfits/generate", json={"user_id": USER, "session_id": _session(client)}).json()["outfit"]
    assert outfit["occasion"] == "Newer"


def test_newest_accessories_are_attached(client: TestClient) -> None:
    _add(client, "shirt")
    _add(client, "jeans")
    for item_id, category in [("old-watch", "watch"), ("mid-belt", "belt"), ("new-scarf", "scarf")]:
        _add(client, category, item_id=item_id)

    outfit = client.post("/outfits/generate", json={"user_id": USER, "session_id": _session(client)}).json()["outfit"]

    assert [item["item_id"] for item in outfit["accessories"]] == ["new-scarf", "mid-belt"]


def test_switching_male_to_female_clears_stale_history(client: TestClient) -> None:
    _add(client, "shirt", color="White", item_id="t1")
    _add(client, "jeans", color="Blue", item_id="b1")
    session_id = _session(client, "Male")
    payload = {"user_id": USER, "session_id": session_id}

    male = client.post("/outfits/generate", json=payload).json()
    assert male["outfit"]["signature"] == "t1|b1|*"
    assert male["history_size"] == 1

    switched = client.put(f"/sessions/{session_id}/segment", json={"segment": "Female"}).json()
    assert switched["history"] == []

    female = client.post("/outfits/generate", json=payload)
    assert female.status_code == 200
    body = female.json()
    assert body["outfit"]["segment"] == "Female"
    assert body["outfit"]["signature"] == "t1|b1|*"
    assert body["diagnostics"]["history_resets"] == 0


def test_profile_routes_and_remembered_segment(client: TestClient) -> None:
    assert client.get(f"/profiles/{USER}").status_code == 404
    assert client.patch(f"/profiles/{USER}", json={"full_name": "Ana"}).status_code == 404

    created = client.put(
        f"/profiles/{USER}",
        json={"email": "ana@example.com", "full_name": "Ana", "segment_preference": "kids", "sizes": {"top": "S"}},
    )
    assert created.status_code == 200
    assert created.json()["segment_preference"] == "Kids"

    updated = client.patch(f"/profiles/{USER}", json={"preferred_style": "sporty"}).json()
    assert updated["preferred_style"] == "sporty"
    assert updated["full_name"] == "Ana"
    assert client.patch(f"/profiles/{USER}", json={"segment_preference": "robots"}).status_code == 400
    assert client.put(f"/profiles/{USER}", json={"segment_preference": "robots"}).status_code == 400

    remembered = client.post("/sessions", json={"user_id": USER}).json()
    assert remembered["segment"] == "Kids"

    client.put(f"/sessions/{remembered['session_id']}/segment", json={"segment": "Male"})
    assert client.get(f"/profiles/{USER}").json()["segment_preference"] == "Male"
    assert client.post("/sessions", json={"user_id": USER}).json()["segment"] == "Male"
    assert client.post("/sessions", json={"user_id": "newcomer"}).json()["segment"] == "All"
