"""Heuristic analyzer and vision client behaviour."""

from __future__ import annotations

import base64
import io
import json
import sys
from pathlib import Path

import pytest
import requests
from PIL import Image

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.attribute_heuristics import analyze_dimensions, analyze_image
from models.attributes import AttributeAnalysis
from tools import vision_client
from tools.vision_client import (
    GeminiVisionClient,
    VisionServiceError,
    analyze_clothing_item,
    download_image,
    parse_analysis,
)


def _png(width: int, height: int) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color=(30, 30, 120)).save(buffer, format="PNG")
    return buffer.getvalue()


def _vision_payload(category: str = "shirt") -> str:
    return json.dumps(
        {
            "success": True,
            "attributes": {
                "category": {"value": category, "confidence": 92},
                "color": {"value": "Navy Blue", "confidence": 88.6},
                "style": "casual",
            },
            "overall_confidence": 81,
            "outfit_suggestions": ["Pair with chinos"],
        }
    )


@pytest.mark.parametrize(
    "size, filename, category, confidence",
    [
        ((100, 200), "black_tshirt.png", "shirt", 90),
        ((100, 200), "wool_coat.png", "jacket", 85),
        ((100, 200), "photo.png", "shirt", 75),
        ((300, 100), "blue_jeans.jpg", "pants", 85),
        ((300, 100), "formal_dress.jpg", "dress", 90),
        ((100, 100), "white_sneakers.png", "shoes", 88),
        ((100, 100), "photo.png", "accessories", 75),
    ],
)
def test_category_follows_aspect_ratio_and_filename(size, filename, category, confidence) -> None:
    analysis = analyze_image(_png(*size), filename)

    assert analysis.success
    assert analysis.source == "heuristic"
    assert analysis.attributes["category"].value == category
    assert analysis.attributes["category"].confidence == confidence


def test_filename_tokens_refine_attributes() -> None:
    analysis = analyze_dimensions(300, 100, "blue_denim_jeans.jpg")

    assert analysis.value_of("color") == "Blue"
    assert analysis.value_of("fabric") == "denim"
    assert analysis.attributes["fabric"].confidence == 90
    assert analysis.value_of("name") == "blue_denim_jeans"
    assert analysis.attributes["name"].confidence == 90


def test_style_drives_occasion() -> None:
    formal = analyze_dimensions(300, 100, "formal_dress.jpg")
    assert formal.value_of("style") == "formal"
    assert formal.value_of("occasion") == "formal"
    assert formal.attributes["occasion"].confidence == 80

    sporty = analyze_dimensions(100, 200, "gym_top.png")
    assert sporty.value_of("style") == "sporty"
    assert sporty.value_of("occasion") == "sport"


def test_overall_confidence_is_mean_of_attributes() -> None:
    analysis = analyze_dimensions(100, 100, "photo.png")

    # category 75, color 65, style 75, pattern 70, season 70, brand 30, fabric 60, occasion 70, gender 60
    assert analysis.overall_confidence == 64


def test_undecodable_images_use_fallback_record() -> None:
    for analysis in (analyze_image(b"not an image", "broken.png"), analyze_dimensions(0, 10, "zero.png")):
        assert analysis.source == "fallback"
        assert analysis.overall_confidence == 50
        assert analysis.value_of("category") == "clothing"
        assert analysis.attributes["brand"].confidence == 20


def test_parse_analysis_extracts_json_from_prose() -> None:
    analysis = parse_analysis(f"Here you go:\n```json\n{_vision_payload()}\n```")

    assert analysis.source == "vision"
    assert analysis.value_of("category") == "shirt"
    assert analysis.attributes["color"].confidence == 89
    assert analysis.attributes["style"].confidence == 50
    assert analysis.outfit_suggestions == ["Pair with chinos"]


@pytest.mark.parametrize("text", ["no json here", "{not valid json}", _vision_payload(category="spaceship")])
def test_parse_analysis_rejects_bad_responses(text: str) -> None:
    with pytest.raises(VisionServiceError):
        parse_analysis(text)


def test_vision_client_requires_api_key() -> None:
    client = GeminiVisionClient(api_key=None)
    assert not client.available
    with pytest.raises(VisionServiceError):
        client.analyze("https://example.com/shirt.png")


def test_vision_client_calls_gemini(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: dict = {}

    class _FakeResponse:
        text = _vision_payload()

    class _FakeModel:
        def __init__(self, model_name: str) -> None:
            calls["model"] = model_name

        def generate_content(self, contents, **kwargs):
            calls["contents"] = contents
            calls["config"] = kwargs["generation_config"]
            return _FakeResponse()

    monkeypatch.setattr(vision_client.genai, "configure", lambda **_: None)
    monkeypatch.setattr(vision_client.genai, "GenerativeModel", _FakeModel)
    monkeypatch.setattr(vision_client, "download_image", lambda url, timeout: _png(50, 80))

    analysis = GeminiVisionClient(api_key="test-key", model="gemini-test").analyze("https://example.com/a.png")

    assert analysis.value_of("category") == "shirt"
    assert calls["model"] == "gemini-test"
    assert isinstance(calls["contents"][1], Image.Image)
    assert calls["config"]["temperature"] == 0.1


def test_vision_client_wraps_model_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    class _FailingModel:
        def __init__(self, model_name: str) -> None:
            pass

        def generate_content(self, contents, **kwargs):
            raise RuntimeError("quota exceeded")

    monkeypatch.setattr(vision_client.genai, "configure", lambda **_: None)
    monkeypatch.setattr(vision_client.genai, "GenerativeModel", _FailingModel)
    monkeypatch.setattr(vision_client, "download_image", lambda url, timeout: _png(50, 80))

    with pytest.raises(VisionServiceError):
        GeminiVisionClient(api_key="test-key").analyze("https://example.com/a.png")


def test_analyze_clothing_item_falls_back_to_heuristics(monkeypatch: pytest.MonkeyPatch) -> None:
    class _BrokenVision:
        available = True

        def analyze(self, image_url: str) -> AttributeAnalysis:
            raise VisionServiceError("service down")

    analysis = analyze_clothing_item(
        "https://example.com/uploads/white_sneakers.png",
        vision_client=_BrokenVision(),
        fetch=lambda url: _png(60, 60),
    )

    assert analysis.source == "heuristic"
    assert analysis.value_of("category") == "shoes"
    assert analysis.value_of("name") == "white_sneakers"


def test_analyze_clothing_item_uses_fallback_when_fetch_fails() -> None:
    def _fail(url: str) -> bytes:
        raise VisionServiceError("404")

    analysis = analyze_clothing_item("https://example.com/missing.png", fetch=_fail)

    assert analysis.source == "fallback"
    assert analysis.value_of("name") == "missing"


def test_download_image_supports_data_urls_and_wraps_request_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    raw = _png(10, 10)
    data_url = "data:image/png;base64," + base64.b64encode(raw).decode()
    assert download_image(data_url) == raw

    def _raise(*_, **__):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(vision_client.requests, "get", _raise)
    with pytest.raises(VisionServiceError):
        download_image("https://example.com/shirt.png")
