"""Clothing attribute analysis backed by Gemini, with heuristic fallback.

``GeminiVisionClient`` asks the vision model for a JSON attribute report and
raises :class:`VisionServiceError` on every failure. ``analyze_clothing_item``
is the entry point used by the service: it prefers the vision result, falls
back to the heuristic analyzer on the downloaded image bytes, and finally to
the fixed low-confidence record.
"""
from __future__ import annotations

import base64
import binascii
import io
import json
import logging
import re
from pathlib import PurePosixPath
from typing import Callable, Optional
from urllib.parse import urlparse

import google.generativeai as genai
import requests
from PIL import Image, UnidentifiedImageError
from pydantic import ValidationError

from logic.attribute_heuristics import analyze_image, fallback_analysis
from models.attributes import VALID_VISION_CATEGORIES, AttributeAnalysis, mean_confidence
from tools.observability import instrument_tool

logger = logging.getLogger(__name__)

DEFAULT_VISION_MODEL = "gemini-2.0-flash"
DEFAULT_TIMEOUT_SECONDS = 15.0
_JSON_BLOCK = re.compile(r"\{[\s\S]*\}")

ANALYSIS_PROMPT = """
Analyze this clothing image and return its attributes as JSON.

Attributes:
1. category: one of shirt, t-shirt, pants, jeans, dress, skirt, shoes, sneakers, boots,
   jacket, coat, sweater, hoodie, shorts, blouse, accessories, bag, jewelry, watch, glasses, hat
2. color: primary color with a specific name (Navy Blue, Crimson Red, Olive Green)
3. style: casual, formal, sporty, elegant, business, streetwear, vintage or bohemian
4. pattern: solid, striped, floral, checkered, printed, graphic, embroidered or textured
5. season: spring, summer, fall, winter or all-season
6. fabric: cotton, denim, silk, wool, polyester, linen, leather, knit or chiffon
7. occasion: casual, formal, business, party, wedding, sports, beach or everyday
8. gender: Male, Female, Unisex or Kids
9. brand: the visible brand, otherwise "Unknown"

Give every attribute a confidence between 0 and 100 and an overall confidence.
Also suggest up to three outfit combinations for the item.
Return ONLY JSON in this shape:
{
  "success": true,
  "attributes": {"category": {"value": "shirt", "confidence": 85}, ...},
  "overall_confidence": 78,
  "outfit_suggestions": ["..."]
}
"""

GENERATION_CONFIG = {
    "temperature": 0.1,
    "top_p": 0.8,
    "top_k": 40,
    "max_output_tokens": 2048,
}

Fetcher = Callable[[str], Optional[bytes]]


class VisionServiceError(RuntimeError):
    """Raised when the vision service cannot produce a valid analysis."""


def _decode_data_url(image_url: str) -> bytes:
    try:
        _, encoded = image_url.split(",", 1)
        return base64.b64decode(encoded, validate=True)
    except (ValueError, binascii.Error) as exc:
        raise VisionServiceError(f"Malformed data URL: {exc}") from exc


def download_image(image_url: str, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> bytes:
    """Return the raw bytes behind ``image_url`` (http(s) or ``data:`` URLs)."""

    if image_url.startswith("data:"):
        return _decode_data_url(image_url)
    try:
        response = requests.get(image_url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise VisionServiceError(f"Failed to fetch image: {exc}") from exc
    return response.content


def parse_analysis(response_text: str) -> AttributeAnalysis:
    """Extract the JSON block from a model reply and validate it."""

    match = _JSON_BLOCK.search(response_text or "")
    if not match:
        raise VisionServiceError("No JSON found in vision response")
    try:
        payload = json.loads(match.group(0))
        analysis = AttributeAnalysis.model_validate({**payload, "source": "vision"})
    except (json.JSONDecodeError, ValidationError) as exc:
        raise VisionServiceError(f"Failed to parse vision response: {exc}") from exc

    category = (analysis.value_of("category") or "").strip().lower()
    if category not in VALID_VISION_CATEGORIES:
        raise VisionServiceError(f"Invalid category from vision service: {category or 'missing'}")
    if not analysis.overall_confidence:
        analysis.overall_confidence = mean_confidence(analysis.attributes)
    return analysis


class GeminiVisionClient:
    """Thin wrapper over ``google-generativeai`` for clothing analysis."""

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_VISION_MODEL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.timeout_seconds = timeout_seconds
        if api_key:
            genai.configure(api_key=api_key)

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    @instrument_tool("vision.analyze")
    def analyze(self, image_url: str) -> AttributeAnalysis:
        if not self.api_key:
            raise VisionServiceError("Gemini API key not configured")

        image_bytes = download_image(image_url, timeout=self.timeout_seconds)
        try:
            image = Image.open(io.BytesIO(image_bytes))
            image.load()
        except (UnidentifiedImageError, OSError) as exc:
            raise VisionServiceError(f"Unreadable image: {exc}") from exc

        try:
            response = genai.GenerativeModel(self.model).generate_content(
                [ANALYSIS_PROMPT, image],
                generation_config=GENERATION_CONFIG,
                request_options={"timeout": self.timeout_seconds},
            )
            text = response.text
        except Exception as exc:  # noqa: BLE001 - SDK raises several unrelated error types
            raise VisionServiceError(f"Gemini API error: {exc}") from exc
        return parse_analysis(text)


def _filename_from_url(image_url: str) -> str:
    if image_url.startswith("data:"):
        return ""
    return PurePosixPath(urlparse(image_url).path).name


def analyze_clothing_item(
    image_url: str,
    filename: str | None = None,
    vision_client: GeminiVisionClient | None = None,
    fetch: Fetcher | None = None,
) -> AttributeAnalysis:
    """Analyze an uploaded image; never raises.

    ``fetch`` returns the image bytes for the heuristic path and defaults to
    :func:`download_image`.
    """

    filename = filename or _filename_from_url(image_url)
    if vision_client is not None and vision_client.available:
        try:
            return vision_client.analyze(image_url)
        except VisionServiceError as exc:
            logger.warning("Vision analysis failed, using heuristic analyzer: %s", exc)

    fetch = fetch or download_image
    try:
        image_bytes = fetch(image_url)
    except VisionServiceError as exc:
        logger.warning("Could not fetch image for heuristic analysis: %s", exc)
        return fallback_analysis(filename)
    return analyze_image(image_bytes, filename)


__all__ = [
    "DEFAULT_VISION_MODEL",
    "GeminiVisionClient",
    "VisionServiceError",
    "analyze_clothing_item",
    "download_image",
    "parse_analysis",
]
