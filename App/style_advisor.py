"""AI style advisor proposing filter settings for a preview image.

AIDEV-NOTE: The advisor is an optional collaborator. Every failure path
(missing API key, network error, malformed JSON) ends in an empty
suggestion, which merges into the current settings as a no-op.
"""

import json
import math
import os
from dataclasses import replace
from typing import Any

from google import genai
from google.genai import types

from errors import SuggestionUnavailableError
from models import (
    BRIGHTNESS_RANGE,
    CONTRAST_RANGE,
    PIXEL_SIZE_RANGE,
    THRESHOLD_RANGE,
    DitherMode,
    FilterSettings,
)

DEFAULT_MODEL = "gemini-3-flash-preview"

PROMPT = (
    "Analyze this image for its lighting, contrast, and detail density. "
    "Suggest optimal parameters for a monochrome pixel dither effect. "
    "Return the values for pixelSize, contrast, brightness, threshold, "
    "and the dither mode."
)

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "pixelSize": {"type": "NUMBER", "description": "Optimal pixel size (4-12)"},
        "contrast": {"type": "NUMBER", "description": "Optimal contrast (0-100)"},
        "brightness": {"type": "NUMBER", "description": "Optimal brightness (-50-50)"},
        "threshold": {"type": "NUMBER", "description": "Optimal threshold (100-200)"},
        "mode": {
            "type": "STRING",
            "enum": [mode.value for mode in DitherMode],
            "description": "Optimal dither mode",
        },
    },
    "required": ["pixelSize", "contrast", "brightness", "threshold", "mode"],
}

# Response key -> (FilterSettings field, recognized range)
NUMERIC_FIELDS = {
    "pixelSize": ("pixel_size", PIXEL_SIZE_RANGE),
    "contrast": ("contrast", CONTRAST_RANGE),
    "brightness": ("brightness", BRIGHTNESS_RANGE),
    "threshold": ("threshold", THRESHOLD_RANGE),
}


def request_style(
    png_bytes: bytes,
    client: Any = None,
    model: str = DEFAULT_MODEL,
    api_key: str | None = None,
) -> "dict[str, Any]":
    """Ask Gemini for raw filter values.

    Args:
        png_bytes: Rendered preview encoded as PNG
        client: genai.Client (created from api_key/GEMINI_API_KEY if None)
        model: Gemini model name
        api_key: API key used when creating a client

    Returns:
        Raw JSON object returned by the model

    Raises:
        SuggestionUnavailableError: On any request or decoding failure
    """
    if client is None:
        api_key = api_key or os.getenv("GEMINI_API_KEY")
        if not api_key:
            raise SuggestionUnavailableError("GEMINI_API_KEY not found in environment")
        client = genai.Client(api_key=api_key)

    try:
        response = client.models.generate_content(
            model=model,
            contents=[
                types.Part.from_bytes(data=png_bytes, mime_type="image/png"),
                PROMPT,
            ],
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=RESPONSE_SCHEMA,
            ),
        )
        raw = json.loads(response.text or "{}")
    except Exception as e:
        # AIDEV-NOTE: genai raises several unrelated error types (HTTP,
        # auth, quota); all of them mean "no suggestion"
        raise SuggestionUnavailableError(f"AI analysis failed: {e}") from e

    if not isinstance(raw, dict):
        raise SuggestionUnavailableError(f"Expected a JSON object, got {type(raw).__name__}")
    return raw


def parse_suggestion(raw: "dict[str, Any]") -> "dict[str, Any]":
    """Convert a raw response into FilterSettings field overrides.

    Unknown keys, non-numeric values and unknown modes are dropped; numbers
    are clamped into the recognized control ranges.
    """
    suggestion: "dict[str, Any]" = {}

    for key, (field_name, (low, high)) in NUMERIC_FIELDS.items():
        value = raw.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        if not math.isfinite(value):
            continue
        value = max(low, min(high, value))
        suggestion[field_name] = int(round(value)) if field_name == "pixel_size" else float(value)

    mode = raw.get("mode")
    if isinstance(mode, str) and mode.upper() in DitherMode.__members__:
        suggestion["mode"] = DitherMode[mode.upper()]

    return suggestion


def analyze_image_style(
    png_bytes: bytes,
    client: Any = None,
    model: str = DEFAULT_MODEL,
    api_key: str | None = None,
) -> "dict[str, Any]":
    """Suggest filter settings for an image, or {} on any failure."""
    try:
        raw = request_style(png_bytes, client=client, model=model, api_key=api_key)
    except SuggestionUnavailableError as e:
        print(f"Warning: {e}")
        return {}
    suggestion = parse_suggestion(raw)
    print(f"✓ AI suggestion: {suggestion}")
    return suggestion


def merge_suggestion(
    settings: FilterSettings, suggestion: "dict[str, Any] | None"
) -> FilterSettings:
    """Apply suggested overrides; an empty suggestion changes nothing."""
    if not suggestion:
        return settings
    return replace(settings, **suggestion)
