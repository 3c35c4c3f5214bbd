"""
Food recognition through the Gemini ``generateContent`` REST endpoint.

The analyzer turns a photo or a free-text description into a FoodEstimate.
A structured-output schema is sent with every request so the model answers
with a single JSON object; anything else is treated as a failed call.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

import httpx
from pydantic import ValidationError as PydanticValidationError

from app.config import Settings, settings as default_settings
from app.exceptions import InferenceError, ServiceValidationError
from domain.schemas.analysis_schemas import FoodEstimate

logger = logging.getLogger("nutrilog.inference")

DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"

_DATA_URI = re.compile(r"^\s*data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[^,]*)?,", re.IGNORECASE)

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "name": {"type": "STRING"},
        "calories": {"type": "NUMBER"},
        "protein": {"type": "NUMBER"},
        "carbs": {"type": "NUMBER"},
        "fat": {"type": "NUMBER"},
        "sugar": {"type": "NUMBER"},
        "confidence": {"type": "NUMBER"},
    },
    "required": ["name", "calories", "protein", "carbs", "fat", "sugar", "confidence"],
}

IMAGE_PROMPT = (
    "Identify this food item. Estimate calories and macros for a standard serving.\n"
    "- Always make a best-effort guess, even for packaged goods or unclear images.\n"
    "- Set confidence to 100 if you can identify ANY food, drink, or food packaging.\n"
    "- Only set confidence to 0 if the image is clearly a non-food object "
    "(like a shoe) or pitch black.\n"
    "Return strictly JSON."
)

TEXT_PROMPT = (
    'Analyze this food description: "{description}".\n'
    "Estimate calories and macros.\n"
    "- Always provide a result if the text describes something edible.\n"
    "- Set confidence to 100 for any valid food description.\n"
    "- Only set confidence to 0 for complete gibberish.\n"
    "Return strictly JSON."
)


def split_image_payload(payload: str) -> Tuple[str, str]:
    """Return ``(mime_type, base64_data)`` for a raw or ``data:`` URI payload."""
    match = _DATA_URI.match(payload)
    if not match:
        return DEFAULT_IMAGE_MIME_TYPE, payload.strip()
    mime_type = match.group("mime") or DEFAULT_IMAGE_MIME_TYPE
    return mime_type.lower(), payload[match.end():].strip()


def _response_text(data: Any) -> str:
    """Concatenated text parts of the first candidate."""
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError) as exc:
        raise InferenceError("Empty AI response", details={"response": data}) from exc
    text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
    if not text.strip():
        raise InferenceError("Empty AI response", details={"response": data})
    return text


def parse_estimate(data: Any) -> FoodEstimate:
    """Validate a ``generateContent`` response body into a FoodEstimate.

    Raises:
        InferenceError: if the body carries no JSON object with every field
    """
    text = _response_text(data).strip()
    text = re.sub(r"^```(?:json)?\s*", "", text, flags=re.IGNORECASE)
    text = re.sub(r"\s*```$", "", text)
    try:
        return FoodEstimate.model_validate(json.loads(text))
    except json.JSONDecodeError as exc:
        raise InferenceError("AI response is not valid JSON", details={"text": text[:200]}) from exc
    except PydanticValidationError as exc:
        raise InferenceError(
            "AI response is missing required fields",
            details={"errors": exc.errors(include_url=False, include_context=False)},
        ) from exc


class GeminiFoodAnalyzer:
    """Client for food estimates; one instance is shared by the whole app."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        config: Optional[Settings] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        config = config or default_settings
        self.api_key = api_key if api_key is not None else config.gemini_api_key
        self.model = model or config.gemini_model
        self.base_url = (base_url or config.gemini_base_url).rstrip("/")
        self._client = httpx.Client(
            timeout=timeout or config.inference_timeout_sec,
            transport=transport,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def close(self) -> None:
        self._client.close()

    def analyze_image(self, image: str) -> FoodEstimate:
        """Estimate nutrition for a base64 photo (optionally a ``data:`` URI)."""
        if not image or not image.strip():
            raise ServiceValidationError("Image required", code="MISSING_INPUT")
        mime_type, data = split_image_payload(image)
        parts = [
            {"inlineData": {"mimeType": mime_type, "data": data}},
            {"text": IMAGE_PROMPT},
        ]
        return self._generate(parts, kind="image")

    def analyze_text(self, description: str) -> FoodEstimate:
        """Estimate nutrition for a free-text food description."""
        if not description or not description.strip():
            raise ServiceValidationError("Description required", code="MISSING_INPUT")
        parts = [{"text": TEXT_PROMPT.format(description=description.strip())}]
        return self._generate(parts, kind="text")

    def _generate(self, parts: List[Dict[str, Any]], kind: str) -> FoodEstimate:
        if not self.api_key:
            raise InferenceError("Inference service is not configured", code="INFERENCE_UNAVAILABLE")

        body = {
            "contents": [{"parts": parts}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
            },
        }
        try:
            resp = self._client.post(
                self.endpoint, json=body, headers={"x-goog-api-key": self.api_key}
            )
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as exc:
            logger.error(
                f"inference_failed kind={kind} status={exc.response.status_code} "
                f"body={exc.response.text[:200]}"
            )
            raise InferenceError(
                "AI failed", details={"status": exc.response.status_code}
            ) from exc
        except httpx.HTTPError as exc:
            logger.error(f"inference_failed kind={kind} error={exc}")
            raise InferenceError("AI failed", details={"error": str(exc)}) from exc
        except ValueError as exc:
            logger.error(f"inference_failed kind={kind} error=non-json body")
            raise InferenceError("AI response is not valid JSON") from exc

        estimate = parse_estimate(data)
        logger.info(
            f"inference_completed kind={kind} name={estimate.name} "
            f"calories={estimate.calories} confidence={estimate.confidence}"
        )
        return estimate
