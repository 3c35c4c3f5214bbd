"""
Tests for the Gemini food analyzer using httpx.MockTransport (no network).
"""

import json

import httpx
import pytest

from adapters.inference_adapter import GeminiFoodAnalyzer, parse_estimate, split_image_payload
from app.exceptions import InferenceError, ServiceValidationError

ESTIMATE = {
    "name": "Grilled salmon",
    "calories": 367,
    "protein": 39,
    "carbs": 0,
    "fat": 22,
    "sugar": 0,
    "confidence": 100,
}


def _gemini_body(text):
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


def _analyzer(handler, api_key="test-key"):
    return GeminiFoodAnalyzer(
        api_key=api_key,
        model="gemini-2.0-flash",
        base_url="https://gemini.test/v1beta",
        transport=httpx.MockTransport(handler),
    )


def test_split_image_payload():
    assert split_image_payload("data:image/png;base64,iVBORw0KGgo=") == ("image/png", "iVBORw0KGgo=")
    assert split_image_payload("/9j/4AAQSkZJRg==") == ("image/jpeg", "/9j/4AAQSkZJRg==")


def test_analyze_image_sends_inline_data_and_schema():
    """
    Verifies:
    - The data: prefix is stripped and its MIME type forwarded
    - The structured-output schema requires all seven fields
    - The API key travels in a header, not the URL
    """
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["key"] = request.headers.get("x-goog-api-key")
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json=_gemini_body(json.dumps(ESTIMATE)))

    estimate = _analyzer(handler).analyze_image("data:image/webp;base64,UklGRg==")

    assert estimate.name == "Grilled salmon"
    assert estimate.calories == 367
    assert captured["url"] == "https://gemini.test/v1beta/models/gemini-2.0-flash:generateContent"
    assert captured["key"] == "test-key"

    parts = captured["body"]["contents"][0]["parts"]
    assert parts[0]["inlineData"] == {"mimeType": "image/webp", "data": "UklGRg=="}
    config = captured["body"]["generationConfig"]
    assert config["responseMimeType"] == "application/json"
    assert len(config["responseSchema"]["required"]) == 7


def test_analyze_text_includes_description():
    def handler(request):
        body = json.loads(request.content)
        assert "two boiled eggs" in body["contents"][0]["parts"][0]["text"]
        return httpx.Response(200, json=_gemini_body(json.dumps({**ESTIMATE, "name": "Boiled eggs"})))

    assert _analyzer(handler).analyze_text("two boiled eggs").name == "Boiled eggs"


def test_parse_estimate_accepts_fenced_json():
    estimate = parse_estimate(_gemini_body("```json\n" + json.dumps(ESTIMATE) + "\n```"))
    assert estimate.confidence == 100


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"candidates": []},
        _gemini_body(""),
        _gemini_body("I think this is a salad"),
        _gemini_body(json.dumps({k: v for k, v in ESTIMATE.items() if k != "sugar"})),
    ],
)
def test_parse_estimate_failures(body):
    with pytest.raises(InferenceError):
        parse_estimate(body)


def test_http_error_is_inference_error():
    analyzer = _analyzer(lambda request: httpx.Response(503, text="overloaded"))
    with pytest.raises(InferenceError) as exc_info:
        analyzer.analyze_text("apple")
    assert exc_info.value.details == {"status": 503}
    assert exc_info.value.http_status == 502


def test_transport_error_is_inference_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(InferenceError):
        _analyzer(handler).analyze_image("abc")


def test_missing_api_key():
    def handler(request):
        pytest.fail("no request expected without an API key")

    with pytest.raises(InferenceError) as exc_info:
        _analyzer(handler, api_key="").analyze_text("apple")
    assert exc_info.value.code == "INFERENCE_UNAVAILABLE"


def test_blank_input_is_rejected():
    analyzer = _analyzer(lambda request: httpx.Response(200, json={}))
    with pytest.raises(ServiceValidationError):
        analyzer.analyze_text("   ")
    with pytest.raises(ServiceValidationError):
        analyzer.analyze_image("")
