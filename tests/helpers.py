"""Shared builders for the test suite: fake backend, canned responses, sample plans."""

import base64
import io
import json
from typing import Any

from PIL import Image

from makeover.models.generation import Candidate, ContentPart, ModelRequest, ModelResponse, SafetyRating


def make_png(width: int = 8, height: int = 8, color: str = "white") -> bytes:
    img = Image.new("RGB", (width, height), color)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def make_jpeg(width: int = 8, height: int = 8, color: str = "gray") -> bytes:
    img = Image.new("RGB", (width, height), color)
    buf = io.BytesIO()
    img.save(buf, format="JPEG")
    return buf.getvalue()


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def plan_data(**overrides: Any) -> dict[str, Any]:
    """A well-formed design plan in wire (camelCase) form."""
    data = {
        "analysis": "A bright living room with a dated sofa and a bare corner.",
        "designRationale": "Warm neutrals balance the oak floor; the sofa anchors a focal point.",
        "wallColor": {"color": "Soft Off-White", "accent": "Charcoal Gray"},
        "lighting": "Arched floor lamp and recessed lights",
        "flooring": "Light oak hardwood floors",
        "furnitureSuggestions": [
            {
                "name": "Plush Sectional Sofa",
                "description": "Low-profile sofa in oatmeal boucle.",
                "placement": "Against the long wall facing the window",
                "estimatedPrice": 1800,
                "modelUrl": "https://models.example.com/sectional.gltf",
            },
            {
                "name": "Walnut Coffee Table",
                "description": "Rounded walnut table.",
                "placement": "Centered in front of the sofa",
                "estimatedPrice": 450,
            },
            {
                "name": "Wool Area Rug",
                "description": "Flat-woven rug in cream.",
                "placement": "Under the coffee table",
                "estimatedPrice": 320.5,
            },
        ],
        "estimatedCost": {"min": 2500, "max": 4000, "currency": "USD"},
        "alternativePalettes": [
            {"color": "Sage Green", "accent": "Terracotta"},
            {"color": "Warm Greige", "accent": "Navy"},
            {"color": "Pale Blush", "accent": "Olive"},
        ],
    }
    data.update(overrides)
    return data


def text_response(text: str) -> ModelResponse:
    return ModelResponse(candidates=[Candidate(parts=[ContentPart.from_text(text)], finish_reason="STOP")])


def json_response(data: Any) -> ModelResponse:
    return text_response(json.dumps(data))


def image_response(data: bytes, text: str | None = None, mime_type: str = "image/png") -> ModelResponse:
    parts = []
    if text:
        parts.append(ContentPart.from_text(text))
    parts.append(ContentPart.from_image(data, mime_type))
    return ModelResponse(candidates=[Candidate(parts=parts, finish_reason="STOP")])


def blocked_response(*ratings: tuple[str, bool], text: str | None = None) -> ModelResponse:
    parts = [ContentPart.from_text(text)] if text else []
    return ModelResponse(
        candidates=[
            Candidate(
                parts=parts,
                finish_reason="SAFETY",
                safety_ratings=[SafetyRating(category=c, blocked=b) for c, b in ratings],
            )
        ]
    )


class FakeBackend:
    """Returns scripted responses in order; exceptions in the script are raised."""

    def __init__(self, *responses: ModelResponse | Exception):
        self.responses = list(responses)
        self.requests: list[ModelRequest] = []

    def generate_content(self, request: ModelRequest) -> ModelResponse:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError("FakeBackend received more calls than scripted")
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result
