"""HTTP contract tests for POST /api/generate and the catalogue routes.

The gateway factory is patched to a GenerationGateway over a FakeBackend, so
these tests cover status codes and body shapes end to end through FastAPI.
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

import makeover.routes.generate as generate_mod
import makeover.services.gateway as gateway_mod
from makeover.constants import DESIGN_STYLES, ROOM_TYPES
from makeover.exceptions import ConfigurationError
from makeover.main import app
from makeover.services.gateway import GenerationGateway
from tests.helpers import (
    FakeBackend,
    b64,
    blocked_response,
    image_response,
    json_response,
    make_png,
    plan_data,
    text_response,
)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def use_backend(test_settings):
    """Route requests to a GenerationGateway over the given scripted backend."""
    patchers = []

    def _use(*responses):
        backend = FakeBackend(*responses)
        gateway = GenerationGateway(backend, test_settings)
        patcher = patch.object(generate_mod, "get_gateway", return_value=gateway)
        patcher.start()
        patchers.append(patcher)
        return backend

    yield _use
    for patcher in patchers:
        patcher.stop()


def design_ideas_body(png_base64, **payload):
    body = {
        "action": "generateDesignIdeas",
        "payload": {
            "base64Image": png_base64,
            "style": "Modern",
            "roomType": "Living Room",
            "dimensions": {"width": "12", "length": "15", "unit": "ft"},
        },
    }
    body["payload"].update(payload)
    return body


class TestMethodAndAction:
    """Request validation: method, body, action, payload"""

    @pytest.mark.parametrize("method", ["get", "put", "patch", "delete", "options"])
    def test_non_post_is_405(self, client, method):
        resp = client.request(method.upper(), "/api/generate")
        assert resp.status_code == 405
        assert resp.json() == {"error": "Method not allowed"}

    def test_head_is_405(self, client):
        assert client.head("/api/generate").status_code == 405

    def test_unknown_action_is_400(self, client, use_backend):
        backend = use_backend()
        resp = client.post("/api/generate", json={"action": "makeCoffee", "payload": {}})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid action"}
        assert backend.requests == []

    def test_missing_action_is_400(self, client, use_backend):
        use_backend()
        resp = client.post("/api/generate", json={"payload": {}})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid action"

    def test_invalid_json_body_is_400(self, client, use_backend):
        use_backend()
        resp = client.post(
            "/api/generate", content=b"{not json", headers={"Content-Type": "application/json"}
        )
        assert resp.status_code == 400
        assert "error" in resp.json()

    def test_malformed_payload_is_400(self, client, use_backend, png_base64):
        use_backend()
        body = design_ideas_body(png_base64)
        del body["payload"]["style"]
        resp = client.post("/api/generate", json=body)
        assert resp.status_code == 400
        assert resp.json()["error"].startswith("Invalid payload")
        assert "style" in resp.json()["error"]

    def test_invalid_base64_is_400(self, client, use_backend):
        backend = use_backend()
        resp = client.post("/api/generate", json=design_ideas_body("%%% not base64 %%%"))
        assert resp.status_code == 400
        assert backend.requests == []

    def test_oversized_image_is_413(self, client, use_backend, png_base64):
        use_backend()
        with patch.object(generate_mod.settings, "max_upload_size_mb", 0):
            resp = client.post("/api/generate", json=design_ideas_body(png_base64))
        assert resp.status_code == 413
        assert "too large" in resp.json()["error"]


class TestConfiguration:
    def test_missing_api_key_is_500_for_every_request(self, client):
        with (
            patch.object(gateway_mod, "_gateway", None),
            patch.object(gateway_mod.settings, "gemini_api_key", ""),
        ):
            resp = client.post("/api/generate", json={"action": "makeCoffee", "payload": {}})
        assert resp.status_code == 500
        assert resp.json()["error"].startswith("Server error: ")
        assert "GEMINI_API_KEY" in resp.json()["error"]

    def test_configuration_error_mapped_to_500(self, client):
        with patch.object(generate_mod, "get_gateway", side_effect=ConfigurationError("no key")):
            resp = client.post("/api/generate", json={"action": "generateMorePalettes", "payload": {}})
        assert resp.status_code == 500
        assert resp.json() == {"error": "Server error: no key"}


class TestGenerateDesignIdeas:
    def test_returns_plan(self, client, use_backend, png_base64):
        backend = use_backend(json_response(plan_data()))
        resp = client.post("/api/generate", json=design_ideas_body(png_base64))

        assert resp.status_code == 200
        body = resp.json()
        assert body["wallColor"] == {"color": "Soft Off-White", "accent": "Charcoal Gray"}
        assert len(body["alternativePalettes"]) == 3
        assert "12 feet wide by 15 feet long" in backend.requests[0].parts[1].text

    def test_empty_dimensions_skip_size_clause(self, client, use_backend, png_base64):
        backend = use_backend(json_response(plan_data()))
        body = design_ideas_body(png_base64, dimensions={"width": "", "length": "", "unit": "ft"})
        resp = client.post("/api/generate", json=body)

        assert resp.status_code == 200
        assert "approximately" not in backend.requests[0].parts[1].text

    def test_data_url_prefix_accepted(self, client, use_backend, png_base64):
        use_backend(json_response(plan_data()))
        resp = client.post(
            "/api/generate", json=design_ideas_body(f"data:image/png;base64,{png_base64}")
        )
        assert resp.status_code == 200

    def test_non_json_model_output_is_500(self, client, use_backend, png_base64):
        use_backend(text_response("Sorry, I can only chat."))
        resp = client.post("/api/generate", json=design_ideas_body(png_base64))
        assert resp.status_code == 500
        assert resp.json()["error"].startswith("Server error: ")

    def test_upstream_failure_is_500_with_message(self, client, use_backend, png_base64):
        use_backend(RuntimeError("quota exceeded"))
        resp = client.post("/api/generate", json=design_ideas_body(png_base64))
        assert resp.status_code == 500
        assert resp.json() == {"error": "Server error: quota exceeded"}


class TestGenerateRedesignedImage:
    def _body(self, png_base64, **payload):
        body = {
            "action": "generateRedesignedImage",
            "payload": {
                "designPlan": plan_data(),
                "style": "Modern",
                "roomType": "Living Room",
                "base64Image": png_base64,
            },
        }
        body["payload"].update(payload)
        return body

    def test_returns_base64_image(self, client, use_backend, png_base64):
        generated = make_png(color="green")
        use_backend(image_response(generated))
        resp = client.post("/api/generate", json=self._body(png_base64))

        assert resp.status_code == 200
        assert resp.json() == {"imageBytes": b64(generated)}

    def test_new_colors_reach_prompt(self, client, use_backend, png_base64):
        backend = use_backend(image_response(make_png()))
        resp = client.post(
            "/api/generate",
            json=self._body(png_base64, newColors={"color": "Midnight Blue", "accent": "Brass"}),
        )
        assert resp.status_code == 200
        assert '"Midnight Blue"' in backend.requests[0].parts[1].text

    def test_safety_block_message_in_error(self, client, use_backend, png_base64):
        use_backend(blocked_response(("VIOLENCE", True), ("SEXUAL", False)))
        resp = client.post("/api/generate", json=self._body(png_base64))

        assert resp.status_code == 500
        error = resp.json()["error"]
        assert error.startswith("Server error: Image generation was blocked by safety filters")
        assert "VIOLENCE" in error
        assert "SEXUAL" not in error


class TestGenerateMorePalettes:
    def test_returns_palette_list(self, client, use_backend):
        palettes = [
            {"color": "Dusty Rose", "accent": "Forest Green"},
            {"color": "Ice Blue", "accent": "Slate"},
            {"color": "Butter Yellow", "accent": "Burnt Orange"},
        ]
        backend = use_backend(json_response(palettes))
        resp = client.post(
            "/api/generate",
            json={"action": "generateMorePalettes", "payload": {"designPlan": plan_data(), "style": "Boho"}},
        )

        assert resp.status_code == 200
        assert resp.json() == palettes
        assert "- Soft Off-White & Charcoal Gray" in backend.requests[0].parts[0].text


class TestCatalogueRoutes:
    def test_styles(self, client):
        resp = client.get("/api/styles")
        assert resp.status_code == 200
        assert resp.json() == DESIGN_STYLES

    def test_room_types_include_exterior(self, client):
        resp = client.get("/api/room-types")
        assert resp.json() == ROOM_TYPES
        assert "Exterior" in resp.json()

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "healthy"
        assert "gemini_api_key_configured" in body
