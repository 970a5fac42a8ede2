"""Client for the POST /api/generate contract.

Every method makes one request, parses the JSON result into the typed model
and raises ``ApiError`` for any non-2xx answer or unreadable body.
"""
import requests
from pydantic import ValidationError as PydanticValidationError
from typing import Any, Dict, List, Optional

from ..exceptions import ApiError
from ..models.schemas import ColorPalette, DesignPlan, RoomDimensions, palette_list_adapter
from ..utils.logger import logger


class DesignApiClient:
    def __init__(self, endpoint: str = "http://localhost:8000", session=None, timeout: Optional[float] = None):
        self.endpoint = endpoint.rstrip('/')
        self.api_url = f"{self.endpoint}/api/generate"
        # Anything with a requests-style post(url, json=..., timeout=...) works here
        self.session = session or requests.Session()
        # None: no client-side timeout, the transport default applies
        self.timeout = timeout

    def call(self, action: str, payload: Dict[str, Any]) -> Any:
        try:
            response = self.session.post(
                self.api_url,
                json={"action": action, "payload": payload},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Error calling API action {action!r}: {e}")
            raise ApiError(f"Could not reach the design API: {e}")

        try:
            result = response.json()
        except ValueError:
            result = None

        if not 200 <= response.status_code < 300:
            message = None
            if isinstance(result, dict):
                message = result.get("error")
            message = message or f"API request failed with status {response.status_code}"
            logger.error(f"Error calling API action {action!r}: {message}")
            raise ApiError(message, response.status_code)

        if result is None:
            raise ApiError("The design API returned a response that is not JSON", response.status_code)
        return result

    def generate_design_ideas(
        self,
        base64_image: str,
        style: str,
        dimensions: Optional[RoomDimensions],
        room_type: str,
    ) -> DesignPlan:
        payload = {"base64Image": base64_image, "style": style, "roomType": room_type}
        if dimensions is not None:
            payload["dimensions"] = dimensions.to_wire()

        result = self.call("generateDesignIdeas", payload)
        try:
            return DesignPlan.model_validate(result)
        except PydanticValidationError as e:
            logger.error(f"Unexpected design plan shape: {e}")
            raise ApiError("The design API returned an unexpected design plan")

    def generate_redesigned_image(
        self,
        plan: DesignPlan,
        style: str,
        room_type: str,
        base64_image: str,
        new_colors: Optional[ColorPalette] = None,
    ) -> str:
        """Returns the redesigned image as a base64 string."""
        payload = {
            "designPlan": plan.to_wire(),
            "style": style,
            "roomType": room_type,
            "base64Image": base64_image,
        }
        if new_colors is not None:
            payload["newColors"] = new_colors.to_wire()

        result = self.call("generateRedesignedImage", payload)
        image_bytes = result.get("imageBytes") if isinstance(result, dict) else None
        if not image_bytes:
            raise ApiError("API response did not include image data.")
        return image_bytes

    def generate_more_palettes(self, plan: DesignPlan, style: str) -> List[ColorPalette]:
        result = self.call("generateMorePalettes", {"designPlan": plan.to_wire(), "style": style})
        try:
            return palette_list_adapter.validate_python(result)
        except PydanticValidationError as e:
            logger.error(f"Unexpected palette list shape: {e}")
            raise ApiError("The design API returned an unexpected palette list")
