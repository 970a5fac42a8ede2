from google import genai
from google.genai import types
from typing import Any, List, Optional

from ..models.generation import (
    Candidate,
    ContentPart,
    ModelRequest,
    ModelResponse,
    SafetyRating,
)
from ..utils.logger import logger


def _enum_name(value: Any) -> Optional[str]:
    """SDK enums (FinishReason, HarmCategory) → plain strings such as 'SAFETY'."""
    if value is None:
        return None
    return str(getattr(value, "value", value))


class GeminiBackend:
    """Google Gemini API adapter (google-genai SDK)"""

    def __init__(self, api_key: str, client: Optional[genai.Client] = None):
        self.client = client or genai.Client(api_key=api_key)
        logger.info("GeminiBackend initialized")

    def generate_content(self, request: ModelRequest) -> ModelResponse:
        """Run one blocking generate_content call."""
        response = self.client.models.generate_content(
            model=request.model,
            contents=[self._to_sdk_part(part) for part in request.parts],
            config=self._to_sdk_config(request),
        )
        return self._from_sdk_response(response)

    @staticmethod
    def _to_sdk_part(part: ContentPart) -> types.Part:
        if part.inline_data is not None:
            return types.Part.from_bytes(data=part.inline_data, mime_type=part.mime_type)
        return types.Part.from_text(text=part.text or "")

    @staticmethod
    def _to_sdk_config(request: ModelRequest) -> types.GenerateContentConfig:
        config = request.config
        kwargs = {}
        if config.response_schema is not None:
            kwargs["response_mime_type"] = "application/json"
            kwargs["response_schema"] = config.response_schema
        if config.response_modalities:
            kwargs["response_modalities"] = list(config.response_modalities)
        if config.temperature is not None:
            kwargs["temperature"] = config.temperature
        return types.GenerateContentConfig(**kwargs)

    @staticmethod
    def _from_sdk_response(response: types.GenerateContentResponse) -> ModelResponse:
        candidates: List[Candidate] = []
        for sdk_candidate in response.candidates or []:
            parts: List[ContentPart] = []
            content = sdk_candidate.content
            for sdk_part in (content.parts if content and content.parts else []):
                inline = sdk_part.inline_data
                if inline is not None and inline.data:
                    parts.append(ContentPart.from_image(inline.data, inline.mime_type or "image/png"))
                elif sdk_part.text:
                    parts.append(ContentPart.from_text(sdk_part.text))

            ratings = [
                SafetyRating(category=_enum_name(rating.category) or "UNKNOWN", blocked=bool(rating.blocked))
                for rating in (sdk_candidate.safety_ratings or [])
            ]
            candidates.append(
                Candidate(
                    parts=parts,
                    finish_reason=_enum_name(sdk_candidate.finish_reason),
                    safety_ratings=ratings,
                )
            )
        return ModelResponse(candidates=candidates)
