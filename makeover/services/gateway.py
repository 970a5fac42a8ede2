"""Generation gateway: the only code that talks to the generative backend.

Each operation builds one ``ModelRequest``, makes exactly one backend call and
either returns a validated result or raises a single typed error. There are no
retries and no caching here; callers decide how failures are presented.
"""
import asyncio
import json
from typing import List, Optional, Protocol

from pydantic import ValidationError as PydanticValidationError

from ..config import Settings, settings
from ..exceptions import (
    SAFETY_BLOCK_PREFIX,
    ConfigurationError,
    NoImageError,
    ParseError,
    UpstreamError,
)
from ..models.generation import ContentPart, GenerationConfig, ModelRequest, ModelResponse
from ..models.schemas import (
    ColorPalette,
    DesignPlan,
    RoomDimensions,
    palette_list_adapter,
)
from ..utils.image import detect_mime_type
from ..utils.logger import logger
from . import prompts
from .gemini_backend import GeminiBackend

IMAGE_MODALITIES = ["IMAGE", "TEXT"]
SAFETY_FINISH_REASONS = {"SAFETY", "IMAGE_SAFETY", "PROHIBITED_CONTENT", "BLOCKLIST"}


class GenerativeBackend(Protocol):
    def generate_content(self, request: ModelRequest) -> ModelResponse:
        ...


def describe_missing_image(response: ModelResponse) -> str:
    """Explain why a response carries no image.

    Priority: safety block (with blocked categories), then any text the model
    returned instead of drawing, then a non-safety stop reason, then generic.
    """
    candidate = response.first_candidate
    if candidate is None:
        return "The AI returned no valid candidates in the response."

    if candidate.finish_reason in SAFETY_FINISH_REASONS:
        blocked = [rating.category for rating in candidate.safety_ratings if rating.blocked]
        return (
            f"{SAFETY_BLOCK_PREFIX} for the following reasons: "
            f"{', '.join(blocked) or 'unknown'}."
        )

    text = " ".join(part.text.strip() for part in candidate.parts if part.text and part.text.strip())
    if text:
        return f'The AI returned a text message instead of an image: "{text}"'

    if candidate.finish_reason:
        return (
            "The AI did not return a redesigned image. "
            f"The process stopped unexpectedly. Reason: {candidate.finish_reason}."
        )
    return "The AI did not return a redesigned image."


def first_image(response: ModelResponse) -> Optional[bytes]:
    candidate = response.first_candidate
    if candidate is None:
        return None
    for part in candidate.parts:
        if part.inline_data:
            return part.inline_data
    return None


def plan_bound_issues(plan: DesignPlan) -> List[str]:
    """Constraints the schema asks for but the model is free to ignore."""
    issues = []
    count = len(plan.furniture_suggestions)
    if not prompts.FURNITURE_MIN_ITEMS <= count <= prompts.FURNITURE_MAX_ITEMS:
        issues.append(
            f"expected {prompts.FURNITURE_MIN_ITEMS}-{prompts.FURNITURE_MAX_ITEMS} furniture suggestions, got {count}"
        )
    if len(plan.alternative_palettes) != prompts.PALETTE_COUNT:
        issues.append(
            f"expected {prompts.PALETTE_COUNT} alternative palettes, got {len(plan.alternative_palettes)}"
        )
    if plan.estimated_cost.min > plan.estimated_cost.max:
        issues.append(
            f"estimated cost min {plan.estimated_cost.min} exceeds max {plan.estimated_cost.max}"
        )
    negative = [item.name for item in plan.furniture_suggestions if item.estimated_price < 0]
    if negative:
        issues.append(f"negative price for: {', '.join(negative)}")
    return issues


class GenerationGateway:
    """The three generation operations behind POST /api/generate"""

    def __init__(self, backend: GenerativeBackend, config: Settings = settings):
        self.backend = backend
        self.config = config

    async def generate_design_ideas(
        self,
        image: bytes,
        style: str,
        room_type: str,
        dimensions: Optional[RoomDimensions] = None,
    ) -> DesignPlan:
        prompt = prompts.build_plan_prompt(style, room_type, dimensions)
        request = ModelRequest(
            model=self.config.plan_model,
            parts=[ContentPart.from_image(image, detect_mime_type(image)), ContentPart.from_text(prompt.text)],
            config=GenerationConfig(
                response_schema=prompt.schema,
                temperature=self.config.plan_temperature,
            ),
        )
        response = await self._call("generateDesignIdeas", request)
        data = self._parse_json("generateDesignIdeas", response)

        try:
            plan = DesignPlan.model_validate(data)
        except PydanticValidationError as e:
            logger.error(f"Design plan failed validation: {e}")
            raise ParseError(f"The AI returned a design plan with missing or invalid fields: {e.error_count()} error(s)")

        self._check_bounds("generateDesignIdeas", plan_bound_issues(plan))
        logger.info(
            f"Design plan generated: {len(plan.furniture_suggestions)} furniture items, "
            f"{len(plan.alternative_palettes)} alternative palettes"
        )
        return plan

    async def generate_redesigned_image(
        self,
        plan: DesignPlan,
        style: str,
        room_type: str,
        image: bytes,
        new_colors: Optional[ColorPalette] = None,
    ) -> bytes:
        text = prompts.build_image_prompt(plan, style, room_type, new_colors)
        request = ModelRequest(
            model=self.config.image_model,
            parts=[ContentPart.from_image(image, detect_mime_type(image)), ContentPart.from_text(text)],
            config=GenerationConfig(response_modalities=list(IMAGE_MODALITIES)),
        )
        response = await self._call("generateRedesignedImage", request)

        image_data = first_image(response)
        if image_data is None:
            message = describe_missing_image(response)
            logger.error(f"Image generation failed: {message} Full response: {response!r}")
            raise NoImageError(message)

        logger.info(f"Redesigned image generated ({len(image_data)} bytes)")
        return image_data

    async def generate_more_palettes(self, plan: DesignPlan, style: str) -> List[ColorPalette]:
        prompt = prompts.build_more_palettes_prompt(plan, style)
        request = ModelRequest(
            model=self.config.palette_model,
            parts=[ContentPart.from_text(prompt.text)],
            config=GenerationConfig(
                response_schema=prompt.schema,
                temperature=self.config.palette_temperature,
            ),
        )
        response = await self._call("generateMorePalettes", request)
        data = self._parse_json("generateMorePalettes", response)

        try:
            palettes = palette_list_adapter.validate_python(data)
        except PydanticValidationError as e:
            logger.error(f"Palette list failed validation: {e}")
            raise ParseError("The AI returned palettes with missing or invalid fields")

        if len(palettes) != prompts.PALETTE_COUNT:
            self._check_bounds(
                "generateMorePalettes",
                [f"expected {prompts.PALETTE_COUNT} palettes, got {len(palettes)}"],
            )
        return palettes

    async def _call(self, operation: str, request: ModelRequest) -> ModelResponse:
        logger.info(f"{operation}: calling {request.model}")
        try:
            return await asyncio.to_thread(self.backend.generate_content, request)
        except Exception as e:
            logger.error(f"{operation} backend call failed: {type(e).__name__}: {e}", exc_info=True)
            raise UpstreamError(str(e) or type(e).__name__)

    @staticmethod
    def _parse_json(operation: str, response: ModelResponse):
        text = response.text.strip()
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"{operation} returned non-JSON text: {text[:200]!r}")
            raise ParseError(f"The AI response could not be parsed as JSON: {e.msg}")

    def _check_bounds(self, operation: str, issues: List[str]) -> None:
        if not issues:
            return
        if self.config.strict_plan_validation:
            raise ParseError(f"The AI response violated the requested shape: {'; '.join(issues)}")
        logger.warning(f"{operation} response accepted with issues: {'; '.join(issues)}")


# Singleton instance
_gateway = None


def get_gateway() -> GenerationGateway:
    """Return the shared GenerationGateway, creating it on first use."""
    global _gateway
    if _gateway is None:
        if not settings.gemini_api_key:
            raise ConfigurationError("GEMINI_API_KEY environment variable is not set.")
        _gateway = GenerationGateway(GeminiBackend(settings.gemini_api_key))
    return _gateway
