"""Client-side orchestration of the makeover flows.

``MakeoverSession`` owns the current plan and image for one user. The primary
flow runs plan generation and then image generation; a failed image never
discards a good plan. Recolor and more-palettes are separate flows that only
run once a plan exists. Each flow has its own in-progress flag which the UI
uses to disable the control that started it.
"""
import base64
from enum import Enum
from typing import List, Optional

from ..constants import DESIGN_STYLES, ROOM_TYPES
from ..exceptions import SAFETY_BLOCK_PREFIX, ApiError
from ..models.schemas import ColorPalette, DesignPlan, RoomDimensions
from ..utils.logger import logger
from .api_client import DesignApiClient
from .feedback import FeedbackLog, MemoryStore, Rating

MISSING_INPUT_MESSAGE = "Please upload an image, select a room type, and a design style."
PLAN_FAILED_MESSAGE = (
    "Sorry, I couldn't generate a design plan. This can happen if the AI is under heavy load "
    "or if the image is unsuitable for analysis. Please try again in a few moments, or with a "
    "different photo."
)
IMAGE_FAILED_MESSAGE = (
    "I've created the design plan, but couldn't visualize the room. "
    "You can still see the ideas below!"
)
RECOLOR_FAILED_MESSAGE = (
    "Sorry, I couldn't visualize the new colors. The AI might be busy. "
    "Please try selecting them again in a moment."
)
PALETTES_FAILED_MESSAGE = (
    "Sorry, couldn't fetch more color ideas right now. The AI might be busy. "
    "Please try again in a bit."
)


class Phase(str, Enum):
    IDLE = "idle"
    PLAN_PENDING = "plan_pending"
    IMAGE_PENDING = "image_pending"
    COMPLETE = "complete"
    COMPLETE_DEGRADED = "complete_degraded"


def merge_palettes(existing: List[ColorPalette], new: List[ColorPalette]) -> List[ColorPalette]:
    """Append palettes from ``new`` that are not exact duplicates, keeping response order."""
    merged = list(existing)
    seen = {(p.color, p.accent) for p in existing}
    for palette in new:
        key = (palette.color, palette.accent)
        if key in seen:
            continue
        seen.add(key)
        merged.append(palette)
    return merged


def _image_failure_message(guidance: str, error: ApiError) -> str:
    # Safety blocks are shown as-is; other upstream text is only logged
    message = error.message
    if SAFETY_BLOCK_PREFIX in message:
        return f"{guidance} {message[message.index(SAFETY_BLOCK_PREFIX):]}"
    return guidance


class MakeoverSession:
    def __init__(self, client: DesignApiClient, feedback: Optional[FeedbackLog] = None):
        self.client = client
        self.feedback = feedback or FeedbackLog(MemoryStore())
        self.reset()

    def reset(self) -> None:
        """Back to a blank project with default selections."""
        self.room_type: str = ROOM_TYPES[0]
        self.style: str = DESIGN_STYLES[0]
        self.base64_image: Optional[str] = None
        self.dimensions = RoomDimensions()

        self.phase = Phase.IDLE
        self.plan: Optional[DesignPlan] = None
        self.generated_image: Optional[str] = None
        self.error: Optional[str] = None
        self.image_failed = False

        self.is_generating = False
        self.is_regenerating = False
        self.is_fetching_palettes = False
        self.feedback_submitted = False

    def set_image(self, raw: bytes) -> None:
        self.base64_image = base64.b64encode(raw).decode("ascii")

    @property
    def can_generate(self) -> bool:
        return bool(self.base64_image) and not self.is_generating

    @property
    def can_recolor(self) -> bool:
        return self.plan is not None and bool(self.base64_image) and not self.is_regenerating

    @property
    def can_fetch_palettes(self) -> bool:
        return self.plan is not None and not self.is_fetching_palettes

    @property
    def has_fatal_error(self) -> bool:
        return self.error is not None and self.plan is None

    def generate(self) -> None:
        """Primary flow: plan, then redesigned image."""
        if self.is_generating:
            logger.info("Generation already in progress; ignoring request")
            return
        if not self.can_generate or not self.style or not self.room_type:
            self.error = MISSING_INPUT_MESSAGE
            return

        self.is_generating = True
        self.error = None
        self.image_failed = False
        self.plan = None
        self.generated_image = None
        self.feedback_submitted = False
        self.phase = Phase.PLAN_PENDING

        try:
            try:
                plan = self.client.generate_design_ideas(
                    self.base64_image, self.style, self.dimensions, self.room_type
                )
            except ApiError as e:
                logger.error(f"Design plan generation failed: {e.message}")
                self.phase = Phase.IDLE
                self.error = PLAN_FAILED_MESSAGE
                return

            self.plan = plan
            self.phase = Phase.IMAGE_PENDING

            try:
                self.generated_image = self.client.generate_redesigned_image(
                    plan, self.style, self.room_type, self.base64_image
                )
            except ApiError as e:
                logger.error(f"Redesigned image generation failed, keeping the plan: {e.message}")
                self.phase = Phase.COMPLETE_DEGRADED
                self.image_failed = True
                self.error = _image_failure_message(IMAGE_FAILED_MESSAGE, e)
            else:
                self.phase = Phase.COMPLETE
        finally:
            self.is_generating = False

    def change_colors(self, new_colors: ColorPalette) -> None:
        """Recolor flow. The new wall color is kept even if the image call fails."""
        if not self.can_recolor:
            logger.info("Recolor requested without a plan or while regenerating; ignoring")
            return

        self.is_regenerating = True
        self.generated_image = None
        self.error = None
        self.image_failed = False
        self.plan = self.plan.model_copy(update={"wall_color": new_colors})

        try:
            self.generated_image = self.client.generate_redesigned_image(
                self.plan, self.style, self.room_type, self.base64_image, new_colors
            )
            self.phase = Phase.COMPLETE
        except ApiError as e:
            logger.error(f"Failed to regenerate image with new colors: {e.message}")
            self.phase = Phase.COMPLETE_DEGRADED
            self.image_failed = True
            self.error = _image_failure_message(RECOLOR_FAILED_MESSAGE, e)
        finally:
            self.is_regenerating = False

    def suggest_more_palettes(self) -> None:
        """Fetch three more palettes and append the ones not already listed."""
        if not self.can_fetch_palettes:
            logger.info("More palettes requested without a plan or while fetching; ignoring")
            return

        self.is_fetching_palettes = True
        self.error = None
        try:
            new_palettes = self.client.generate_more_palettes(self.plan, self.style)
            merged = merge_palettes(self.plan.alternative_palettes, new_palettes)
            logger.info(f"Added {len(merged) - len(self.plan.alternative_palettes)} new palettes")
            self.plan = self.plan.model_copy(update={"alternative_palettes": merged})
        except ApiError as e:
            logger.error(f"Failed to fetch more palettes: {e.message}")
            self.error = PALETTES_FAILED_MESSAGE
        finally:
            self.is_fetching_palettes = False

    def submit_feedback(self, rating: Rating, comment: str = "") -> bool:
        if self.plan is None:
            return False
        try:
            self.feedback.record(rating, comment, self.plan)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to save feedback: {e}")
            return False
        self.feedback_submitted = True
        return True
