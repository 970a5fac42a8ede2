from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel
from typing import Annotated, List, Literal, Optional, Union


class CamelModel(BaseModel):
    """Wire models use camelCase keys; Python code uses snake_case attributes."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class RoomDimensions(CamelModel):
    """Optional room size entered by the user"""
    width: Optional[float] = None
    length: Optional[float] = None
    unit: Literal["ft", "m"] = "ft"

    @field_validator("width", "length", mode="before")
    @classmethod
    def _empty_is_missing(cls, value):
        # The form sends "" for an empty input box
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def is_specified(self) -> bool:
        # Zero or negative sizes are treated as not entered
        return (
            self.width is not None and self.width > 0
            and self.length is not None and self.length > 0
        )

    @property
    def unit_name(self) -> str:
        return "feet" if self.unit == "ft" else "meters"


class ColorPalette(CamelModel):
    """Primary wall color and accent color"""
    color: str
    accent: str


class FurnitureSuggestion(CamelModel):
    name: str
    description: str
    placement: str
    estimated_price: float
    model_url: Optional[str] = None


class EstimatedCost(CamelModel):
    min: float
    max: float
    currency: str


class DesignPlan(CamelModel):
    """Structured makeover plan for one room/style combination"""
    analysis: str
    design_rationale: str
    wall_color: ColorPalette
    lighting: str
    flooring: str
    furniture_suggestions: List[FurnitureSuggestion]
    estimated_cost: EstimatedCost
    alternative_palettes: List[ColorPalette]


palette_list_adapter = TypeAdapter(List[ColorPalette])


# ---------------------------------------------------------------------------
# POST /api/generate request union, one variant per action
# ---------------------------------------------------------------------------

class DesignIdeasPayload(CamelModel):
    base64_image: str
    style: str
    room_type: str
    dimensions: Optional[RoomDimensions] = None


class RedesignedImagePayload(CamelModel):
    design_plan: DesignPlan
    style: str
    room_type: str
    base64_image: str
    new_colors: Optional[ColorPalette] = None


class MorePalettesPayload(CamelModel):
    design_plan: DesignPlan
    style: str


class DesignIdeasRequest(BaseModel):
    action: Literal["generateDesignIdeas"]
    payload: DesignIdeasPayload


class RedesignedImageRequest(BaseModel):
    action: Literal["generateRedesignedImage"]
    payload: RedesignedImagePayload


class MorePalettesRequest(BaseModel):
    action: Literal["generateMorePalettes"]
    payload: MorePalettesPayload


GenerationRequest = Annotated[
    Union[DesignIdeasRequest, RedesignedImageRequest, MorePalettesRequest],
    Field(discriminator="action"),
]

generation_request_adapter = TypeAdapter(GenerationRequest)

ACTIONS = ("generateDesignIdeas", "generateRedesignedImage", "generateMorePalettes")


class ImageResult(CamelModel):
    """Redesigned image, base64 encoded"""
    image_bytes: str
