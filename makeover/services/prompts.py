"""Prompt and response-schema builders for the three generation actions.

Everything here is a pure function of its typed inputs. Optional or empty
inputs drop their clause from the prompt instead of inserting placeholder
text, and nothing in this module raises on odd input.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..constants import EXTERIOR_ROOM_TYPE
from ..models.schemas import ColorPalette, DesignPlan, RoomDimensions

FURNITURE_MIN_ITEMS = 3
FURNITURE_MAX_ITEMS = 5
PALETTE_COUNT = 3

IMAGE_OUTPUT_INSTRUCTION = (
    "Output: Return ONLY a single, final image without any surrounding text or explanation."
)


@dataclass(frozen=True)
class Prompt:
    text: str
    schema: Optional[Dict[str, Any]] = None


def _clean(value: Optional[str]) -> str:
    """Collapse whitespace and neutralise double quotes in user/model supplied text."""
    if not value:
        return ""
    return " ".join(str(value).split()).replace('"', "'")


def _format_number(value: float) -> str:
    return f"{value:g}"


def _numbered(steps: List[str]) -> str:
    return "\n".join(f"{index}. {step}" for index, step in enumerate(steps, start=1))


# ---------------------------------------------------------------------------
# Response schemas (google-genai Schema dict form)
# ---------------------------------------------------------------------------

def _palette_schema(color_hint: str, accent_hint: str) -> Dict[str, Any]:
    return {
        "type": "OBJECT",
        "properties": {
            "color": {"type": "STRING", "description": color_hint},
            "accent": {"type": "STRING", "description": accent_hint},
        },
        "required": ["color", "accent"],
    }


DESIGN_PLAN_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "analysis": {
            "type": "STRING",
            "description": (
                "A brief analysis of the current room's layout, lighting and existing decor. "
                "If room dimensions were provided, mention how they influence the design."
            ),
        },
        "designRationale": {
            "type": "STRING",
            "description": (
                "Why the proposed colors, furniture and lighting work together to achieve the "
                "requested style, referencing principles such as balance, harmony and focal points."
            ),
        },
        "wallColor": {
            "description": "The recommended primary wall color palette.",
            **_palette_schema(
                "The primary wall color (e.g. 'Soft Off-White').",
                "An accent wall color (e.g. 'Charcoal Gray').",
            ),
        },
        "lighting": {
            "type": "STRING",
            "description": "Concise lighting fixture suggestions (e.g. 'Arched floor lamp and recessed lights').",
        },
        "flooring": {
            "type": "STRING",
            "description": "Concise flooring recommendation (e.g. 'Light oak hardwood floors').",
        },
        "furnitureSuggestions": {
            "type": "ARRAY",
            "description": (
                "3-5 key furniture and decor items, scaled for the room size if one was provided."
            ),
            "min_items": FURNITURE_MIN_ITEMS,
            "max_items": FURNITURE_MAX_ITEMS,
            "items": {
                "type": "OBJECT",
                "properties": {
                    "name": {"type": "STRING", "description": "Item name (e.g. 'Plush Sectional Sofa')."},
                    "description": {
                        "type": "STRING",
                        "description": "The item's style, material and color.",
                    },
                    "placement": {"type": "STRING", "description": "Where to place the item in the room."},
                    "estimatedPrice": {"type": "NUMBER", "description": "Estimated price in USD."},
                    "modelUrl": {
                        "type": "STRING",
                        "nullable": True,
                        "description": (
                            "A publicly accessible URL to a 3D model of the item (GLTF or OBJ). "
                            "Use a realistic placeholder such as "
                            "'https://models.example.com/modern_sofa.gltf' if none is known."
                        ),
                    },
                },
                "required": ["name", "description", "placement", "estimatedPrice"],
            },
        },
        "estimatedCost": {
            "type": "OBJECT",
            "description": "Estimated budget range for the whole makeover.",
            "properties": {
                "min": {"type": "NUMBER", "description": "Minimum estimated cost."},
                "max": {"type": "NUMBER", "description": "Maximum estimated cost."},
                "currency": {"type": "STRING", "description": "Currency code, e.g. 'USD'."},
            },
            "required": ["min", "max", "currency"],
        },
        "alternativePalettes": {
            "type": "ARRAY",
            "description": "Exactly 3 alternative palettes that also fit the style but set a different mood.",
            "min_items": PALETTE_COUNT,
            "max_items": PALETTE_COUNT,
            "items": _palette_schema("The alternative primary wall color.", "The alternative accent color."),
        },
    },
    "required": [
        "analysis",
        "designRationale",
        "wallColor",
        "lighting",
        "flooring",
        "furnitureSuggestions",
        "estimatedCost",
        "alternativePalettes",
    ],
}

MORE_PALETTES_SCHEMA: Dict[str, Any] = {
    "type": "ARRAY",
    "description": "Exactly 3 new and distinct color palettes, each with a primary and an accent color.",
    "min_items": PALETTE_COUNT,
    "max_items": PALETTE_COUNT,
    "items": _palette_schema("The new primary wall color.", "The new accent wall color."),
}


# ---------------------------------------------------------------------------
# Prompt builders
# ---------------------------------------------------------------------------

def dimension_clause(dimensions: Optional[RoomDimensions]) -> str:
    """Size instruction, or an empty string unless both width and length are given."""
    if dimensions is None or not dimensions.is_specified:
        return ""
    unit = dimensions.unit_name
    return (
        f"The user has specified the room is approximately {_format_number(dimensions.width)} {unit} "
        f"wide by {_format_number(dimensions.length)} {unit} long. Scale the furniture suggestions "
        f"and layout advice for a room of this size and explicitly mention the size in your analysis."
    )


def build_plan_prompt(
    style: str,
    room_type: str,
    dimensions: Optional[RoomDimensions] = None,
) -> Prompt:
    """Instruction + schema for the structured design plan.

    The room photo itself travels as a separate image part next to this text.
    """
    style = _clean(style)
    room_type = _clean(room_type)

    room_clause = f", which is a {room_type}," if room_type else ""
    fit_clause = f" Every recommendation must be appropriate for a {room_type}." if room_type else ""

    intro = (
        f"You are a world-class interior designer with a keen eye for detail and aesthetics. "
        f"Analyze the provided room image{room_clause} and create a complete makeover plan in a "
        f'friendly, inspiring tone. The user wants a "{style}" style.{fit_clause}'
    )

    steps = [
        "Briefly analyze the current room's strengths and weaknesses.",
        "Propose a full makeover in the selected style"
        + (", keeping the given dimensions in mind." if dimension_clause(dimensions) else "."),
        "Give specific recommendations for the primary wall color palette, flooring and lighting.",
        f"Recommend {FURNITURE_MIN_ITEMS}-{FURNITURE_MAX_ITEMS} key furniture or decor items with "
        "detailed descriptions and placement suggestions, scaled correctly for the room. For each "
        "item provide a modelUrl pointing to a 3D model (GLTF or OBJ), or a realistic placeholder "
        "URL if no real model is known.",
        "Give a realistic total budget range (min and max) for the makeover and an estimated price "
        "for each furniture item. All monetary values are in USD.",
        f"Provide exactly {PALETTE_COUNT} alternative color palettes (primary and accent) that set a "
        "different mood while still fitting the requested style.",
        f'Explain in a design rationale why the suggestions form a cohesive "{style}" design, '
        "touching on balance, harmony or focal points.",
    ]

    sections = [intro]
    size = dimension_clause(dimensions)
    if size:
        sections.append(size)
    sections.append("Your tasks are:\n" + _numbered(steps))
    sections.append(
        "Return the output as JSON matching the provided schema. Keep descriptions vivid and helpful."
    )
    return Prompt(text="\n\n".join(sections), schema=DESIGN_PLAN_SCHEMA)


def is_exterior(room_type: Optional[str]) -> bool:
    return (room_type or "").strip().lower() == EXTERIOR_ROOM_TYPE.lower()


def build_image_prompt(
    plan: DesignPlan,
    style: str,
    room_type: str,
    new_colors: Optional[ColorPalette] = None,
) -> str:
    """Instruction for the photorealistic redesign of the uploaded photo."""
    palette = new_colors if new_colors is not None else plan.wall_color
    primary = _clean(palette.color)
    accent = _clean(palette.accent)
    style = _clean(style)
    lighting = _clean(plan.lighting)
    flooring = _clean(plan.flooring)
    furniture = ", ".join(
        name for name in (_clean(item.name) for item in plan.furniture_suggestions) if name
    )

    if is_exterior(room_type):
        task = f'Task: Redesign this building exterior in a photorealistic "{style}" style.'
        steps = []
        if primary:
            steps.append(
                f'Change the main color to "{primary}"'
                + (f' with "{accent}" accents.' if accent else ".")
            )
        steps.append(
            "Update the landscaping and replace outdoor fixtures"
            + (f", adding these outdoor items: {furniture}." if furniture else ".")
        )
        if lighting:
            steps.append(f'The lighting should be "{lighting}".')
        steps.append("IMPORTANT: Do not alter the building's core structure (walls, windows, roof).")
    else:
        room = _clean(room_type) or "room"
        task = f'Task: Redesign the interior of this {room} photorealistically in the "{style}" style.'
        steps = ["Remove ALL existing furniture, decor and items from the room."]
        if primary:
            steps.append(
                f'Change the wall color to "{primary}"'
                + (f' with "{accent}" accents.' if accent else ".")
            )
        if flooring:
            steps.append(f'Change the floor to "{flooring}".')
        if furniture:
            steps.append(
                f"Add the following new furniture, arranged in a natural and functional layout: {furniture}."
            )
        if lighting:
            steps.append(f'Adjust the lighting to be like "{lighting}".')
        steps.append(
            "IMPORTANT: Do not alter the room's core structure (doors, windows, architectural features)."
        )

    return "\n".join([task, "Instructions:", _numbered(steps), IMAGE_OUTPUT_INSTRUCTION])


def shown_palettes(plan: DesignPlan) -> List[ColorPalette]:
    """Every palette the user has already seen: the current wall color first."""
    return [plan.wall_color, *plan.alternative_palettes]


def build_more_palettes_prompt(plan: DesignPlan, style: str) -> Prompt:
    style = _clean(style)
    seen = "\n".join(f"- {_clean(p.color)} & {_clean(p.accent)}" for p in shown_palettes(plan))

    sections = [
        f"You are a color consultant for an interior design app. Based on the design analysis "
        f'below for a "{style}" themed room, generate exactly {PALETTE_COUNT} new and distinct '
        f"color palettes."
    ]
    analysis = _clean(plan.analysis)
    if analysis:
        sections.append(f"Design analysis: {analysis}")
    sections.append(
        "Important: the user has already seen the following palettes. Do not repeat any of them; "
        "provide completely different options that each suggest a different mood "
        "(for example one calming, one energetic, one sophisticated):\n" + seen
    )
    sections.append(
        "Return a JSON array of objects, each with a 'color' and an 'accent' property, "
        "matching the provided schema."
    )
    return Prompt(text="\n\n".join(sections), schema=MORE_PALETTES_SCHEMA)
