from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from typing import List

from ..config import settings
from ..constants import DESIGN_STYLES, ROOM_TYPES
from ..exceptions import MakeoverError, MethodNotAllowedError, ValidationError
from ..models.schemas import (
    ACTIONS,
    DesignIdeasRequest,
    GenerationRequest,
    ImageResult,
    MorePalettesRequest,
    RedesignedImageRequest,
    generation_request_adapter,
)
from ..services.gateway import GenerationGateway, get_gateway
from ..utils.image import decode_image, encode_image
from ..utils.logger import logger

router = APIRouter(prefix="/api", tags=["generate"])


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("/styles", response_model=List[str])
async def get_styles():
    """Available design styles"""
    return DESIGN_STYLES


@router.get("/room-types", response_model=List[str])
async def get_room_types():
    """Available room types ("Exterior" switches to the facade prompt)"""
    return ROOM_TYPES


async def parse_generation_request(request: Request) -> GenerationRequest:
    """Read the body and resolve it to one of the three request variants."""
    try:
        body = await request.json()
    except ValueError:
        raise ValidationError("Request body must be valid JSON")

    if not isinstance(body, dict) or body.get("action") not in ACTIONS:
        raise ValidationError("Invalid action")

    try:
        return generation_request_adapter.validate_python(body)
    except PydanticValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ValidationError(f"Invalid payload: {details}")


async def dispatch(gateway: GenerationGateway, generation_request: GenerationRequest):
    """Run the requested action and return its JSON-ready result."""
    match generation_request:
        case DesignIdeasRequest(payload=payload):
            image = decode_image(payload.base64_image, settings.max_upload_size_mb)
            plan = await gateway.generate_design_ideas(
                image, payload.style, payload.room_type, payload.dimensions
            )
            return plan.to_wire()
        case RedesignedImageRequest(payload=payload):
            image = decode_image(payload.base64_image, settings.max_upload_size_mb)
            image_data = await gateway.generate_redesigned_image(
                payload.design_plan, payload.style, payload.room_type, image, payload.new_colors
            )
            return ImageResult(image_bytes=encode_image(image_data)).to_wire()
        case MorePalettesRequest(payload=payload):
            palettes = await gateway.generate_more_palettes(payload.design_plan, payload.style)
            return [palette.to_wire() for palette in palettes]
    raise ValidationError("Invalid action")


@router.post("/generate")
async def generate(request: Request):
    """Single entry point for generateDesignIdeas, generateRedesignedImage, generateMorePalettes"""
    action = None
    try:
        # Missing credentials fail every request, whatever the body
        gateway = get_gateway()

        generation_request = await parse_generation_request(request)
        action = generation_request.action
        logger.info(f"Generate requested: {action}")

        result = await dispatch(gateway, generation_request)

        logger.info(f"{action} completed")
        return JSONResponse(content=result)

    except ValidationError as e:
        logger.warning(f"Rejected generate request ({action or 'unknown action'}): {e.message}")
        return error_response(e.status_code, e.message)
    except MakeoverError as e:
        logger.error(f"{action} failed: {type(e).__name__}: {e.message}")
        return error_response(500, f"Server error: {e.message}")
    except Exception as e:
        logger.error(f"{action} failed unexpectedly: {type(e).__name__}: {str(e)}", exc_info=True)
        return error_response(500, f"Server error: {str(e)}")


@router.api_route(
    "/generate",
    methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"],
    include_in_schema=False,
)
async def generate_wrong_method(request: Request):
    error = MethodNotAllowedError("Method not allowed")
    logger.warning(f"{request.method} /api/generate rejected")
    return error_response(error.status_code, error.message)
