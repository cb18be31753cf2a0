import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.core.errors import AppError, ProcessingError, validation_failed_from
from app.core.itinerary_generator import ItineraryGenerator
from app.core.schemas import ItineraryRequest
from app.core.security import require_authorization_header
from app.core.settings import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["itineraries"])


def get_itinerary_generator(settings: Settings = Depends(get_settings)) -> ItineraryGenerator:
    return ItineraryGenerator(settings)


@router.post("/generate-itinerary")
async def generate_itinerary(
    request: Request,
    generator: ItineraryGenerator = Depends(get_itinerary_generator),
) -> JSONResponse:
    """
    Build a one-day itinerary from screenshots and preferences.

    Order of checks:
    1. Authorization header present (401 otherwise, body is not read)
    2. Body validated as ItineraryRequest (400 with per-field details)
    3. Generation; any failure past this point is a generic 500
    """
    require_authorization_header(request)

    try:
        raw_input = await request.json()
        itinerary_request = ItineraryRequest.model_validate(raw_input)
    except ValidationError as e:
        raise validation_failed_from(e) from e
    except ValueError as e:
        logger.error(f"Error in generate-itinerary: unreadable body: {e}")
        raise ProcessingError() from e

    try:
        itinerary = await generator.generate(itinerary_request)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error in generate-itinerary: {e}", exc_info=True)
        raise ProcessingError() from e

    return JSONResponse(content=itinerary.to_response())
