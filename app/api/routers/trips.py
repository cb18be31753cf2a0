from fastapi import APIRouter, Depends, Path, status

from app.core.errors import NotFound
from app.core.repository import TripRepository, get_trip_repository
from app.core.schemas import Trip, TripCreate
from app.core.security import get_current_user_id

router = APIRouter(prefix="/trips", tags=["trips"])


@router.post(
    "", response_model=Trip, response_model_exclude_none=True, status_code=status.HTTP_201_CREATED
)
def save_trip(
    trip: TripCreate,
    user_id: str = Depends(get_current_user_id),
    repository: TripRepository = Depends(get_trip_repository),
) -> Trip:
    """Save a generated itinerary as a trip of the signed-in user."""
    return repository.save_trip(user_id, trip)


@router.get("", response_model=list[Trip], response_model_exclude_none=True)
def list_trips(
    user_id: str = Depends(get_current_user_id),
    repository: TripRepository = Depends(get_trip_repository),
) -> list[Trip]:
    """Past trips of the signed-in user, newest first."""
    return repository.list_trips(user_id)


@router.get("/{trip_id}", response_model=Trip, response_model_exclude_none=True)
def get_trip(
    trip_id: str = Path(..., min_length=1),
    user_id: str = Depends(get_current_user_id),
    repository: TripRepository = Depends(get_trip_repository),
) -> Trip:
    trip = repository.get_trip(user_id, trip_id)
    if trip is None:
        raise NotFound("Trip not found")
    return trip
