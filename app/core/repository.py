from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any

from pymongo import DESCENDING, MongoClient

from app.core.schemas import Trip, TripCreate
from app.core.settings import get_settings

logger = logging.getLogger(__name__)


class TripRepository:
    """User-scoped storage of generated itineraries."""

    def __init__(self, collection: Any):
        self.trips_collection = collection

    def save_trip(self, user_id: str, trip: TripCreate) -> Trip:
        trip_doc = {
            "id": f"trip_{uuid.uuid4().hex[:12]}",
            "user_id": user_id,
            "destination": trip.destination,
            "start_date": trip.start_date,
            "end_date": trip.end_date,
            "interests": list(trip.interests),
            "itinerary": trip.itinerary.model_dump(mode="json", by_alias=True, exclude_none=True),
            "created_at": datetime.now(timezone.utc),
        }
        # insert_one adds _id to the dict it is given
        self.trips_collection.insert_one(dict(trip_doc))
        logger.info(f"Saved trip {trip_doc['id']} for user {user_id}")
        return Trip.model_validate(trip_doc)

    def list_trips(self, user_id: str) -> list[Trip]:
        """Trips for a user, newest first."""
        cursor = self.trips_collection.find({"user_id": user_id}).sort("created_at", DESCENDING)
        return [self._to_trip(doc) for doc in cursor]

    def get_trip(self, user_id: str, trip_id: str) -> Trip | None:
        doc = self.trips_collection.find_one({"id": trip_id, "user_id": user_id})
        if doc is None:
            return None
        return self._to_trip(doc)

    @staticmethod
    def _to_trip(doc: dict[str, Any]) -> Trip:
        doc = dict(doc)
        doc.pop("_id", None)  # Remove MongoDB ObjectId
        return Trip.model_validate(doc)


@lru_cache
def get_trip_repository() -> TripRepository:
    settings = get_settings()
    # MongoClient connects lazily; the first query surfaces connection errors
    client = MongoClient(
        settings.mongodb_uri,
        serverSelectionTimeoutMS=5000,
        connectTimeoutMS=10000,
        socketTimeoutMS=20000,
    )
    collection = client[settings.database_name].trips
    try:
        collection.create_index([("user_id", 1), ("created_at", DESCENDING)])
        collection.create_index("id", unique=True)
    except Exception as index_error:
        logger.warning(f"Index creation failed (continuing without indexes): {index_error}")
    return TripRepository(collection)
