import re
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

MAX_LOCATION_LENGTH = 200
MAX_NOTES_LENGTH = 1000
MAX_INTERESTS = 10
MAX_SCREENSHOTS = 10


class ItineraryRequest(BaseModel):
    """Body of a generate-itinerary request. Field names are camelCase on the wire."""

    model_config = ConfigDict(populate_by_name=True, strict=True)

    location: str
    start_date: str = Field(..., alias="startDate")
    end_date: str = Field(..., alias="endDate")
    interests: list[str]
    screenshots: list[str] = Field(..., description="Data-URI encoded images")
    additional_notes: str | None = Field(None, alias="additionalNotes")
    allow_ai_suggestions: bool | None = Field(None, alias="allowAISuggestions")

    @field_validator("additional_notes", "allow_ai_suggestions", mode="before")
    @classmethod
    def reject_explicit_null(cls, value: Any, info: ValidationInfo) -> Any:
        # Optional means "may be omitted", not "may be null"
        if value is None:
            expected = "string" if info.field_name == "additional_notes" else "boolean"
            raise PydanticCustomError("null_value", f"Expected {expected}, received null")
        return value

    @field_validator("location")
    @classmethod
    def check_location(cls, value: str) -> str:
        if len(value) < 1:
            raise PydanticCustomError("too_short", "Location is required")
        if len(value) > MAX_LOCATION_LENGTH:
            raise PydanticCustomError(
                "too_long", "Location must be less than 200 characters"
            )
        return value

    @field_validator("start_date")
    @classmethod
    def check_start_date(cls, value: str) -> str:
        if not DATE_PATTERN.match(value):
            raise PydanticCustomError(
                "date_format", "Start date must be in YYYY-MM-DD format"
            )
        return value

    @field_validator("end_date")
    @classmethod
    def check_end_date(cls, value: str) -> str:
        if not DATE_PATTERN.match(value):
            raise PydanticCustomError("date_format", "End date must be in YYYY-MM-DD format")
        return value

    @field_validator("interests")
    @classmethod
    def check_interests(cls, value: list[str]) -> list[str]:
        if len(value) > MAX_INTERESTS:
            raise PydanticCustomError("too_long", "Maximum 10 interests allowed")
        return value

    @field_validator("screenshots")
    @classmethod
    def check_screenshots(cls, value: list[str]) -> list[str]:
        if len(value) > MAX_SCREENSHOTS:
            raise PydanticCustomError("too_long", "Maximum 10 screenshots allowed")
        return value

    @field_validator("additional_notes")
    @classmethod
    def check_notes(cls, value: str | None) -> str | None:
        if value is not None and len(value) > MAX_NOTES_LENGTH:
            raise PydanticCustomError(
                "too_long", "Additional notes must be less than 1000 characters"
            )
        return value


class ItineraryItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    time: str = Field("", description="Local time label, e.g., '09:00 AM'")
    title: str = ""
    location: str = ""
    description: str = ""
    category: str = ""
    duration: str = ""
    weather: str | None = Field(None, description="Set by weather enrichment only")
    travel_time: str | None = Field(
        None, alias="travelTime", description="Travel time from the previous item"
    )
    image_url: str | None = Field(
        None, alias="imageUrl", description="Set by image enrichment only"
    )

    @field_validator(
        "id", "time", "title", "location", "description", "category", "duration", mode="before"
    )
    @classmethod
    def coerce_text(cls, value: Any) -> Any:
        # Models occasionally emit numbers (e.g. a bare duration); keep them as text
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("travel_time", mode="before")
    @classmethod
    def coerce_travel_time(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class ItineraryData(BaseModel):
    date: str
    summary: str
    items: list[ItineraryItem] = Field(default_factory=list)

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# =============================================================================
# Trip persistence schemas
# =============================================================================


class TripCreate(BaseModel):
    """A generated itinerary saved against the signed-in user."""

    destination: str = Field(..., min_length=1, max_length=MAX_LOCATION_LENGTH)
    start_date: str = Field(..., pattern=DATE_PATTERN.pattern)
    end_date: str = Field(..., pattern=DATE_PATTERN.pattern)
    interests: list[str] = Field(default_factory=list, max_length=MAX_INTERESTS)
    itinerary: ItineraryData


class Trip(TripCreate):
    id: str
    user_id: str
    created_at: datetime
