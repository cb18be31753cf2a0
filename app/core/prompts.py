"""
Prompt builders for itinerary extraction and activity imagery.
"""

from typing import Any

from app.core.schemas import ItineraryItem, ItineraryRequest


def _format_flag(value: bool | None) -> str:
    if value is None:
        return "not specified"
    return "yes" if value else "no"


def build_system_prompt(request: ItineraryRequest) -> str:
    """
    Build the system instruction for the itinerary model.

    Embeds the user's interests, location, date, notes and whether the model
    may add its own suggestions, then pins the JSON shape of the answer.
    """
    return (
        "You are an expert travel planner. Analyze the provided screenshots and user "
        "preferences to create an optimized daily itinerary.\n\n"
        "Consider:\n"
        f"- User's interests: {', '.join(request.interests)}\n"
        f"- Location: {request.location}\n"
        f"- Date: {request.start_date}\n"
        f"- Additional notes: {request.additional_notes or 'None'}\n"
        f"- AI suggestions allowed: {_format_flag(request.allow_ai_suggestions)}\n\n"
        "Extract event details, venue information, and timing from screenshots. "
        "Create a realistic schedule that:\n"
        "1. Groups nearby activities\n"
        "2. Accounts for typical travel time between locations\n"
        "3. Balances activity types\n"
        "4. Includes breaks and meal times\n"
        "5. Respects typical venue hours\n\n"
        "Return a JSON object with:\n"
        "{\n"
        '  "date": "YYYY-MM-DD",\n'
        '  "summary": "Brief engaging summary of the day",\n'
        '  "items": [\n'
        "    {\n"
        '      "id": "unique-id",\n'
        '      "time": "HH:MM AM/PM",\n'
        '      "title": "Activity name",\n'
        '      "location": "Full address or location name",\n'
        '      "description": "Detailed description",\n'
        '      "category": "Art & Museums|Food & Dining|etc",\n'
        '      "duration": "X hours|X mins",\n'
        '      "travelTime": "X mins" (if not first item)\n'
        "    }\n"
        "  ]\n"
        "}"
    )


def build_messages(request: ItineraryRequest) -> list[dict[str, Any]]:
    """System turn plus a user turn with the instruction and every screenshot, in order."""
    user_content: list[dict[str, Any]] = [
        {
            "type": "text",
            "text": (
                f"Create an itinerary for {request.location} on {request.start_date}. "
                "Here are my screenshots of places/events I want to include:"
            ),
        }
    ]
    user_content.extend(
        {"type": "image_url", "image_url": {"url": screenshot}}
        for screenshot in request.screenshots
    )
    return [
        {"role": "system", "content": build_system_prompt(request)},
        {"role": "user", "content": user_content},
    ]


def build_image_prompt(item: ItineraryItem) -> str:
    return (
        f"A high-quality, vibrant travel photograph representing: {item.title} at "
        f"{item.location}. {item.description}. Style: professional travel photography, "
        "colorful, engaging, 16:9 aspect ratio."
    )
