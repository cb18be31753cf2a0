"""
Itinerary generation pipeline.

Screenshots and preferences go to a multimodal chat model which answers with a
JSON itinerary. The parsed itinerary is then enriched, best effort, with the
current weather and one generated image per item.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from app.core.enrichment import ItemImageEnrichment, WeatherEnrichment, gather_enrichments
from app.core.errors import UpstreamError
from app.core.llm_provider import LLMProvider
from app.core.prompts import build_messages
from app.core.schemas import ItineraryData, ItineraryItem, ItineraryRequest
from app.core.settings import Settings

logger = logging.getLogger(__name__)

FALLBACK_SUMMARY = (
    "Unable to fully process screenshots. Here's a basic itinerary based on your preferences."
)

# Only enrichment may set these
_ENRICHMENT_FIELDS = ("weather", "imageUrl", "image_url")


def parse_itinerary(content: str | None, start_date: str) -> ItineraryData | None:
    """
    Parse the model's JSON answer into an itinerary.

    Returns None when the content is not a JSON object with an ``items`` list
    or does not fit the itinerary shape. Item ids are made unique by position.
    """
    if not content:
        return None
    try:
        raw = json.loads(content)
    except (TypeError, ValueError) as e:
        logger.error(f"Failed to parse AI response: {e}")
        return None

    if not isinstance(raw, dict) or not isinstance(raw.get("items"), list):
        logger.error("Failed to parse AI response: missing items list")
        return None

    items: list[dict[str, Any]] = []
    for entry in raw["items"]:
        if not isinstance(entry, dict):
            logger.error("Failed to parse AI response: item is not an object")
            return None
        items.append({k: v for k, v in entry.items() if k not in _ENRICHMENT_FIELDS})

    try:
        itinerary = ItineraryData(
            date=raw.get("date") or start_date,
            summary=raw.get("summary") or "",
            items=[ItineraryItem.model_validate(item) for item in items],
        )
    except ValidationError as e:
        logger.error(f"Failed to parse AI response: {e.error_count()} schema errors")
        return None

    seen: set[str] = set()
    for position, item in enumerate(itinerary.items, start=1):
        if not item.id or item.id in seen:
            item.id = f"item-{position}"
        seen.add(item.id)
    return itinerary


def fallback_itinerary(start_date: str) -> ItineraryData:
    return ItineraryData(date=start_date, summary=FALLBACK_SUMMARY, items=[])


class ItineraryGenerator:
    """
    Turns one validated request into one itinerary.

    Args:
        settings: API keys, endpoints and limits
        llm: Chat provider; built from settings when omitted
        transport: Optional httpx transport for the weather/image calls
    """

    def __init__(
        self,
        settings: Settings,
        llm: Any | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self._llm = llm
        self._transport = transport

    @property
    def llm(self) -> Any:
        if self._llm is None:
            self._llm = LLMProvider(
                model=self.settings.itinerary_model,
                api_key=self.settings.ai_api_key,
                base_url=self.settings.ai_gateway_url,
            )
        return self._llm

    async def generate(self, request: ItineraryRequest) -> ItineraryData:
        logger.info(
            f"Processing itinerary request for: {request.location} "
            f"from {request.start_date} to {request.end_date}"
        )
        logger.info(f"Interests: {request.interests}")
        logger.info(f"Screenshot count: {len(request.screenshots)}")

        if not self.settings.ai_api_key:
            raise UpstreamError("LOVABLE_API_KEY not configured")

        logger.info("Calling AI gateway for screenshot analysis...")
        content = await self.llm.chat_async(
            build_messages(request), response_format={"type": "json_object"}
        )
        logger.info("AI response received")

        itinerary = parse_itinerary(content, request.start_date)
        if itinerary is None:
            itinerary = fallback_itinerary(request.start_date)

        async with httpx.AsyncClient(
            timeout=self.settings.http_timeout, transport=self._transport
        ) as client:
            weather = await WeatherEnrichment(client, self.settings, request.location).attempt()
            if weather:
                for item in itinerary.items:
                    item.weather = weather

            logger.info(f"Generating images for {len(itinerary.items)} activities...")
            image_urls = await gather_enrichments(
                [ItemImageEnrichment(client, self.settings, item) for item in itinerary.items],
                limit=self.settings.image_concurrency,
            )

        for item, image_url in zip(itinerary.items, image_urls):
            if image_url:
                item.image_url = image_url

        logger.info("Itinerary generation complete")
        return itinerary
