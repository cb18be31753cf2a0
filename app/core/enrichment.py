"""
Best-effort enrichments applied to an already valid itinerary.

An enrichment never fails the request: ``attempt()`` returns the value it
produced or ``None``, logging whatever went wrong along the way.
"""

from __future__ import annotations

import asyncio
import logging
import math
from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, Sequence, TypeVar

import httpx

from app.core.prompts import build_image_prompt
from app.core.schemas import ItineraryItem
from app.core.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Enrichment(ABC, Generic[T]):
    @abstractmethod
    async def attempt(self) -> Optional[T]:
        """Produce the enrichment value, or ``None`` if it could not be produced."""


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class WeatherEnrichment(Enrichment[str]):
    """Current conditions for a location as ``"<Condition>, <N>°C"``."""

    def __init__(self, client: httpx.AsyncClient, settings: Settings, location: str):
        self.client = client
        self.settings = settings
        self.location = location

    async def attempt(self) -> Optional[str]:
        if not self.settings.openweather_api_key:
            return None

        logger.info(f"[Weather] Fetching weather data for '{self.location}'")
        try:
            response = await self.client.get(
                self.settings.openweather_url,
                params={
                    "q": self.location,
                    "appid": self.settings.openweather_api_key,
                    "units": "metric",
                },
            )
            if not response.is_success:
                logger.warning(f"[Weather] Lookup failed with status {response.status_code}")
                return None

            data = response.json()
            condition = data["weather"][0]["main"]
            temperature = _round_half_up(float(data["main"]["temp"]))
        except Exception as e:
            logger.error(f"[Weather] Weather API error: {e}")
            return None

        description = f"{condition}, {temperature}°C"
        logger.info(f"[Weather] Weather data added: {description}")
        return description


class ItemImageEnrichment(Enrichment[str]):
    """A generated photograph for a single itinerary item."""

    def __init__(self, client: httpx.AsyncClient, settings: Settings, item: ItineraryItem):
        self.client = client
        self.settings = settings
        self.item = item

    def _payload(self) -> dict[str, Any]:
        return {
            "model": self.settings.image_model,
            "messages": [{"role": "user", "content": build_image_prompt(self.item)}],
            "modalities": ["image", "text"],
        }

    async def attempt(self) -> Optional[str]:
        try:
            response = await self.client.post(
                f"{self.settings.ai_gateway_url.rstrip('/')}/chat/completions",
                headers={"Authorization": f"Bearer {self.settings.ai_api_key}"},
                json=self._payload(),
            )
            if response.is_success:
                image_url = _extract_image_url(response.json())
                if image_url:
                    logger.info(f"[Images] Image generated for: {self.item.title}")
                    return image_url
        except Exception as e:
            logger.error(f"[Images] Error generating image for {self.item.title}: {e}")
            return None

        logger.info(f"[Images] Failed to generate image for: {self.item.title}")
        return None


def _extract_image_url(data: Any) -> str | None:
    """Dig ``choices[0].message.images[0].image_url.url`` out of a gateway response."""
    try:
        url = data["choices"][0]["message"]["images"][0]["image_url"]["url"]
    except (KeyError, IndexError, TypeError):
        return None
    return url if isinstance(url, str) and url else None


async def gather_enrichments(
    enrichments: Sequence[Enrichment[T]], limit: int = 0
) -> list[Optional[T]]:
    """
    Run every enrichment concurrently and wait for all of them.

    Results line up with ``enrichments`` by position, whatever order the
    attempts finish in. An exception escaping one attempt only empties that slot.

    Args:
        enrichments: Enrichments to attempt
        limit: Maximum number of attempts in flight at once (0 = no limit)

    Returns:
        One value or ``None`` per enrichment
    """
    semaphore = asyncio.Semaphore(limit) if limit > 0 else None

    async def _run(enrichment: Enrichment[T]) -> Optional[T]:
        if semaphore is None:
            return await enrichment.attempt()
        async with semaphore:
            return await enrichment.attempt()

    results = await asyncio.gather(
        *(_run(enrichment) for enrichment in enrichments), return_exceptions=True
    )

    gathered: list[Optional[T]] = []
    for enrichment, result in zip(enrichments, results):
        if isinstance(result, BaseException):
            logger.error(f"Enrichment {type(enrichment).__name__} raised: {result!r}")
            gathered.append(None)
        else:
            gathered.append(result)
    return gathered
