import asyncio
import json

import httpx
import pytest

from app.core.settings import Settings


def make_settings(**overrides) -> Settings:
    values = {
        "ai_api_key": "test-gateway-key",
        "ai_gateway_url": "https://gateway.test/v1",
        "itinerary_model": "google/gemini-2.5-flash",
        "image_model": "google/gemini-2.5-flash-image-preview",
        "openweather_api_key": "",
        "openweather_url": "https://weather.test/data/2.5/weather",
        "http_timeout": 5.0,
        "image_concurrency": 0,
        "jwt_secret": "test-jwt-secret",
    }
    values.update(overrides)
    return Settings(**values)


class FakeLLM:
    """Stands in for LLMProvider; records every call."""

    def __init__(self, content: str | None = None, error: Exception | None = None):
        self.content = content
        self.error = error
        self.calls: list[dict] = []

    async def chat_async(self, messages, **kwargs):
        self.calls.append({"messages": messages, **kwargs})
        if self.error is not None:
            raise self.error
        return self.content


def image_response(url: str) -> dict:
    return {
        "choices": [
            {
                "message": {
                    "role": "assistant",
                    "content": "Here is your image",
                    "images": [{"type": "image_url", "image_url": {"url": url}}],
                }
            }
        ]
    }


class FakeUpstream:
    """
    httpx handler for the weather and image endpoints.

    ``images`` maps an item title to a URL (success), an int (error status) or
    an exception (transport failure). ``delays`` maps a title to seconds to
    wait before answering.
    """

    def __init__(self, weather=None, weather_status=200, images=None, delays=None):
        self.weather = weather
        self.weather_status = weather_status
        self.images = images or {}
        self.delays = delays or {}
        self.requests: list[httpx.Request] = []

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "weather.test":
            return httpx.Response(self.weather_status, json=self.weather or {})

        prompt = json.loads(request.content)["messages"][0]["content"]
        for title, outcome in self.images.items():
            if f"representing: {title} at" not in prompt:
                continue
            await asyncio.sleep(self.delays.get(title, 0))
            if isinstance(outcome, Exception):
                raise outcome
            if isinstance(outcome, int):
                return httpx.Response(outcome, json={"error": "rate limited"})
            return httpx.Response(200, json=image_response(outcome))
        return httpx.Response(
            200, json={"choices": [{"message": {"role": "assistant", "content": "No image"}}]}
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def weather_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == "weather.test"]

    def image_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == "gateway.test"]


class FakeCursor:
    def __init__(self, docs):
        self.docs = docs

    def sort(self, key, direction):
        return FakeCursor(sorted(self.docs, key=lambda d: d[key], reverse=direction == -1))

    def __iter__(self):
        return iter(self.docs)


class FakeCollection:
    """The subset of a pymongo collection the trip repository uses."""

    def __init__(self):
        self.docs: list[dict] = []

    def insert_one(self, doc):
        doc["_id"] = len(self.docs) + 1
        self.docs.append(doc)

    def find(self, query):
        return FakeCursor([dict(d) for d in self.docs if _matches(d, query)])

    def find_one(self, query):
        for d in self.docs:
            if _matches(d, query):
                return dict(d)
        return None


def _matches(doc, query):
    return all(doc.get(k) == v for k, v in query.items())


SAMPLE_ITINERARY = {
    "date": "2024-06-01",
    "summary": "A day of art and food in Lisbon",
    "items": [
        {
            "id": "1",
            "time": "09:00 AM",
            "title": "Gulbenkian Museum",
            "location": "Av. de Berna 45A, Lisbon",
            "description": "Art collection spanning millennia",
            "category": "Art & Museums",
            "duration": "2 hours",
        },
        {
            "id": "2",
            "time": "12:00 PM",
            "title": "Time Out Market",
            "location": "Av. 24 de Julho 49, Lisbon",
            "description": "Food hall with local vendors",
            "category": "Food & Dining",
            "duration": "1 hour",
            "travelTime": "20 mins",
        },
        {
            "id": "3",
            "time": "03:00 PM",
            "title": "Belem Tower",
            "location": "Av. Brasilia, Lisbon",
            "description": "16th century fortification",
            "category": "History",
            "duration": "90 mins",
            "travelTime": "25 mins",
        },
    ],
}


def valid_request_body(**overrides) -> dict:
    body = {
        "location": "Lisbon, Portugal",
        "startDate": "2024-06-01",
        "endDate": "2024-06-03",
        "interests": ["Art & Museums", "Food & Dining"],
        "screenshots": ["data:image/png;base64,AAAA", "data:image/jpeg;base64,BBBB"],
        "additionalNotes": "Vegetarian lunch please",
        "allowAISuggestions": True,
    }
    body.update(overrides)
    return body


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def sample_itinerary_json() -> str:
    return json.dumps(SAMPLE_ITINERARY)
