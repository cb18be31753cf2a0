import os

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


class Settings(BaseModel):
    ai_api_key: str = os.getenv("LOVABLE_API_KEY", "")
    ai_gateway_url: str = os.getenv("AI_GATEWAY_URL", "https://ai.gateway.lovable.dev/v1")
    itinerary_model: str = os.getenv("ITINERARY_MODEL", "google/gemini-2.5-flash")
    image_model: str = os.getenv("IMAGE_MODEL", "google/gemini-2.5-flash-image-preview")
    openweather_api_key: str = os.getenv("OPENWEATHER_API_KEY", "")
    openweather_url: str = os.getenv(
        "OPENWEATHER_URL", "https://api.openweathermap.org/data/2.5/weather"
    )
    http_timeout: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "60"))
    # 0 means no cap on concurrent image generation calls per request
    image_concurrency: int = int(os.getenv("IMAGE_GENERATION_CONCURRENCY", "0"))
    mongodb_uri: str = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    database_name: str = os.getenv("DATABASE_NAME", "trip_planner")
    jwt_secret: str = os.getenv("SUPABASE_JWT_SECRET", "")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def get_settings() -> Settings:
    return Settings()
