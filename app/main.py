import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from app.api.routers.itineraries import router as itineraries_router
from app.api.routers.trips import router as trips_router
from app.core.cors_middleware import CORSHeadersMiddleware
from app.core.errors import AppError, app_error_handler, request_validation_handler
from app.core.settings import get_settings

load_dotenv()


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    application = FastAPI(title="Trip Planner Backend")

    # Every response, errors included, carries the CORS headers
    application.add_middleware(CORSHeadersMiddleware)

    application.add_exception_handler(AppError, app_error_handler)
    application.add_exception_handler(RequestValidationError, request_validation_handler)

    application.include_router(itineraries_router)
    application.include_router(trips_router)

    @application.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
