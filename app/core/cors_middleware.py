"""
CORS Middleware

Adds permissive CORS headers to every response and answers pre-flight
requests directly, so error responses carry the headers too.
"""

import logging
from typing import Callable

from fastapi import Request
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.errors import ProcessingError

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)

        try:
            response = await call_next(request)
        except Exception as e:
            # Unhandled errors would otherwise reach Starlette's plain-text 500
            logger.error(f"Unhandled error on {request.url.path}: {e}", exc_info=True)
            error = ProcessingError()
            return JSONResponse(
                status_code=error.status_code, content=error.to_content(), headers=CORS_HEADERS
            )

        response.headers.update(CORS_HEADERS)
        return response
