"""
Cross-origin policy.

Requests without an Origin header pass. Otherwise the origin must be in the
allow-list, or be a localhost origin outside production; anything else is
answered with a 500 before it reaches a route.
"""
import re

from fastapi.middleware import Middleware
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from config import settings
from logger import get_logger

logger = get_logger("cors")

LOCALHOST_ORIGIN = r"https?://localhost(:\d+)?"


def is_allowed_origin(origin: str) -> bool:
    if origin in settings.allowed_origins:
        return True
    return not settings.is_production and re.fullmatch(LOCALHOST_ORIGIN, origin) is not None


class OriginGuardMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("origin")
        if origin and not is_allowed_origin(origin):
            logger.warning(f"Blocked by CORS: {origin}")
            return JSONResponse(
                status_code=500,
                content={"message": "Something went wrong!", "error": "Not allowed by CORS"},
            )
        return await call_next(request)


def cors_middleware():
    """CORS headers and preflights first, then the guard for simple requests."""
    return [
        Middleware(
            CORSMiddleware,
            allow_origins=settings.allowed_origins,
            allow_origin_regex=None if settings.is_production else LOCALHOST_ORIGIN,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization"],
        ),
        Middleware(OriginGuardMiddleware),
    ]
