"""
Request logging middleware.

Logs method, path and client IP for every request, plus the JSON body with
any password replaced. It never changes or rejects the request.
"""
import json
from datetime import datetime, timezone

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from logger import get_logger

logger = get_logger("requests")

HIDDEN = "[HIDDEN]"


def redact(body):
    if isinstance(body, dict) and body.get("password"):
        return {**body, "password": HIDDEN}
    return body


def parse_body(raw: bytes):
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return raw.decode("utf-8", errors="replace")


def request_line(request: Request) -> str:
    timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    ip = request.client.host if request.client else "-"
    path = request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"
    return f"[{timestamp}] {request.method} {path} - IP: {ip}"


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        logger.info(request_line(request))
        body = parse_body(await request.body())
        if body:
            logger.info(f"Body: {redact(body)}")
        return await call_next(request)
