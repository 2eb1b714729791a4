"""CORS, request-id, and access-log middleware."""

import uuid
import time
import logging

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from estate_backend.core.config import settings

logger = logging.getLogger("estate_platform")

# Rejections worth surfacing above INFO in the access log.
_AUTH_REJECTIONS = (401, 403)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag every request/response with an id and log its outcome.

    An incoming ``X-Request-Id`` is kept so ids can be correlated across
    the dashboard and the API.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = time.time()

        response: Response = await call_next(request)

        duration = round((time.time() - start_time) * 1000, 2)
        response.headers["X-Request-Id"] = request_id
        response.headers["X-Response-Time-Ms"] = str(duration)

        level = logging.WARNING if response.status_code in _AUTH_REJECTIONS else logging.INFO
        logger.log(
            level,
            "[%s] %s %s %s %sms",
            request_id,
            request.method,
            request.url.path,
            response.status_code,
            duration,
        )
        return response


def setup_middleware(app: FastAPI) -> None:
    """Configure all middleware for the application."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(RequestIdMiddleware)
