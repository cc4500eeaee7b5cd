"""Request ID middleware — unique ID per request for tracing.

Learn: Every request gets a UUID, either from the incoming
X-Request-ID header (for distributed tracing) or auto-generated.
The ID is bound to structlog's contextvars so it appears in all
log entries for that request, and returned in the response header.

Unexpected exceptions are turned into the generic internal_error
response here, inside the middleware stack, so a 500 still passes
back through SecurityHeadersMiddleware and carries its request id.
The app-level Exception handler only sees failures raised above this
point (rate limiter, CORS).
"""

import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from teamdesk.errors import InternalError

logger = structlog.get_logger()


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Generate and propagate a unique request ID."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        try:
            response: Response = await call_next(request)
        except Exception:
            logger.exception("teamdesk.unhandled_error")
            err = InternalError()
            response = JSONResponse(status_code=err.status_code, content=err.to_dict())

        response.headers["X-Request-ID"] = request_id
        return response
