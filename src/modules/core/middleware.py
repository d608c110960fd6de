import re
import time
import uuid
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def _request_id(request: HttpRequest) -> str:
    incoming = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
    if _VALID_REQUEST_ID.match(incoming):
        return incoming
    return str(uuid.uuid4())


class CorrelationIdMiddleware:
    """Tag every log line of a request with one correlation id.

    The id comes from the caller's ``X-Request-ID`` when it is a short
    token, otherwise a fresh UUID4.  It is bound to structlog's
    contextvars together with the method and path, so service-layer
    events (``checkout.started``, ``order.transition_applied``...) can be
    traced back to the HTTP call, and echoed in the response header.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = _request_id(request)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            correlation_id=cid,
            method=request.method,
            path=request.path,
        )

        started = time.monotonic()
        response = self.get_response(request)
        logger.info(
            "http.request",
            status_code=response.status_code,
            duration_ms=round((time.monotonic() - started) * 1000, 2),
        )

        response[REQUEST_ID_HEADER] = cid
        return response
