"""httpx event hooks and request correlation shared by every outgoing API request."""

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager

import httpx

from civo_images.core.logging import request_id_var

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


@contextmanager
def bound_request_id() -> Iterator[str]:
    """Binds the correlation ID for one API call.

    Behaviour:
    - If the caller has bound an ID in ``request_id_var``, that value is reused
      and left in place.
    - Otherwise a fresh UUID4 hex string is bound for the duration of the call
      only, so log records emitted while handling the response carry it and
      the next call gets a new one.
    """
    request_id = request_id_var.get()
    if request_id != "-":
        yield request_id
        return

    request_id = uuid.uuid4().hex
    token = request_id_var.set(request_id)
    try:
        yield request_id
    finally:
        request_id_var.reset(token)


async def attach_request_id(request: httpx.Request) -> None:
    request.headers[REQUEST_ID_HEADER] = request_id_var.get()


async def log_response(response: httpx.Response) -> None:
    request = response.request
    logger.debug(
        "Civo API response",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
        },
    )
