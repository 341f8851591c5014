import enum
import json
import logging

import httpx

logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    TRANSPORT = "transport"
    DECODE = "decode"
    ZERO_MATCHES = "zero_matches"
    MULTIPLE_MATCHES = "multiple_matches"
    NOT_FOUND = "not_found"


class DiskImageError(Exception):
    """Base client exception. Concrete subclasses set ``kind``."""

    kind: ErrorKind | None = None
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: object = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)


# --- Transport ---


class TransportError(DiskImageError):
    kind = ErrorKind.TRANSPORT
    error_code = "TRANSPORT_ERROR"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        api_code: str | None = None,
        reason: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.api_code = api_code
        self.reason = reason
        super().__init__(
            message,
            details={"status_code": status_code, "api_code": api_code, "reason": reason},
        )


class AuthenticationError(TransportError):
    error_code = "AUTHENTICATION_FAILED"


class ResourceNotFoundError(TransportError):
    error_code = "RESOURCE_NOT_FOUND"


class RateLimitedError(TransportError):
    error_code = "RATE_LIMITED"


class ServerError(TransportError):
    error_code = "SERVER_ERROR"


class APIError(TransportError):
    error_code = "API_ERROR"


class NetworkError(TransportError):
    error_code = "NETWORK_ERROR"


# --- Decode ---


class DecodeError(DiskImageError):
    kind = ErrorKind.DECODE
    error_code = "DECODE_ERROR"

    def __init__(self, entity: str, cause: Exception) -> None:
        super().__init__(
            f"Unable to decode {entity} response: {cause}",
            details={"entity": entity},
        )


# --- Lookup ---


class ZeroMatchesError(DiskImageError):
    kind = ErrorKind.ZERO_MATCHES
    error_code = "ZERO_MATCHES"

    def __init__(self, search: str) -> None:
        self.search = search
        super().__init__(f"unable to find {search}, zero matches", details={"search": search})


class MultipleMatchesError(DiskImageError):
    kind = ErrorKind.MULTIPLE_MATCHES
    error_code = "MULTIPLE_MATCHES"

    def __init__(self, search: str) -> None:
        self.search = search
        super().__init__(
            f"unable to find {search} because there were multiple matches",
            details={"search": search},
        )


class DiskImageNotFoundError(DiskImageError):
    kind = ErrorKind.NOT_FOUND
    error_code = "DISK_IMAGE_NOT_FOUND"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"{name} image not found", details={"name": name})


def _parse_error_body(response: httpx.Response) -> tuple[str | None, str | None]:
    """Extract Civo's ``{"code": ..., "reason": ...}`` pair from an error body."""
    try:
        body = json.loads(response.content)
    except ValueError:
        return None, None
    if not isinstance(body, dict):
        return None, None
    code = body.get("code")
    reason = body.get("reason")
    return (
        str(code) if code is not None else None,
        str(reason) if reason is not None else None,
    )


def classify_transport_error(exc: httpx.HTTPError) -> TransportError:
    """Map an httpx failure onto the transport error hierarchy."""
    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        status_code = response.status_code
        api_code, reason = _parse_error_body(response)
        message = f"{exc.request.method} {exc.request.url.path} failed with HTTP {status_code}"
        if reason:
            message = f"{message}: {reason}"

        error_cls: type[TransportError]
        if status_code in (401, 403):
            error_cls = AuthenticationError
        elif status_code == 404:
            error_cls = ResourceNotFoundError
        elif status_code == 429:
            error_cls = RateLimitedError
        elif status_code >= 500:
            error_cls = ServerError
        else:
            error_cls = APIError

        logger.debug(
            "HTTP error classified",
            extra={
                "status_code": status_code,
                "api_code": api_code,
                "error_code": error_cls.error_code,
            },
        )
        return error_cls(message, status_code=status_code, api_code=api_code, reason=reason)

    if isinstance(exc, httpx.RequestError):
        return NetworkError(f"{exc.request.method} {exc.request.url.path} failed: {exc}")

    return TransportError(str(exc))
