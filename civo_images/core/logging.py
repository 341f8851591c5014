"""
Structured JSON logging for applications embedding the disk image client.

Records emitted by the client, by logger:

    civo_images.services.disk_image_service
        DEBUG    "Disk images listed"            include_custom, total, visible
        DEBUG    "Disk image fetched"            image_id
        WARNING  "Ambiguous disk image search"   search, matches
        WARNING  "Disk image search matched nothing"  search
        INFO     "Disk image created"            image_id, image_name, distribution, version
        INFO     "Disk image deleted"            image_id
    civo_images.core.hooks
        DEBUG    "Civo API response"             method, path, status_code
    civo_images.core.exceptions
        DEBUG    "HTTP error classified"         status_code, api_code, error_code
    civo_images.core.versioning
        DEBUG    "Malformed disk image version"  version

Records emitted inside an API call carry that call's ``request_id``. Bind
``request_id_var`` around a service call to tag its service records as well.
"""

import logging
from contextvars import ContextVar

from pythonjsonlogger.json import JsonFormatter as _JsonFormatter

from civo_images.config import settings

# Bound per API call by HttpTransport; "-" outside a call unless the caller binds one
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class _RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


class _ClientJsonFormatter(_JsonFormatter):
    """Tags every record with the client name, version and environment."""

    def add_fields(
        self,
        log_record: dict[str, object],
        record: logging.LogRecord,
        message_dict: dict[str, object],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record.setdefault("service", settings.app_name)
        log_record.setdefault("version", settings.app_version)
        log_record.setdefault("env", settings.env)


def configure_logging() -> None:
    """Route every client record to stderr as one JSON object per line.

    The client never calls this itself. Applications call it once at startup;
    it replaces the root handlers, logs at DEBUG when ``settings.debug`` is
    set and INFO otherwise, and keeps httpx and httpcore at WARNING so that
    the client's own "Civo API response" record is the only per-request line.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(
        _ClientJsonFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s %(request_id)s",
            datefmt="%Y-%m-%dT%H:%M:%SZ",
        )
    )
    handler.addFilter(_RequestIdFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if settings.debug else logging.INFO)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
