from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from civo_images.config import Settings, settings
from civo_images.core.filters import NameExclusionPolicy
from civo_images.infra.transport.base import TransportBase
from civo_images.infra.transport.http_client import HttpTransport
from civo_images.services.disk_image_service import DiskImageService


def get_transport(config: Settings | None = None) -> TransportBase:
    """Returns the HTTP transport configured from settings."""
    return HttpTransport(config or settings)


def get_disk_image_service(
    transport: TransportBase,
    policy: NameExclusionPolicy | None = None,
) -> DiskImageService:
    return DiskImageService(transport, policy=policy)


@asynccontextmanager
async def create_disk_image_service(
    config: Settings | None = None,
) -> AsyncIterator[DiskImageService]:
    """Yields a ready service and closes its transport on exit."""
    transport = get_transport(config)
    try:
        yield get_disk_image_service(transport)
    finally:
        await transport.aclose()
