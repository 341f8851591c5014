"""
Disk image service: catalog access, fuzzy resolution and version selection.

Sits on top of the transport layer. Every catalog view goes through the
injected exclusion policy; lookups are a single catalog fetch followed by an
in-memory scan.
"""

import logging

from pydantic import TypeAdapter, ValidationError

from civo_images.core.exceptions import (
    DecodeError,
    DiskImageNotFoundError,
    MultipleMatchesError,
    ZeroMatchesError,
)
from civo_images.core.filters import NameExclusionPolicy
from civo_images.core.versioning import compare_versions
from civo_images.infra.transport.base import TransportBase
from civo_images.schemas.disk_image import (
    CreateDiskImageParams,
    CreateDiskImageResponse,
    DiskImage,
)

logger = logging.getLogger(__name__)

DISK_IMAGES_PATH = "/v2/disk_images"

_catalog_adapter = TypeAdapter(list[DiskImage])


class DiskImageService:
    def __init__(
        self,
        transport: TransportBase,
        policy: NameExclusionPolicy | None = None,
    ) -> None:
        self._transport = transport
        self._policy = policy or NameExclusionPolicy()

    async def list(self, include_custom: bool = False) -> list[DiskImage]:
        path = DISK_IMAGES_PATH
        if include_custom:
            path += "?type=custom"

        body = await self._transport.get(path)
        try:
            images = _catalog_adapter.validate_json(body)
        except ValidationError as exc:
            raise DecodeError("disk image list", exc) from exc

        visible = self._policy.apply(images)
        logger.debug(
            "Disk images listed",
            extra={
                "include_custom": include_custom,
                "total": len(images),
                "visible": len(visible),
            },
        )
        return visible

    async def get(self, image_id: str) -> DiskImage:
        body = await self._transport.get(f"{DISK_IMAGES_PATH}/{image_id}")
        try:
            image = DiskImage.model_validate_json(body)
        except ValidationError as exc:
            raise DecodeError("disk image", exc) from exc
        logger.debug("Disk image fetched", extra={"image_id": image_id})
        return image

    async def find(self, search: str) -> DiskImage:
        """Find a disk image by its name or ID, in full or in part.

        An exact match on name or ID always wins, and a later exact match
        replaces an earlier one. Without an exact match, a partial (substring)
        match is accepted only when it is the only one.
        """
        images = await self.list()

        exact_match = False
        partial_matches = 0
        result: DiskImage | None = None

        for image in images:
            if image.name == search or image.id == search:
                exact_match = True
                result = image
            elif search in image.name or search in image.id:
                if not exact_match:
                    result = image
                    partial_matches += 1

        if result is not None and (exact_match or partial_matches == 1):
            return result
        if partial_matches > 1:
            logger.warning(
                "Ambiguous disk image search",
                extra={"search": search, "matches": partial_matches},
            )
            raise MultipleMatchesError(search)
        logger.warning("Disk image search matched nothing", extra={"search": search})
        raise ZeroMatchesError(search)

    async def get_by_name(self, name: str) -> DiskImage:
        for image in await self.list():
            if image.name == name:
                return image
        raise DiskImageNotFoundError(name)

    async def get_most_recent_distro(self, name: str) -> DiskImage:
        """Return the highest-versioned image whose name contains ``name``.

        Ties keep the image listed first.
        """
        highest: DiskImage | None = None

        for image in await self.list():
            if name not in image.name:
                continue
            if highest is None or compare_versions(highest.version, image.version) < 0:
                highest = image

        if highest is None:
            raise DiskImageNotFoundError(name)
        return highest

    async def create(self, params: CreateDiskImageParams) -> CreateDiskImageResponse:
        body = await self._transport.post(DISK_IMAGES_PATH, params.to_payload())
        try:
            created = CreateDiskImageResponse.model_validate_json(body)
        except ValidationError as exc:
            raise DecodeError("disk image creation", exc) from exc
        logger.info(
            "Disk image created",
            extra={
                "image_id": created.id,
                "image_name": params.name,
                "distribution": params.distribution,
                "version": params.version,
            },
        )
        return created

    async def delete(self, image_id: str) -> None:
        await self._transport.delete(f"{DISK_IMAGES_PATH}/{image_id}")
        logger.info("Disk image deleted", extra={"image_id": image_id})
