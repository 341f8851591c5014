from civo_images.schemas.disk_image import (
    CreateDiskImageParams,
    CreateDiskImageResponse,
    DiskImage,
)

__all__ = ["DiskImage", "CreateDiskImageParams", "CreateDiskImageResponse"]
