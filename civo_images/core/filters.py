from collections.abc import Iterable
from dataclasses import dataclass

from civo_images.schemas.disk_image import DiskImage

# Orchestration-specific image families hidden from every catalog view
RESERVED_NAME_SUBSTRINGS: tuple[str, ...] = ("k3s", "talos")


@dataclass(frozen=True)
class NameExclusionPolicy:
    """Drops disk images whose name contains any of the configured substrings.

    Matching is a case-sensitive substring test against ``DiskImage.name``.
    """

    substrings: tuple[str, ...] = RESERVED_NAME_SUBSTRINGS

    def excludes(self, image: DiskImage) -> bool:
        return any(substring in image.name for substring in self.substrings)

    def apply(self, images: Iterable[DiskImage]) -> list[DiskImage]:
        return [image for image in images if not self.excludes(image)]
