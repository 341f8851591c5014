from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


def _null_as_default(cls: type[BaseModel], value: object, info: ValidationInfo) -> object:
    """Decode JSON ``null`` in an always-sent field as that field's default."""
    if value is None:
        return cls.model_fields[info.field_name].default
    return value


class DiskImage(BaseModel):
    """A disk image as listed by the catalog. Never mutated client-side."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    version: str = ""
    state: str = ""
    distribution: str = ""
    description: str = ""
    label: str = ""
    initial_user: str | None = None
    os: str | None = None
    disk_image_url: str | None = None
    disk_image_size_bytes: int | None = None
    logo_url: str | None = None
    created_at: datetime | None = None
    # Users sharing an account can each upload images
    created_by: str | None = None
    distribution_default: bool = False

    model_config = ConfigDict(frozen=True, extra="ignore")

    null_as_default = field_validator(
        "version",
        "state",
        "distribution",
        "description",
        "label",
        "distribution_default",
        mode="before",
    )(_null_as_default)


class CreateDiskImageParams(BaseModel):
    name: str
    distribution: str
    version: str
    source: str
    os: str | None = None
    initial_user: str | None = None
    region: str | None = None
    image_sha256: str
    image_md5: str
    logo_base64: str | None = Field(None, description="Base64-encoded logo image")
    image_size_bytes: int = Field(..., description="Size of the image in bytes")

    def to_payload(self) -> dict[str, object]:
        """JSON body for the create request, with unset optional fields omitted."""
        return self.model_dump(mode="json", exclude_none=True)


class CreateDiskImageResponse(BaseModel):
    """Server answer to a create call, including the pre-signed upload URL."""

    id: str = Field(..., min_length=1)
    name: str | None = None
    distribution: str | None = None
    version: str | None = None
    os: str | None = None
    region: str | None = None
    status: str | None = None
    initial_user: str | None = None
    disk_image_url: str | None = None
    disk_image_size_bytes: int | None = None
    logo_url: str | None = None
    image_size: int | None = None
    created_at: datetime | None = None
    created_by: str | None = None
    distribution_default: bool = False

    model_config = ConfigDict(frozen=True, extra="ignore")

    null_as_default = field_validator("distribution_default", mode="before")(_null_as_default)
