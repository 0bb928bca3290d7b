"""Media domain models — pydantic v2 data types.

A ``RawFile`` is the stored, unprocessed file a caller hands to the
registry.  Handlers turn it into a ``Media`` record; thumbnails are
``Media`` records of type image tagged with a size code.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, PositiveInt


class MediaType(StrEnum):
    """Built-in media type keys."""

    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"


class RawFile(BaseModel):
    """A stored file as seen by the registry. Owned by the caller."""

    id: str
    mime: str
    path: str = ""
    filename: str = ""
    disk: str = "local"
    size: int = 0
    origin_id: str | None = None
    options: dict[str, Any] = Field(default_factory=dict)

    @property
    def origin_key(self) -> str:
        """Id of the original file this one belongs to."""
        return self.origin_id or self.id


class MediaMeta(BaseModel):
    """Handler-computed metadata for a stored file."""

    file_id: str
    width: int | None = None
    height: int | None = None
    duration: float | None = None
    code: str | None = None
    extra: dict[str, Any] = Field(default_factory=dict)


class Media(BaseModel):
    """A file after a handler has processed it."""

    type: str
    file: RawFile
    meta: MediaMeta | None = None
    raw_derives: list[RawFile] = Field(default_factory=list)

    @property
    def id(self) -> str:
        return self.file.id

    def get_type(self) -> str:
        return self.type

    def get_origin_key(self) -> str:
        return self.file.origin_key

    def get_raw_derives(self) -> list[RawFile]:
        return list(self.raw_derives)

    def get_meta(self) -> MediaMeta | None:
        return self.meta


class Thumbnail(Media):
    """An image derived from another media record at a given size."""

    type: str = MediaType.IMAGE
    code: str


class Dimension(BaseModel):
    """Target box for a thumbnail."""

    width: PositiveInt
    height: PositiveInt

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)


@dataclass
class ThumbnailResult:
    """Outcome of generating one thumbnail size."""

    code: str
    thumbnail: Thumbnail | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.thumbnail is not None


@dataclass
class DeriveOutcome:
    """A derived file and the media built from it, if it was supported."""

    file: RawFile
    media: Media | None = None

    @property
    def skipped(self) -> bool:
        return self.media is None
