"""Base class for type-specific media handlers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from fnmatch import fnmatchcase

from mediahub.media.models import Media, MediaMeta, RawFile
from mediahub.storage.base import Storage
from mediahub.storage.meta import MetaStore

logger = logging.getLogger(__name__)


class MediaHandler(ABC):
    """Base class for media handlers.

    A handler claims the MIME types matching its ``mimes`` patterns and
    turns stored files of those types into ``Media`` records.
    """

    media_type: str
    mimes: tuple[str, ...] = ()

    def __init__(self, *, storage: Storage, meta_store: MetaStore) -> None:
        self._storage = storage
        self._meta_store = meta_store

    def is_available(self, mime: str) -> bool:
        """Whether this handler can process files of ``mime``."""
        mime = (mime or "").strip().lower()
        if not mime:
            return False
        return any(fnmatchcase(mime, pattern) for pattern in self.mimes)

    def make(self, file: RawFile) -> Media:
        """Build a media record, computing and saving metadata if missing."""
        meta = self._meta_store.get(file.id)
        if meta is None:
            meta = self.extract_meta(file)
            self._meta_store.save(meta)
            logger.debug("Saved %s metadata for %s", self.media_type, file.id)
        return Media(
            type=self.media_type,
            file=file,
            meta=meta,
            raw_derives=self._storage.derives_of(file),
        )

    def make_model(self, file: RawFile) -> Media:
        """Build a media record from what is already stored. Never writes."""
        return Media(
            type=self.media_type,
            file=file,
            meta=self._meta_store.get(file.id),
            raw_derives=self._storage.derives_of(file),
        )

    def extract_meta(self, file: RawFile) -> MediaMeta:
        """Compute metadata for a file. Subclasses add type-specific fields."""
        return MediaMeta(file_id=file.id)

    @abstractmethod
    def get_picture(self, media: Media) -> bytes | None:
        """Return image bytes representing ``media``, or None if there are none."""
