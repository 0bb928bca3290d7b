"""Video handler — uses a stored poster frame as its picture."""

from __future__ import annotations

import logging

from mediahub.media.handlers.base import MediaHandler
from mediahub.media.models import Media, MediaType

logger = logging.getLogger(__name__)


class VideoHandler(MediaHandler):
    """Handles video files.

    Frames are not extracted here. A video has a picture only when an
    image was stored as one of its derived files (a poster frame).
    """

    media_type = MediaType.VIDEO
    mimes = ("video/*",)

    def get_picture(self, media: Media) -> bytes | None:
        for derived in media.get_raw_derives():
            if derived.mime.lower().startswith("image/"):
                logger.debug("Using poster %s for video %s", derived.id, media.id)
                return self._storage.read(derived)
        return None
