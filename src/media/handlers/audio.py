"""Audio handler."""

from __future__ import annotations

from mediahub.media.handlers.base import MediaHandler
from mediahub.media.models import Media, MediaType


class AudioHandler(MediaHandler):
    """Handles audio files. Audio never has a picture."""

    media_type = MediaType.AUDIO
    mimes = ("audio/*",)

    def get_picture(self, media: Media) -> bytes | None:
        return None
