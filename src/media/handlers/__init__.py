"""Media handler registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mediahub.media.handlers.audio import AudioHandler
from mediahub.media.handlers.base import MediaHandler
from mediahub.media.handlers.image import ImageHandler
from mediahub.media.handlers.video import VideoHandler
from mediahub.media.models import MediaType

if TYPE_CHECKING:
    from mediahub.media.manager import MediaManager

__all__ = [
    "AudioHandler",
    "ImageHandler",
    "MediaHandler",
    "VideoHandler",
    "register_default_handlers",
]


def register_default_handlers(manager: MediaManager) -> MediaManager:
    """Register the built-in handlers on ``manager``.

    Order matters: ``get_file_type`` returns the first handler whose
    MIME patterns match, so more specific handlers go first.
    """
    handlers: dict[MediaType, type[MediaHandler]] = {
        MediaType.IMAGE: ImageHandler,
        MediaType.VIDEO: VideoHandler,
        MediaType.AUDIO: AudioHandler,
    }
    for media_type, handler_cls in handlers.items():
        manager.extend(
            media_type,
            handler_cls(storage=manager.storage, meta_store=manager.meta_store),
        )
    return manager
