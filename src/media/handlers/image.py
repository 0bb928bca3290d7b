"""Image handler — raster metadata and thumbnail rendering via Pillow."""

from __future__ import annotations

import io
import logging
from typing import Any

from PIL import Image, UnidentifiedImageError

from mediahub.media.commands import ThumbnailCommand
from mediahub.media.errors import NotAvailableError
from mediahub.media.handlers.base import MediaHandler
from mediahub.media.models import Media, MediaMeta, MediaType, RawFile, Thumbnail

logger = logging.getLogger(__name__)

# Pillow reports some JPEG variants under their own format name.
_FORMAT_ALIASES = {"MPO": "JPEG"}


def _open(content: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(content))
        image.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise NotAvailableError(f"Cannot decode image: {exc}") from exc
    return image


class ImageHandler(MediaHandler):
    """Handles raster images and renders every thumbnail."""

    media_type = MediaType.IMAGE
    mimes = (
        "image/jpeg",
        "image/pjpeg",
        "image/png",
        "image/gif",
        "image/bmp",
        "image/webp",
        "image/tiff",
    )

    def extract_meta(self, file: RawFile) -> MediaMeta:
        image = _open(self._storage.read(file))
        return MediaMeta(file_id=file.id, width=image.width, height=image.height)

    def get_picture(self, media: Media) -> bytes | None:
        return self._storage.read(media.file) or None

    def _output_format(self, source_format: str | None) -> str:
        """Pick an encoder whose MIME this handler claims, else PNG."""
        image_format = _FORMAT_ALIASES.get(source_format or "", source_format or "PNG")
        if not self.is_available(Image.MIME.get(image_format, "")):
            return "PNG"
        return image_format

    def create_thumbnail(
        self,
        content: bytes,
        command: ThumbnailCommand,
        code: str,
        disk: str,
        path: str,
        origin_id: str,
        option: dict[str, Any] | None = None,
    ) -> Thumbnail:
        """Render, store and record one thumbnail.

        Args:
            content: Source picture bytes.
            command: Resize command with its dimension already set.
            code: Size code the thumbnail is tagged with (e.g. "S").
            disk: Storage disk to write to.
            path: Directory on the disk.
            origin_id: Id of the original file the thumbnail belongs to.
            option: Backend options passed through to storage.

        Returns:
            The stored thumbnail.

        Raises:
            NotAvailableError: If ``content`` is not a decodable image.
        """
        source = _open(content)
        image_format = self._output_format(source.format)
        rendered = command.execute(source)

        buffer = io.BytesIO()
        rendered.save(buffer, format=image_format)
        mime = Image.MIME[image_format]
        extension = image_format.lower().replace("jpeg", "jpg")

        stored = self._storage.put(
            buffer.getvalue(),
            path,
            f"{origin_id}_{code}.{extension}",
            mime=mime,
            disk=disk,
            origin_id=origin_id,
            options=option,
        )
        meta = MediaMeta(
            file_id=stored.id,
            width=rendered.width,
            height=rendered.height,
            code=code,
        )
        self._meta_store.save(meta)
        logger.info(
            "Created %s thumbnail %s (%dx%d) for %s",
            code, stored.id, rendered.width, rendered.height, origin_id,
        )
        return Thumbnail(file=stored, meta=meta, code=code)
