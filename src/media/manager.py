"""Media manager — the registry that dispatches files to media handlers.

Handlers are registered under a type key (``"image"``, ``"video"``, ...).
A file is resolved by asking each handler, in registration order, whether
it accepts the file's MIME type; the first one that does wins.  That order
is part of the contract: register the more specific handler first when
two handlers could claim the same MIME type.

Registration is expected during startup.  ``extend`` is serialized by a
lock and publishes a fresh mapping, so lookups running on other threads
always see a complete snapshot.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from mediahub.config import MediaHubConfig, ThumbnailConfig, resolve_option
from mediahub.media.commands import CommandFactory
from mediahub.media.errors import UnknownTypeError
from mediahub.media.handlers import register_default_handlers
from mediahub.media.handlers.base import MediaHandler
from mediahub.media.models import (
    DeriveOutcome,
    Dimension,
    Media,
    MediaType,
    RawFile,
    Thumbnail,
    ThumbnailResult,
)
from mediahub.storage.base import Storage
from mediahub.storage.local import LocalStorage
from mediahub.storage.meta import MetaStore

logger = logging.getLogger(__name__)


def _key(media_type: str) -> str:
    return str(media_type).strip().lower()


class MediaManager:
    """Registry of media handlers keyed by media type."""

    def __init__(
        self,
        storage: Storage,
        *,
        meta_store: MetaStore,
        factory: CommandFactory | None = None,
        config: ThumbnailConfig | None = None,
    ) -> None:
        self.storage = storage
        self.meta_store = meta_store
        self.factory = factory or CommandFactory()
        self.config = config or ThumbnailConfig()
        self._handlers: dict[str, MediaHandler] = {}
        self._lock = threading.Lock()

    # ── Registration ─────────────────────────────────────────────

    def extend(self, media_type: str, handler: MediaHandler) -> None:
        """Register ``handler`` for ``media_type``.

        The last registration for a key wins. Replacing a handler keeps
        the key's original position in lookup order.

        Raises:
            ValueError: If ``media_type`` is empty.
        """
        key = _key(media_type)
        if not key:
            raise ValueError("Media type must not be empty")
        with self._lock:
            handlers = dict(self._handlers)
            replaced = key in handlers
            handlers[key] = handler
            self._handlers = handlers
        logger.info(
            "%s media handler %s for %r",
            "Replaced" if replaced else "Registered",
            type(handler).__name__,
            key,
        )

    @property
    def handler_types(self) -> list[str]:
        """Registered type keys in lookup order."""
        return list(self._handlers)

    # ── Lookup ───────────────────────────────────────────────────

    def get_handler(self, media_type: str) -> MediaHandler:
        """Return the handler registered for ``media_type``.

        Raises:
            UnknownTypeError: If no handler is registered for the type.
        """
        handler = self.find_handler(media_type)
        if handler is None:
            raise UnknownTypeError(_key(media_type))
        return handler

    def find_handler(self, media_type: str) -> MediaHandler | None:
        """Return the handler for ``media_type``, or None."""
        return self._handlers.get(_key(media_type))

    def get_file_type(self, file: RawFile) -> str | None:
        """Return the type key of the first handler that accepts ``file``.

        Returns None when no handler accepts it.
        """
        for media_type, handler in self._handlers.items():
            if handler.is_available(file.mime):
                return media_type
        logger.debug("No handler accepts %s (%s)", file.id, file.mime)
        return None

    def get_handler_by_file(self, file: RawFile) -> MediaHandler:
        """Return the handler for ``file``.

        Raises:
            UnknownTypeError: If no handler accepts the file's MIME type.
        """
        media_type = self.get_file_type(file)
        if media_type is None:
            raise UnknownTypeError(mime=file.mime)
        return self.get_handler(media_type)

    def get_handler_by_media(self, media: Media) -> MediaHandler:
        return self.get_handler(media.get_type())

    def is_supported(self, file: RawFile) -> bool:
        """Whether some registered handler accepts ``file``. Never raises."""
        return self.get_file_type(file) is not None

    # ── Construction ─────────────────────────────────────────────

    def make(self, file: RawFile) -> Media:
        """Build the media record for ``file`` through its handler."""
        return self.get_handler_by_file(file).make(file)

    def cast(self, file: RawFile) -> Media:
        """Build a media view of ``file`` without computing or saving metadata."""
        return self.get_handler_by_file(file).make_model(file)

    def derive_outcomes(self, media: Media) -> list[DeriveOutcome]:
        """Build media for each derived file, marking unsupported ones skipped."""
        outcomes: list[DeriveOutcome] = []
        for file in media.get_raw_derives():
            if self.is_supported(file):
                outcomes.append(DeriveOutcome(file=file, media=self.make(file)))
            else:
                outcomes.append(DeriveOutcome(file=file))
        return outcomes

    def get_derives(self, media: Media) -> list[Media]:
        """Return media built from ``media``'s derived files.

        Unsupported derived files are dropped; order is preserved.
        """
        outcomes = self.derive_outcomes(media)
        skipped = [o.file.id for o in outcomes if o.skipped]
        if skipped:
            logger.debug("Skipped unsupported derived files of %s: %s", media.id, skipped)
        return [o.media for o in outcomes if o.media is not None]

    # ── Deletion ─────────────────────────────────────────────────

    def delete_meta(self, media: Media) -> bool:
        """Delete stored metadata for ``media``. Returns whether any existed."""
        if media.get_meta() is None:
            return False
        deleted = self.meta_store.delete(media.id)
        logger.debug("Metadata for %s deleted: %s", media.id, deleted)
        return deleted

    def delete(self, media: Media) -> bool:
        """Delete metadata, then the stored file.

        Returns the storage result. Errors from either step propagate.
        """
        self.delete_meta(media)
        return self.storage.delete(media.file)

    # ── Thumbnails ───────────────────────────────────────────────

    def _thumbnail_plan(
        self,
        thumbnail_type: str | None,
        dimensions: Mapping[str, Dimension | Mapping[str, int]] | None,
        path: str | None,
        disk: str | None,
    ) -> tuple[str, dict[str, Dimension], str, str]:
        command_type = resolve_option(thumbnail_type, self.config.type).lower()
        sizes = resolve_option(dimensions, self.config.dimensions)
        return (
            command_type,
            {code: Dimension.model_validate(size) for code, size in sizes.items()},
            resolve_option(path, self.config.path),
            resolve_option(disk, self.config.disk),
        )

    def _thumbnail_source(self, media: Media) -> bytes | None:
        content = self.get_handler_by_media(media).get_picture(media)
        if not content:
            logger.debug("No picture for %s media %s", media.get_type(), media.id)
            return None
        return content

    def _render(
        self,
        content: bytes,
        command_type: str,
        code: str,
        dimension: Dimension,
        disk: str,
        path: str,
        media: Media,
        option: dict[str, Any],
    ) -> Thumbnail:
        command = self.factory.make(command_type)
        command.set_dimension(dimension)
        return self.get_handler(MediaType.IMAGE).create_thumbnail(
            content,
            command,
            code,
            disk,
            path,
            media.get_origin_key(),
            option,
        )

    def create_thumbnails(
        self,
        media: Media,
        thumbnail_type: str | None = None,
        dimensions: Mapping[str, Dimension | Mapping[str, int]] | None = None,
        path: str | None = None,
        disk: str | None = None,
        option: dict[str, Any] | None = None,
    ) -> list[Thumbnail]:
        """Create one thumbnail per configured dimension.

        Each argument falls back to the configured default independently.
        Media without a picture yields an empty list. The first failing
        dimension stops the run and its error propagates; use
        ``create_thumbnail_results`` to keep going past failures.

        Args:
            media: Source media.
            thumbnail_type: Command type (``fit``, ``letter``, ...).
            dimensions: Size code → dimension.
            path: Directory to store thumbnails in.
            disk: Storage disk to store thumbnails on.
            option: Backend options passed through to storage.

        Returns:
            Thumbnails in dimension order.
        """
        command_type, sizes, path, disk = self._thumbnail_plan(
            thumbnail_type, dimensions, path, disk
        )
        content = self._thumbnail_source(media)
        if content is None:
            return []

        return [
            self._render(content, command_type, code, dimension, disk, path, media, option or {})
            for code, dimension in sizes.items()
        ]

    def create_thumbnail_results(
        self,
        media: Media,
        thumbnail_type: str | None = None,
        dimensions: Mapping[str, Dimension | Mapping[str, int]] | None = None,
        path: str | None = None,
        disk: str | None = None,
        option: dict[str, Any] | None = None,
    ) -> list[ThumbnailResult]:
        """Like ``create_thumbnails``, but records each dimension's outcome.

        A failing dimension is reported in its result and the remaining
        dimensions are still attempted.
        """
        command_type, sizes, path, disk = self._thumbnail_plan(
            thumbnail_type, dimensions, path, disk
        )
        content = self._thumbnail_source(media)
        if content is None:
            return []

        results: list[ThumbnailResult] = []
        for code, dimension in sizes.items():
            try:
                thumbnail = self._render(
                    content, command_type, code, dimension, disk, path, media, option or {}
                )
            except Exception as exc:
                logger.warning("Thumbnail %s failed for %s: %s", code, media.id, exc)
                results.append(ThumbnailResult(code=code, error=exc))
            else:
                results.append(ThumbnailResult(code=code, thumbnail=thumbnail))
        return results


def create_manager(
    config: MediaHubConfig, storage: Storage | None = None
) -> MediaManager:
    """Build a manager with the built-in handlers.

    Files go to ``storage`` when given, otherwise to local storage under
    the configured root. Metadata always lives under that root.
    """
    root = Path(config.storage.root)
    if storage is None:
        storage = LocalStorage(root, default_disk=config.storage.default_disk)
    manager = MediaManager(storage, meta_store=MetaStore(root), config=config.thumbnail)
    return register_default_handlers(manager)
