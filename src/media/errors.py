"""Errors raised by the media registry and its handlers."""

from __future__ import annotations


class MediaError(Exception):
    """Base error for media handling."""


class UnknownTypeError(MediaError, LookupError):
    """No handler is registered for the requested type or accepts the MIME type.

    ``type`` holds the requested registry key and ``mime`` the file MIME
    type that no handler accepted. Either may be None.
    """

    def __init__(self, media_type: str | None = None, *, mime: str | None = None) -> None:
        self.type = media_type
        self.mime = mime
        if media_type:
            super().__init__(f"Unknown media type: {media_type!r}")
        elif mime:
            super().__init__(f"Unsupported MIME type: {mime!r}")
        else:
            super().__init__("Unsupported media type")


class NotAvailableError(MediaError):
    """A handler declined to operate on the given input."""
