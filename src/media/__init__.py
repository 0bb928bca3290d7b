"""Media domain — models, errors, handlers and the media manager.

Import the manager from ``mediahub.media.manager``; this package only
re-exports the data types so that configuration can depend on them.
"""

from mediahub.media.errors import MediaError, NotAvailableError, UnknownTypeError
from mediahub.media.models import (
    DeriveOutcome,
    Dimension,
    Media,
    MediaMeta,
    MediaType,
    RawFile,
    Thumbnail,
    ThumbnailResult,
)

__all__ = [
    "DeriveOutcome",
    "Dimension",
    "Media",
    "MediaError",
    "MediaMeta",
    "MediaType",
    "NotAvailableError",
    "RawFile",
    "Thumbnail",
    "ThumbnailResult",
    "UnknownTypeError",
]
