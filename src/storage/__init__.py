"""Storage collaborators — file bytes and handler metadata."""

from mediahub.storage.base import Storage
from mediahub.storage.local import INDEX_FILENAME, LocalStorage
from mediahub.storage.meta import META_FILENAME, MetaStore

__all__ = [
    "INDEX_FILENAME",
    "META_FILENAME",
    "LocalStorage",
    "MetaStore",
    "Storage",
]
