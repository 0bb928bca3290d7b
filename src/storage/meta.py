"""JSON-backed store for handler-computed media metadata."""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path

from pydantic import BaseModel, Field

from mediahub.media.models import MediaMeta

logger = logging.getLogger(__name__)

META_FILENAME = ".mediahub-meta.json"


class _MetaData(BaseModel):
    """Internal wrapper for JSON serialization."""

    entries: dict[str, MediaMeta] = Field(default_factory=dict)


class MetaStore:
    """Keeps one ``MediaMeta`` per file id.

    Loads the store file on init and saves after every mutation.
    """

    def __init__(self, directory: Path) -> None:
        self._path = Path(directory) / META_FILENAME
        self._lock = threading.Lock()
        self._data = self._load()

    def _load(self) -> _MetaData:
        if not self._path.exists():
            return _MetaData()
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            return _MetaData.model_validate(raw)
        except (json.JSONDecodeError, ValueError, KeyError):
            logger.warning("Corrupt metadata store at %s, starting fresh", self._path)
            return _MetaData()

    def _save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            self._data.model_dump_json(indent=2),
            encoding="utf-8",
        )

    def get(self, file_id: str) -> MediaMeta | None:
        """Return metadata for a file, or None if none was recorded."""
        return self._data.entries.get(file_id)

    def save(self, meta: MediaMeta) -> None:
        """Insert or replace metadata for ``meta.file_id``."""
        with self._lock:
            self._data.entries[meta.file_id] = meta
            self._save()

    def delete(self, file_id: str) -> bool:
        """Remove metadata for a file. Returns whether an entry existed."""
        with self._lock:
            if self._data.entries.pop(file_id, None) is None:
                return False
            self._save()
        return True
