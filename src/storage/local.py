"""Filesystem storage with a JSON file index.

Each disk is a subdirectory of the storage root.  File records are kept
in a single JSON index, loaded on init and saved after every write, so
derived files can be looked up by their origin id.
"""

from __future__ import annotations

import json
import logging
import mimetypes
import threading
import uuid
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from mediahub.media.models import RawFile

logger = logging.getLogger(__name__)

INDEX_FILENAME = ".mediahub-files.json"
DEFAULT_MIME = "application/octet-stream"


class _IndexData(BaseModel):
    """Internal wrapper for JSON serialization."""

    files: list[RawFile] = Field(default_factory=list)


def _clean(segment: str) -> str:
    parts = [p for p in segment.replace("\\", "/").split("/") if p not in ("", ".", "..")]
    return "/".join(parts)


class LocalStorage:
    """Store file bytes under ``root/<disk>/<path>`` and index them."""

    def __init__(self, root: Path, *, default_disk: str = "local") -> None:
        self.root = Path(root)
        self.default_disk = default_disk
        self._index_path = self.root / INDEX_FILENAME
        self._lock = threading.Lock()
        self._data = self._load()

    # ── Private helpers ──────────────────────────────────────────

    def _load(self) -> _IndexData:
        if not self._index_path.exists():
            return _IndexData()
        try:
            raw = json.loads(self._index_path.read_text(encoding="utf-8"))
            return _IndexData.model_validate(raw)
        except (json.JSONDecodeError, ValueError, KeyError):
            logger.warning("Corrupt file index at %s, starting fresh", self._index_path)
            return _IndexData()

    def _save(self) -> None:
        self._index_path.parent.mkdir(parents=True, exist_ok=True)
        self._index_path.write_text(
            self._data.model_dump_json(indent=2),
            encoding="utf-8",
        )

    def _location(self, file: RawFile) -> Path:
        return self.root / _clean(file.disk) / _clean(file.path) / _clean(file.filename)

    # ── Write operations ─────────────────────────────────────────

    def put(
        self,
        content: bytes,
        path: str,
        filename: str,
        *,
        mime: str,
        disk: str | None = None,
        origin_id: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> RawFile:
        """Write bytes and register a new file record."""
        file_id = uuid.uuid4().hex
        name = _clean(filename).replace("/", "_") or file_id
        record = RawFile(
            id=file_id,
            mime=mime,
            path=_clean(path),
            filename=name,
            disk=disk or self.default_disk,
            size=len(content),
            origin_id=origin_id,
            options=dict(options or {}),
        )
        target = self._location(record)
        if target.exists():
            record.filename = f"{file_id}-{name}"
            target = self._location(record)

        with self._lock:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
            self._data.files.append(record)
            self._save()

        logger.debug("Stored %s at %s", record.id, target)
        return record

    def add(self, source: Path, *, path: str = "", disk: str | None = None) -> RawFile:
        """Import a local file, guessing its MIME type from the name."""
        mime, _ = mimetypes.guess_type(source.name)
        return self.put(
            source.read_bytes(),
            path,
            source.name,
            mime=mime or DEFAULT_MIME,
            disk=disk,
        )

    def delete(self, file: RawFile) -> bool:
        """Remove the file bytes and its index entry.

        Returns False when the file was not known to this storage.
        """
        with self._lock:
            before = len(self._data.files)
            self._data.files = [f for f in self._data.files if f.id != file.id]
            removed = len(self._data.files) != before
            location = self._location(file)
            if location.exists():
                location.unlink()
                removed = True
            if removed:
                self._save()
        if not removed:
            logger.warning("Delete requested for unknown file %s", file.id)
        return removed

    # ── Read operations ──────────────────────────────────────────

    def read(self, file: RawFile) -> bytes:
        """Return the stored bytes. Raises FileNotFoundError if missing."""
        return self._location(file).read_bytes()

    def get(self, file_id: str) -> RawFile | None:
        for record in self._data.files:
            if record.id == file_id:
                return record
        return None

    def derives_of(self, file: RawFile) -> list[RawFile]:
        """Return files derived from ``file``, in the order they were stored."""
        return [f for f in self._data.files if f.origin_id == file.id and f.id != file.id]
