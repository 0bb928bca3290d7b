"""Storage collaborator contract used by the media registry."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from mediahub.media.models import RawFile


@runtime_checkable
class Storage(Protocol):
    def read(self, file: RawFile) -> bytes: ...

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
    ) -> RawFile: ...

    def delete(self, file: RawFile) -> bool: ...

    def derives_of(self, file: RawFile) -> list[RawFile]: ...
