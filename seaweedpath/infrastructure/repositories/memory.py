# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from threading import Lock

from seaweedpath.application import MappingStore
from seaweedpath.domain import PathMapping, utcnow


class InMemoryMappingStore(MappingStore):
    """Process-local mapping store. Not persistent; meant for tests and embedding."""

    def __init__(self) -> None:
        self._rows: dict[str, PathMapping] = {}
        self._lock = Lock()

    def get(self, path: str) -> PathMapping | None:
        with self._lock:
            return self._rows.get(path)

    def store(self, path: str, fid: str, content_type: str, size: int) -> None:
        mapping = PathMapping(
            path=path, fid=fid, content_type=content_type, size=size, updated_at=utcnow()
        )
        with self._lock:
            self._rows[path] = mapping

    def remove(self, path: str) -> None:
        with self._lock:
            self._rows.pop(path, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._rows)


__all__ = ["InMemoryMappingStore"]
