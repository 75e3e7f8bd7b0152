# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import BinaryIO, Protocol, TypeAlias

from seaweedpath.domain import BlobLocation, PathMapping, UploadResult

Contents: TypeAlias = bytes | str | BinaryIO


class MappingStore(Protocol):
    """Passive path -> blob table. ``store`` is an upsert keyed by exact path."""

    def get(self, path: str) -> PathMapping | None: ...

    def store(self, path: str, fid: str, content_type: str, size: int) -> None: ...

    def remove(self, path: str) -> None: ...


class BlobStorePort(Protocol):
    """Blob store capability. Every failure is raised as ``BlobStoreError``."""

    def lookup(self, fid: str) -> BlobLocation: ...

    def upload(
        self, contents: Contents, filename: str, target: BlobLocation | None = None
    ) -> UploadResult | None: ...

    def get(self, fid: str) -> BinaryIO | None: ...

    def has(self, fid: str) -> bool: ...

    def delete(self, fid: str) -> None: ...

    def build_volume_url(self, base_url: str, fid: str) -> str: ...


class OperationMetrics(Protocol):
    def observe(self, operation: str, outcome: str, seconds: float) -> None: ...
