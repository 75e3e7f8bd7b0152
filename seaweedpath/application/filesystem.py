# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Path-oriented filesystem adapter on top of a flat SeaweedFS blob store.

The adapter keeps no state of its own. Every call reads the mapping store,
talks to the blob store and, for mutating calls, writes the mapping back only
after the blob store confirmed the change. The two stores are not updated
atomically, so a crash between the blob call and the mapping write leaves
them drifted; see ``seaweedpath.application.drift``.
"""

from __future__ import annotations

from collections.abc import Callable
from time import perf_counter
from typing import BinaryIO, TypeVar

from seaweedpath.application.interfaces import (
    BlobStorePort,
    Contents,
    MappingStore,
    OperationMetrics,
)
from seaweedpath.application.result import Result
from seaweedpath.domain import (
    FileMetadata,
    PathMapping,
    ReadResult,
    StreamResult,
    WriteResult,
    basename,
    content_type_for,
    require_path,
)
from seaweedpath.shared.errors import (
    AppError,
    BlobStoreError,
    PathNotFoundError,
    UnsupportedOperationError,
)
from seaweedpath.shared.logging import logger

T = TypeVar("T")

_MUTATING = frozenset({"write", "delete"})


class PathAdapter:
    def __init__(
        self,
        blobs: BlobStorePort,
        mappings: MappingStore,
        *,
        metrics: OperationMetrics | None = None,
    ) -> None:
        self._blobs = blobs
        self._mappings = mappings
        self._metrics = metrics

    # -- write family ---------------------------------------------------

    def write(self, path: str, contents: Contents) -> Result[WriteResult]:
        """Create or overwrite ``path``.

        An existing mapping is overwritten in place: the upload targets the
        fid already bound to the path on the volume that currently holds it,
        so the old blob is replaced instead of leaked.

        An invalid path raises ``InvariantViolation`` before the blob store is
        contacted.
        """

        require_path(path)
        return self._run("write", path, lambda: self._write(path, contents))

    def write_stream(self, path: str, stream: BinaryIO) -> Result[WriteResult]:
        return self.write(path, stream)

    def update(self, path: str, contents: Contents) -> Result[WriteResult]:
        return self.write(path, contents)

    def update_stream(self, path: str, stream: BinaryIO) -> Result[WriteResult]:
        return self.write(path, stream)

    def _write(self, path: str, contents: Contents) -> WriteResult:
        mapping = self._mappings.get(path)

        target = None
        if mapping is not None:
            target = self._blobs.lookup(mapping.fid)
            logger.debug(f"adapter:write overwrite path={path} fid={mapping.fid} volume={target.url}")

        uploaded = self._blobs.upload(contents, basename(path), target)
        if uploaded is None:
            raise BlobStoreError("upload returned no result", context={"path": path})

        content_type = content_type_for(path)
        self._mappings.store(path, uploaded.fid, content_type, uploaded.size)
        logger.info(f"adapter:write ok path={path} fid={uploaded.fid} size={uploaded.size}")

        return WriteResult(
            path=path,
            fid=uploaded.fid,
            size=uploaded.size,
            content_type=content_type,
            url=self._blobs.build_volume_url(uploaded.public_url, uploaded.fid),
            etag=uploaded.etag,
        )

    # -- read family ----------------------------------------------------

    def read(self, path: str) -> Result[ReadResult]:
        def _read() -> ReadResult:
            stream = self._open(path)
            try:
                return ReadResult(path=path, contents=stream.read())
            finally:
                stream.close()

        return self._run("read", path, _read)

    def read_stream(self, path: str) -> Result[StreamResult]:
        return self._run("read", path, lambda: StreamResult(path=path, stream=self._open(path)))

    def _open(self, path: str) -> BinaryIO:
        mapping = self._require(path)
        stream = self._blobs.get(mapping.fid)
        if stream is None:
            raise BlobStoreError(
                "blob missing for mapped path", context={"path": path, "fid": mapping.fid}
            )
        return stream

    # -- delete ---------------------------------------------------------

    def delete(self, path: str) -> Result[bool]:
        def _delete() -> bool:
            mapping = self._require(path)
            self._blobs.delete(mapping.fid)
            self._mappings.remove(path)
            logger.info(f"adapter:delete ok path={path} fid={mapping.fid}")
            return True

        return self._run("delete", path, _delete)

    # -- existence and metadata -----------------------------------------

    def has(self, path: str) -> Result[bool]:
        """The mapping alone does not prove the blob is still there."""

        return self._run("has", path, lambda: self._blobs.has(self._require(path).fid))

    def get_metadata(self, path: str) -> Result[FileMetadata]:
        """Cached fields only. Never touches the blob store."""

        return self._run(
            "metadata", path, lambda: FileMetadata.from_mapping(self._require(path))
        )

    def get_size(self, path: str) -> Result[FileMetadata]:
        return self.get_metadata(path)

    def get_mimetype(self, path: str) -> Result[FileMetadata]:
        return self.get_metadata(path)

    def get_timestamp(self, path: str) -> Result[FileMetadata]:
        return self.get_metadata(path)

    def get_url(self, path: str) -> Result[str]:
        def _url() -> str:
            mapping = self._require(path)
            location = self._blobs.lookup(mapping.fid)
            return self._blobs.build_volume_url(location.public_url, mapping.fid)

        return self._run("url", path, _url)

    # -- unsupported ----------------------------------------------------

    def rename(self, path: str, new_path: str) -> Result[bool]:
        return self._unsupported("renaming", path)

    def copy(self, path: str, new_path: str) -> Result[bool]:
        return self._unsupported("copying", path)

    def delete_dir(self, dirname: str) -> Result[bool]:
        return self._unsupported("directory deletion", dirname)

    def create_dir(self, dirname: str) -> Result[bool]:
        return self._unsupported("directory creation", dirname)

    def list_contents(self, directory: str = "", recursive: bool = False) -> Result[list]:
        return self._unsupported("content listing", directory)

    def _unsupported(self, operation: str, path: str) -> Result:
        error = UnsupportedOperationError(type(self).__name__, operation, path)
        logger.warning(f"adapter:unsupported {error}")
        self._observe(operation.replace(" ", "_"), "unsupported", 0.0)
        return Result.failure(error)

    # -- plumbing -------------------------------------------------------

    def _require(self, path: str) -> PathMapping:
        mapping = self._mappings.get(path)
        if mapping is None:
            raise PathNotFoundError(path)
        return mapping

    def _run(self, operation: str, path: str, func: Callable[[], T]) -> Result[T]:
        logger.debug(f"adapter:{operation} path={path}")
        started = perf_counter()
        try:
            value = func()
        except (PathNotFoundError, BlobStoreError) as exc:
            self._observe(operation, exc.code, perf_counter() - started)
            self._log_failure(operation, path, exc)
            return Result.failure(exc)
        self._observe(operation, "ok", perf_counter() - started)
        return Result.success(value)

    def _log_failure(self, operation: str, path: str, exc: AppError) -> None:
        if isinstance(exc, PathNotFoundError) and operation not in _MUTATING:
            logger.debug(f"adapter:{operation} not found path={path}")
            return
        logger.opt(exception=exc if isinstance(exc, BlobStoreError) else None).warning(
            f"adapter:{operation} failed path={path} code={exc.code} reason={exc}"
        )

    def _observe(self, operation: str, outcome: str, seconds: float) -> None:
        if self._metrics is not None:
            self._metrics.observe(operation, outcome, seconds)


__all__ = ["PathAdapter"]
