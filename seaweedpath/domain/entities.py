# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Domain records that bind logical paths to SeaweedFS blobs."""

from __future__ import annotations

import mimetypes
import posixpath
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, BinaryIO

from .exceptions import InvariantViolation

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def content_type_for(path: str) -> str:
    """Guess the content type from the extension of ``path``."""

    guessed, _ = mimetypes.guess_type(path, strict=False)
    return guessed or DEFAULT_CONTENT_TYPE


def basename(path: str) -> str:
    return posixpath.basename(path) or path


def volume_id_of(fid: str) -> str:
    """Return the volume id part of a fid such as ``3,01637037d6``."""

    volume_id, sep, key = fid.partition(",")
    if not sep or not volume_id or not key:
        raise InvariantViolation(f"malformed fid {fid!r}", field="fid")
    return volume_id


def require_path(path: str) -> None:
    if not isinstance(path, str) or not path:
        raise InvariantViolation("path must be a non-empty string", field="path")


@dataclass(slots=True, frozen=True)
class PathMapping:
    """Persistent binding of a logical path to the blob holding its content."""

    path: str
    fid: str
    content_type: str
    size: int
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        require_path(self.path)
        if not self.fid:
            raise InvariantViolation("fid must not be empty", field="fid")
        object.__setattr__(self, "size", int(self.size))
        if self.size < 0:
            raise InvariantViolation("size must be non-negative", field="size")

    @property
    def timestamp(self) -> int | None:
        if self.updated_at is None:
            return None
        value = self.updated_at
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return int(value.timestamp())


@dataclass(slots=True, frozen=True)
class BlobLocation:
    """Where a fid currently lives. Never cached across calls."""

    fid: str
    url: str
    public_url: str


@dataclass(slots=True, frozen=True)
class UploadResult:
    fid: str
    size: int
    url: str
    public_url: str
    name: str | None = None
    etag: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "fid": self.fid,
            "size": self.size,
            "url": self.url,
            "public_url": self.public_url,
            "name": self.name,
            "etag": self.etag,
        }


@dataclass(slots=True, frozen=True)
class WriteResult:
    path: str
    fid: str
    size: int
    content_type: str
    url: str
    etag: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "file",
            "path": self.path,
            "fid": self.fid,
            "size": self.size,
            "mimetype": self.content_type,
            "url": self.url,
            "etag": self.etag,
        }


@dataclass(slots=True, frozen=True)
class ReadResult:
    path: str
    contents: bytes


@dataclass(slots=True, frozen=True)
class StreamResult:
    path: str
    stream: BinaryIO


@dataclass(slots=True, frozen=True)
class FileMetadata:
    """Cached metadata served straight from the mapping."""

    path: str
    fid: str
    content_type: str
    size: int
    timestamp: int | None = None
    type: str = field(default="file")

    @classmethod
    def from_mapping(cls, mapping: PathMapping) -> FileMetadata:
        return cls(
            path=mapping.path,
            fid=mapping.fid,
            content_type=mapping.content_type,
            size=mapping.size,
            timestamp=mapping.timestamp,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "path": self.path,
            "fid": self.fid,
            "mimetype": self.content_type,
            "size": self.size,
            "timestamp": self.timestamp,
        }


class DriftStatus(StrEnum):
    CONSISTENT = "consistent"
    MISSING_MAPPING = "missing_mapping"
    MISSING_BLOB = "missing_blob"
    UNREACHABLE = "unreachable"


@dataclass(slots=True, frozen=True)
class DriftReport:
    path: str
    fid: str | None
    status: DriftStatus

    @property
    def drifted(self) -> bool:
        return self.status is not DriftStatus.CONSISTENT


def utcnow() -> datetime:
    return datetime.now(UTC)
