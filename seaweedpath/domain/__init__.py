# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import (
    DEFAULT_CONTENT_TYPE,
    BlobLocation,
    DriftReport,
    DriftStatus,
    FileMetadata,
    PathMapping,
    ReadResult,
    StreamResult,
    UploadResult,
    WriteResult,
    basename,
    content_type_for,
    require_path,
    utcnow,
    volume_id_of,
)
from .exceptions import DomainError, InvariantViolation

__all__ = [
    "DEFAULT_CONTENT_TYPE",
    "BlobLocation",
    "DriftReport",
    "DriftStatus",
    "FileMetadata",
    "PathMapping",
    "ReadResult",
    "StreamResult",
    "UploadResult",
    "WriteResult",
    "basename",
    "content_type_for",
    "require_path",
    "utcnow",
    "volume_id_of",
    "DomainError",
    "InvariantViolation",
]
