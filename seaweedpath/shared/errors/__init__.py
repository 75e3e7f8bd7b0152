# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .base import (
    AppError,
    BlobStoreError,
    DomainError,
    InfrastructureError,
    PathNotFoundError,
    UnsupportedOperationError,
)

__all__ = [
    "AppError",
    "BlobStoreError",
    "DomainError",
    "InfrastructureError",
    "PathNotFoundError",
    "UnsupportedOperationError",
]
