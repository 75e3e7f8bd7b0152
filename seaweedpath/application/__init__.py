# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .drift import DriftAuditor
from .filesystem import PathAdapter
from .interfaces import BlobStorePort, Contents, MappingStore, OperationMetrics
from .result import Result

__all__ = [
    "BlobStorePort",
    "Contents",
    "DriftAuditor",
    "MappingStore",
    "OperationMetrics",
    "PathAdapter",
    "Result",
]
