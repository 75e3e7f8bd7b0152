# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Read-only audit of mapping/blob drift for caller-supplied paths."""

from __future__ import annotations

from collections.abc import Iterable

from seaweedpath.application.interfaces import BlobStorePort, MappingStore
from seaweedpath.domain import DriftReport, DriftStatus
from seaweedpath.shared.errors import BlobStoreError
from seaweedpath.shared.logging import logger


class DriftAuditor:
    def __init__(self, mappings: MappingStore, blobs: BlobStorePort) -> None:
        self._mappings = mappings
        self._blobs = blobs

    def check(self, path: str) -> DriftReport:
        mapping = self._mappings.get(path)
        if mapping is None:
            return DriftReport(path=path, fid=None, status=DriftStatus.MISSING_MAPPING)
        try:
            present = self._blobs.has(mapping.fid)
        except BlobStoreError as exc:
            logger.opt(exception=exc).debug(f"drift:check unreachable path={path}")
            return DriftReport(path=path, fid=mapping.fid, status=DriftStatus.UNREACHABLE)
        status = DriftStatus.CONSISTENT if present else DriftStatus.MISSING_BLOB
        return DriftReport(path=path, fid=mapping.fid, status=status)

    def audit(self, paths: Iterable[str]) -> list[DriftReport]:
        reports = [self.check(path) for path in paths]
        drifted = sum(1 for report in reports if report.drifted)
        if drifted:
            logger.warning(f"drift:audit checked={len(reports)} drifted={drifted}")
        else:
            logger.info(f"drift:audit checked={len(reports)} drifted=0")
        return reports


__all__ = ["DriftAuditor"]
