# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.engine import Engine

from seaweedpath.infrastructure.seaweed import SeaweedClient
from seaweedpath.shared.errors import BlobStoreError
from seaweedpath.shared.logging import logger


def check_database(engine: Engine) -> bool:
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))
    return True


def check_blob_store(client: SeaweedClient) -> bool:
    try:
        status = client.cluster_status()
    except BlobStoreError as exc:
        logger.warning(f"health: blob store unreachable reason={exc}")
        return False
    return bool(status.get("IsLeader", True))


__all__ = ["check_blob_store", "check_database"]
