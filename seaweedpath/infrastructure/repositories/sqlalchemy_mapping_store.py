# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from sqlalchemy import delete
from sqlalchemy.dialects.mysql import insert as mysql_insert
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session
from sqlalchemy.sql.dml import Insert

from seaweedpath.application import MappingStore
from seaweedpath.domain import PathMapping, utcnow
from seaweedpath.infrastructure.db.models import PathMappingRow
from seaweedpath.infrastructure.unit_of_work import unit_of_work_scope
from seaweedpath.shared.logging import logger


class SqlAlchemyMappingStore(MappingStore):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def get(self, path: str) -> PathMapping | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(PathMappingRow, path)
            if row is None:
                return None
            return PathMapping(
                path=row.path,
                fid=row.fid,
                content_type=row.content_type,
                size=int(row.size),
                updated_at=row.updated_at,
            )

    def store(self, path: str, fid: str, content_type: str, size: int) -> None:
        # validates before anything reaches the table
        mapping = PathMapping(path=path, fid=fid, content_type=content_type, size=size)
        changes = {
            "fid": mapping.fid,
            "content_type": mapping.content_type,
            "size": mapping.size,
            "updated_at": utcnow(),
        }
        with unit_of_work_scope(self._session_factory) as session:
            session.execute(_upsert(session, {"path": mapping.path, **changes}, changes))
        logger.debug(f"mapping:store path={path} fid={fid} size={size}")

    def remove(self, path: str) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            session.execute(delete(PathMappingRow).where(PathMappingRow.path == path))
        logger.debug(f"mapping:remove path={path}")


def _upsert(session: Session, values: dict[str, Any], changes: dict[str, Any]) -> Insert:
    # one atomic statement; the last concurrent writer wins
    dialect = session.get_bind().dialect.name
    if dialect in ("mysql", "mariadb"):
        return mysql_insert(PathMappingRow).values(**values).on_duplicate_key_update(**changes)
    if dialect == "postgresql":
        stmt = postgresql_insert(PathMappingRow).values(**values)
    elif dialect == "sqlite":
        stmt = sqlite_insert(PathMappingRow).values(**values)
    else:
        raise NotImplementedError(f"path mapping upsert is not available for dialect {dialect}")
    return stmt.on_conflict_do_update(index_elements=[PathMappingRow.path], set_=changes)


__all__ = ["SqlAlchemyMappingStore"]
