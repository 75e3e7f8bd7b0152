# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Application dependency container."""

from __future__ import annotations

from functools import cached_property

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from seaweedpath.application import DriftAuditor, MappingStore, PathAdapter
from seaweedpath.infrastructure.db import build_engine
from seaweedpath.infrastructure.observability import PrometheusOperationMetrics
from seaweedpath.infrastructure.repositories import SqlAlchemyMappingStore
from seaweedpath.infrastructure.seaweed import SeaweedClient
from seaweedpath.shared.config import AppConfig, load_config


class Container:
    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config

    @cached_property
    def config(self) -> AppConfig:
        return self._config or load_config()

    @cached_property
    def engine(self) -> Engine:
        return build_engine(self.config.database)

    @cached_property
    def session_factory(self) -> sessionmaker[Session]:
        return sessionmaker(
            bind=self.engine, autoflush=False, autocommit=False, expire_on_commit=False
        )

    @cached_property
    def mapping_store(self) -> MappingStore:
        return SqlAlchemyMappingStore(self.session_factory)

    @cached_property
    def blob_client(self) -> SeaweedClient:
        return SeaweedClient(self.config.seaweed, self.config.resilience)

    @cached_property
    def metrics(self) -> PrometheusOperationMetrics:
        return PrometheusOperationMetrics(self.config.observability)

    @cached_property
    def adapter(self) -> PathAdapter:
        return PathAdapter(self.blob_client, self.mapping_store, metrics=self.metrics)

    @cached_property
    def drift_auditor(self) -> DriftAuditor:
        return DriftAuditor(self.mapping_store, self.blob_client)

    def close(self) -> None:
        if "blob_client" in self.__dict__:
            self.blob_client.close()
        if "engine" in self.__dict__:
            self.engine.dispose()
