# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .memory import InMemoryMappingStore
from .sqlalchemy_mapping_store import SqlAlchemyMappingStore

__all__ = ["InMemoryMappingStore", "SqlAlchemyMappingStore"]
