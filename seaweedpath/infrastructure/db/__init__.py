# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .session import Base, build_engine, init_db

__all__ = ["Base", "build_engine", "init_db"]
