# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .client import UNKNOWN_VOLUME, SeaweedClient

__all__ = ["SeaweedClient", "UNKNOWN_VOLUME"]
