# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Path-addressed filesystem adapter over a SeaweedFS blob store."""

__version__ = "0.1.0"
