# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Explicit success/failure outcome returned by every adapter operation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from seaweedpath.shared.errors import (
    AppError,
    BlobStoreError,
    PathNotFoundError,
    UnsupportedOperationError,
)

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class Result(Generic[T]):
    """Either a payload or one error of the closed adapter taxonomy, never both.

    Truthiness follows the boolean convention of path-based filesystem
    adapters: a failure is falsy, and so is a successful ``False`` answer
    (``has`` on a path whose blob is gone).
    """

    value: T | None = None
    error: AppError | None = None

    def __post_init__(self) -> None:
        if self.error is not None and self.value is not None:
            raise ValueError("a failed result cannot carry a value")

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: AppError) -> Result[T]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def not_found(self) -> bool:
        return isinstance(self.error, PathNotFoundError)

    @property
    def store_failure(self) -> bool:
        return isinstance(self.error, BlobStoreError)

    @property
    def unsupported(self) -> bool:
        return isinstance(self.error, UnsupportedOperationError)

    def __bool__(self) -> bool:
        return self.ok and self.value is not False

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


__all__ = ["Result"]
