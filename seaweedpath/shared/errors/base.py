# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, cast


@dataclass(slots=True)
class AppError(Exception):
    code: str
    status: HTTPStatus
    context: Mapping[str, Any] | None = None
    message: str | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message or self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code}
        if self.message:
            payload["message"] = self.message
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class DomainError(AppError):
    def __init__(
        self,
        *,
        code: str | None = None,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
        message: str | None = None,
    ) -> None:
        resolved_code = code or cast(str, getattr(self, "default_code", "domain_error"))
        resolved_status = status or cast(
            HTTPStatus, getattr(self, "default_status", HTTPStatus.BAD_REQUEST)
        )
        super().__init__(
            code=resolved_code, status=resolved_status, context=context, message=message
        )


class InfrastructureError(AppError):
    def __init__(
        self,
        code: str = "infrastructure_error",
        *,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
        message: str | None = None,
    ) -> None:
        resolved_status = status or HTTPStatus.INTERNAL_SERVER_ERROR
        super().__init__(code=code, status=resolved_status, context=context, message=message)


class PathNotFoundError(DomainError):
    default_code = "path_not_found"
    default_status = HTTPStatus.NOT_FOUND

    def __init__(self, path: str) -> None:
        super().__init__(context={"path": path}, message=f"No mapping for path: {path}")

    @property
    def path(self) -> str:
        return str(self.context["path"]) if self.context else ""


class UnsupportedOperationError(DomainError):
    default_code = "unsupported_operation"
    default_status = HTTPStatus.NOT_IMPLEMENTED

    def __init__(self, adapter: str, operation: str, path: str) -> None:
        super().__init__(
            context={"operation": operation, "path": path},
            message=f"{adapter} does not support {operation}. Path: {path}",
        )

    @property
    def operation(self) -> str:
        return str(self.context["operation"]) if self.context else ""


class BlobStoreError(InfrastructureError):
    """Any transport, protocol or not-found failure reported by the blob store."""

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        status: HTTPStatus | None = None,
    ) -> None:
        super().__init__(
            "blob_store_failure",
            status=status or HTTPStatus.BAD_GATEWAY,
            context=context,
            message=message,
        )


__all__ = [
    "AppError",
    "BlobStoreError",
    "DomainError",
    "InfrastructureError",
    "PathNotFoundError",
    "UnsupportedOperationError",
]
