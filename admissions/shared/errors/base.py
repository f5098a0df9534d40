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
        Exception.__init__(self, self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code}
        if self.message:
            payload["message"] = self.message
        if self.context:
            payload["context"] = dict(self.context)
        return payload


def _declared(cls: type, name: str, kind: type) -> Any:
    # slot descriptors inherited from AppError are not declared defaults
    value = getattr(cls, name, None)
    return value if isinstance(value, kind) else None


class DomainError(AppError):
    """Error caused by user input; subclasses set ``code``, ``status`` and ``message``."""

    def __init__(
        self,
        *,
        code: str | None = None,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
        message: str | None = None,
    ) -> None:
        resolved_code = code or cast(str, _declared(type(self), "code", str) or "domain_error")
        resolved_status = status or cast(
            HTTPStatus, _declared(type(self), "status", HTTPStatus) or HTTPStatus.BAD_REQUEST
        )
        resolved_message = message or cast(str | None, _declared(type(self), "message", str))
        super().__init__(
            code=resolved_code,
            status=resolved_status,
            context=context,
            message=resolved_message,
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


class ValidationError(AppError):
    def __init__(
        self,
        code: str = "validation_error",
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            context=context,
            message="Request payload is invalid",
        )


class UnauthorizedError(AppError):
    def __init__(self) -> None:
        super().__init__(
            code="unauthorized",
            status=HTTPStatus.UNAUTHORIZED,
            message="Authentication required",
        )
