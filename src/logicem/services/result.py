"""ServiceResult and ServiceError — what every back-office operation returns.

Services never raise for expected failures (bad credentials, missing
permission, validation). They return ``ok=False`` with an upper-snake
error code and a Spanish message for the person at the terminal.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Error code, user-facing message, and machine-readable detail."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Operation name, e.g. ``"sign_in"`` or ``"close_task"``.
        data: Payload on success (records, ``items`` for lists).
        warnings: Non-fatal problems, such as a plugin hook that failed.
        error: Set exactly when ``ok`` is False.
        meta: Paging counters for list operations.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @property
    def error_code(self) -> str | None:
        return self.error.code if self.error else None

    def error_message(self, default: str = "Error") -> str:
        """The error message, or *default* for a result without one."""
        return self.error.message if self.error else default

    def as_op(self, op: str) -> ServiceResult:
        """Same outcome reported under another operation name."""
        return self.model_copy(update={"op": op})


def fail(op: str, code: str | StrEnum, message: str, **detail: Any) -> ServiceResult:
    """Failed result; keyword arguments become ``error.detail``."""
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=str(code), message=message, detail=detail),
    )
