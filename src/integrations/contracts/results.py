"""
Uniform result shape returned by every adapter, service and controller.

Nothing in the catalog layer raises past its own boundary: faults are converted
into a failed OperationResult carrying an ErrorCode and a human-readable message.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel

from .interfaces import ErrorCode


class OperationResult(BaseModel):
    success: bool
    payload: Any = None
    message: str = ""
    error_code: Optional[ErrorCode] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, payload: Any = None, message: str = "") -> "OperationResult":
        return cls(success=True, payload=payload, message=message)

    @classmethod
    def fail(
        cls,
        error_code: ErrorCode,
        message: str,
        *,
        error: Optional[str] = None,
        payload: Any = None,
    ) -> "OperationResult":
        return cls(
            success=False,
            payload=payload,
            message=message,
            error_code=error_code,
            error=error or error_code.value,
        )

    @property
    def is_unauthenticated(self) -> bool:
        return self.error_code == ErrorCode.UNAUTHENTICATED
