"""ServiceResult — what every service operation hands back to the CLI.

Services never raise for expected failures (bad target, inconsistent model
declaration, unwritable output); they return ``ok=False`` with a
machine-readable :class:`ServiceError` code instead.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Why an operation failed.

    Attributes:
        code: Stable upper-case identifier (``NOT_FOUND``, ``DEFINITION_ERROR``...).
        message: Human-readable explanation.
        detail: Extra context such as the target or the offending field.
    """

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Operation name (``"inspect"``, ``"generate"``); selects the renderer.
        data: Operation payload on success.
        warnings: Non-fatal findings, e.g. a model without a Patch view.
        error: Set when ``ok`` is False.
        meta: Free-form extras.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        """Shorthand for an ``ok=False`` result carrying one error."""
        return cls(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail),
        )
