"""What every service call returns.

Services never print and never exit. ``build`` and ``serve`` hand back a
ServiceResult; ``AppContext.emit`` decides stdout versus stderr and the
exit code, and ``--json`` serializes the model as-is.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Why an operation failed.

    ``code`` is a stable upper-case identifier (``INVALID_CONTENT``,
    ``IMAGE_ERROR``, ...) that scripts can match on; ``detail`` carries
    the offending path or value.
    """

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Operation name (``"build"``, ``"serve"``).
        data: Summary payload on success (counts, output dir, URL).
        warnings: Non-fatal problems, e.g. a missing passthrough path.
        error: Set when ``ok`` is False.
        meta: Timing and other diagnostics shown with ``-v``.
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
        """Shorthand for a failed result carrying a :class:`ServiceError`."""
        return cls(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))
