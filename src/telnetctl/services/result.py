"""ServiceResult and ServiceError — the service-layer contract.

INVARIANT: All SessionService steps return ServiceResult.
Infrastructure errors are converted here, never raised past the service.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from telnetctl.domain.errors import TelnetError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: TelnetError) -> ServiceError:
        return cls(code=exc.code, message=exc.message, detail=exc.detail)


class ServiceResult(BaseModel):
    """Return type for every session step.

    Attributes:
        ok: Whether the step succeeded.
        op: Name of the step (``"resolve"``, ``"connect"``, ``"relay"``).
        data: Step-specific payload on success.
        warnings: Non-fatal issues, e.g. a relay direction I/O error.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
