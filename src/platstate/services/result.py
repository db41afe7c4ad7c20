"""ServiceResult and ServiceError — the engine's result contract.

Mutating engine operations return ServiceResult. The HAL status code is
derived from it through :attr:`ServiceResult.status`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from platstate.domain.types import Status


class ServiceError(BaseModel):
    """Why an operation failed."""

    model_config = {"frozen": True}

    code: Status
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of an engine operation or CLI command.

    ``warnings`` carries non-fatal findings such as unhandled keys; it may be
    non-empty on success. ``error`` is set exactly when ``ok`` is False.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None

    @property
    def status(self) -> Status:
        """HAL status code: ``OK`` on success, else the error code."""
        if self.ok:
            return Status.OK
        if self.error is None:
            return Status.BAD_VALUE
        return self.error.code
