"""
Discriminated success/failure results returned by the auth, watchlist and
rating services instead of raising.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Why an action failed; routes map it to an HTTP status"""
    INVALID = "invalid"                  # bad input
    AUTHENTICATION = "authentication"    # wrong credentials
    AUTHORIZATION = "authorization"      # no valid session
    CONFLICT = "conflict"                # unique constraint hit
    NOT_FOUND = "not_found"
    ERROR = "error"                      # unexpected persistence failure


class ActionResult(BaseModel):
    success: bool
    error: Optional[str] = None
    kind: Optional[FailureKind] = Field(None, exclude=True)

    @classmethod
    def ok(cls) -> "ActionResult":
        return cls(success=True)

    @classmethod
    def fail(cls, error: str, kind: FailureKind = FailureKind.ERROR) -> "ActionResult":
        return cls(success=False, error=error, kind=kind)


STATUS_BY_KIND = {
    FailureKind.INVALID: 400,
    FailureKind.AUTHENTICATION: 401,
    FailureKind.AUTHORIZATION: 401,
    FailureKind.CONFLICT: 409,
    FailureKind.NOT_FOUND: 404,
    FailureKind.ERROR: 500,
}


def status_for(result: ActionResult, success_status: int = 200) -> int:
    """HTTP status code for a service result"""
    if result.success:
        return success_status
    return STATUS_BY_KIND.get(result.kind or FailureKind.ERROR, 500)
