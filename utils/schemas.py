"""
Pydantic schemas for requests and results of the authentication service.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ═══════════════════════════════════════════════════════════════════════════════
# Requests
# ═══════════════════════════════════════════════════════════════════════════════


class RegisterRequest(BaseModel):
    """Raw registration body; content rules live in ``utils.validators``."""

    model_config = ConfigDict(extra="ignore")

    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    identifier: Optional[str] = None
    password: Optional[str] = None


# ═══════════════════════════════════════════════════════════════════════════════
# Results
# ═══════════════════════════════════════════════════════════════════════════════


class FieldError(BaseModel):
    field: str
    message: str


class AuthResult(BaseModel):
    """
    Outcome of a gate operation, serialised by the HTTP layer as
    ``{success, message, data?, errors?}``.

    ``status_code`` travels with the result but is not part of the body.
    """

    success: bool
    message: str
    data: Optional[Dict[str, Any]] = None
    errors: Optional[List[FieldError]] = None
    status_code: int = Field(200, exclude=True)

    @classmethod
    def ok(cls, message: str, data: Optional[Dict[str, Any]] = None, status_code: int = 200) -> "AuthResult":
        return cls(success=True, message=message, data=data, status_code=status_code)

    @classmethod
    def failure(
        cls,
        status_code: int,
        message: str,
        errors: Optional[List[FieldError]] = None,
    ) -> "AuthResult":
        return cls(success=False, message=message, errors=errors, status_code=status_code)

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"success": self.success, "message": self.message}
        if self.data is not None:
            body["data"] = self.data
        if self.errors:
            body["errors"] = [e.model_dump() for e in self.errors]
        return body
