"""
Auth service result: ``{ok: true}`` or ``{ok: false, error: <message>}``.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from magic_login.errors import MagicLoginError


class AuthResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    ok: bool
    error: Optional[str] = None

    @model_validator(mode="after")
    def _failure_has_message(self) -> AuthResult:
        if self.ok and self.error is not None:
            raise ValueError("successful result cannot carry an error")
        if not self.ok and not self.error:
            raise ValueError("failed result requires an error message")
        return self

    @classmethod
    def success(cls) -> AuthResult:
        return cls(ok=True)

    @classmethod
    def failure(cls, error: str) -> AuthResult:
        return cls(ok=False, error=error)

    @classmethod
    def from_error(cls, exc: MagicLoginError) -> AuthResult:
        return cls.failure(exc.message or exc.code)
