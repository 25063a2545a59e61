"""
Auth service contract and implementations.

Two-step email verification: request a one-time code, then verify it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Protocol

from pydantic import EmailStr, TypeAdapter, ValidationError

from magic_login.errors import InvalidCode, InvalidEmail, MagicLoginError
from magic_login.models.auth import AuthResult
from magic_login.transport.http import HttpClient

logger = logging.getLogger(__name__)

DEMO_CODE = "12345"
DEMO_DELAY_S = 1.5

_email_adapter: TypeAdapter[str] = TypeAdapter(EmailStr)


def is_well_formed_email(email: str) -> bool:
    try:
        _email_adapter.validate_python(email)
    except ValidationError:
        return False
    return True


class AuthService(Protocol):
    """What the flow controller calls. Either call may suspend for any duration."""

    async def request_code(self, email: str) -> AuthResult:
        """Send a one-time code to ``email``. Fails when the email is malformed."""
        ...

    async def verify_code(self, email: str, code: str) -> AuthResult:
        """Check ``code`` against the one sent to ``email``."""
        ...


class DemoAuthService:
    """Local stand-in for a real backend: validates the email, accepts one fixed code."""

    def __init__(self, delay: float = DEMO_DELAY_S, code: str = DEMO_CODE):
        self._delay = delay
        self._code = code
        self.requested: list[str] = []
        self.verified: list[tuple[str, str]] = []

    async def request_code(self, email: str) -> AuthResult:
        self.requested.append(email)
        await asyncio.sleep(self._delay)
        if not is_well_formed_email(email):
            return AuthResult.from_error(InvalidEmail())
        return AuthResult.success()

    async def verify_code(self, email: str, code: str) -> AuthResult:
        self.verified.append((email, code))
        await asyncio.sleep(self._delay)
        if code != self._code:
            return AuthResult.from_error(InvalidCode())
        return AuthResult.success()


class HttpAuthService:
    """REST backend: POST /api/auth/magic-code/{request,verify}."""

    def __init__(self, http: HttpClient):
        self._http = http

    async def request_code(self, email: str) -> AuthResult:
        """Step 1: request a login code."""
        try:
            await self._http.post("/auth/magic-code/request", {"email": email})
        except MagicLoginError as e:
            if e.code != "http_error":
                raise
            return AuthResult.from_error(InvalidEmail(self._client_message(e)))
        return AuthResult.success()

    async def verify_code(self, email: str, code: str) -> AuthResult:
        """Step 2: verify the code sent to ``email``."""
        try:
            await self._http.post("/auth/magic-code/verify", {"email": email, "code": code})
        except MagicLoginError as e:
            if e.code != "http_error":
                raise
            return AuthResult.from_error(InvalidCode(self._client_message(e)))
        return AuthResult.success()

    @staticmethod
    def _client_message(e: MagicLoginError) -> Optional[str]:
        status = (e.details or {}).get("status", 0)
        if 400 <= status < 500 and e.message:
            return e.message
        logger.warning(f"Auth backend answered HTTP {status}: {e.message}")
        return None

    async def close(self) -> None:
        await self._http.close()
