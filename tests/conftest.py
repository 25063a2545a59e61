"""Shared test doubles."""

import asyncio
from typing import Optional

import pytest

from magic_login.models.auth import AuthResult


class GatedAuthService:
    """Auth service whose calls stay outstanding until the test releases them."""

    def __init__(self) -> None:
        self.requested: list[str] = []
        self.verified: list[tuple[str, str]] = []
        self._pending: list[asyncio.Future] = []
        self._called: Optional[asyncio.Event] = None

    def _event(self) -> asyncio.Event:
        if self._called is None:
            self._called = asyncio.Event()
        return self._called

    async def _wait(self) -> AuthResult:
        fut = asyncio.get_running_loop().create_future()
        self._pending.append(fut)
        self._event().set()
        return await fut

    async def request_code(self, email: str) -> AuthResult:
        self.requested.append(email)
        return await self._wait()

    async def verify_code(self, email: str, code: str) -> AuthResult:
        self.verified.append((email, code))
        return await self._wait()

    async def called(self) -> None:
        """Wait until a call is outstanding."""
        while not self._pending:
            event = self._event()
            event.clear()
            await event.wait()

    def release(self, result: AuthResult) -> None:
        self._pending.pop(0).set_result(result)

    def fail(self, exc: Exception) -> None:
        self._pending.pop(0).set_exception(exc)


class RedirectRecorder:
    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> None:
        self.calls += 1


class StateLog:
    """Collects every state a controller publishes."""

    def __init__(self) -> None:
        self.states: list = []

    def __call__(self, state) -> None:
        self.states.append(state)

    @property
    def phases(self) -> list[str]:
        return [s.phase for s in self.states]


@pytest.fixture
def redirect() -> RedirectRecorder:
    return RedirectRecorder()


@pytest.fixture
def gated_auth() -> GatedAuthService:
    return GatedAuthService()
