"""
Integration tests against a real magic-code auth backend.

Requires environment variables:
  MAGIC_LOGIN_BASE_URL   backend base URL
  MAGIC_LOGIN_TEST_EMAIL address the backend accepts
  MAGIC_LOGIN_TEST_CODE  (optional) a code the backend accepts for that address

Run: MAGIC_LOGIN_INTEGRATION=1 pytest tests/integration/ -v
"""

import os

import pytest

from magic_login import FlowController, HttpAuthService, MemoryEmailStore, SharedEmailStore
from magic_login.transport.http import HttpClient

SKIP = not os.environ.get("MAGIC_LOGIN_INTEGRATION")
BASE_URL = os.environ.get("MAGIC_LOGIN_BASE_URL", "")
EMAIL = os.environ.get("MAGIC_LOGIN_TEST_EMAIL", "")
CODE = os.environ.get("MAGIC_LOGIN_TEST_CODE", "")

pytestmark = pytest.mark.skipif(SKIP, reason="MAGIC_LOGIN_INTEGRATION not set")


def make_service() -> HttpAuthService:
    return HttpAuthService(HttpClient(BASE_URL))


class TestRequestCode:
    @pytest.mark.asyncio
    async def test_accepts_configured_email(self):
        service = make_service()
        try:
            result = await service.request_code(EMAIL)
        finally:
            await service.close()
        assert result.ok, result.error

    @pytest.mark.asyncio
    async def test_rejects_malformed_email(self):
        service = make_service()
        try:
            result = await service.request_code("not-an-email")
        finally:
            await service.close()
        assert not result.ok
        assert result.error


class TestFullFlow:
    @pytest.mark.asyncio
    async def test_wrong_code_keeps_email(self):
        service = make_service()
        try:
            async with FlowController(service, MemoryEmailStore(), lambda: None) as flow:
                await flow.submit_email(EMAIL)
                assert flow.state.phase == "awaiting-code-input"

                await flow.submit_code("not-the-code")
                assert flow.state.phase == "awaiting-code-input"
                assert flow.state.email == EMAIL
                assert flow.state.error
        finally:
            await service.close()

    @pytest.mark.skipif(not CODE, reason="MAGIC_LOGIN_TEST_CODE not set")
    @pytest.mark.asyncio
    async def test_valid_code_succeeds(self):
        service = make_service()
        redirected = []
        store = SharedEmailStore(email=EMAIL)
        try:
            async with FlowController(service, store, lambda: redirected.append(True), settle_delay=0) as flow:
                await flow.submit_code(CODE)
                assert flow.state.phase == "success"
                await flow.redirect_task
        finally:
            await service.close()
        assert redirected == [True]
        assert store.read() is None
