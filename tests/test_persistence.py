"""Async stores (variant A)."""

import pytest

from magic_login import FileEmailStore, FlowController, MemoryEmailStore, StorageError
from magic_login.auth import DemoAuthService


class TestMemoryEmailStore:
    @pytest.mark.asyncio
    async def test_write_read_clear(self):
        store = MemoryEmailStore()
        assert await store.read() is None
        await store.write("a@b.com")
        assert await store.read() == "a@b.com"
        await store.clear()
        assert await store.read() is None
        assert [op for op, _ in store.operations] == ["read", "write", "read", "clear", "read"]


class TestFileEmailStore:
    @pytest.mark.asyncio
    async def test_missing_file_reads_as_empty(self, tmp_path):
        store = FileEmailStore(tmp_path / "state.json")
        assert await store.read() is None

    @pytest.mark.asyncio
    async def test_round_trip_across_instances(self, tmp_path):
        path = tmp_path / "nested" / "state.json"
        await FileEmailStore(path).write("a@b.com")

        assert await FileEmailStore(path).read() == "a@b.com"

        await FileEmailStore(path).clear()
        assert not path.exists()
        await FileEmailStore(path).clear()

    @pytest.mark.asyncio
    async def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{not json")
        assert await FileEmailStore(path).read() is None

    @pytest.mark.asyncio
    async def test_unwritable_location_raises_storage_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        store = FileEmailStore(blocker / "state.json")
        with pytest.raises(StorageError):
            await store.write("a@b.com")
        with pytest.raises(StorageError):
            await store.read()

    @pytest.mark.asyncio
    async def test_reload_resumes_code_input(self, tmp_path):
        path = tmp_path / "state.json"
        redirect = lambda: None  # noqa: E731

        async with FlowController(DemoAuthService(delay=0), FileEmailStore(path), redirect) as first:
            await first.submit_email("a@b.com")

        async with FlowController(DemoAuthService(delay=0), FileEmailStore(path), redirect, settle_delay=0) as second:
            assert second.state.phase == "awaiting-code-input"
            assert second.state.email == "a@b.com"
            await second.submit_code("12345")
            await second.redirect_task

        assert not path.exists()

    @pytest.mark.asyncio
    async def test_storage_failure_does_not_break_the_flow(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        store = FileEmailStore(blocker / "state.json")
        async with FlowController(DemoAuthService(delay=0), store, lambda: None) as flow:
            await flow.submit_email("a@b.com")
            assert flow.state.phase == "awaiting-code-input"
