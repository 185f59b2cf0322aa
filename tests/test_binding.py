"""Tests for the find-or-create-once remote file binding."""

from __future__ import annotations

import asyncio

import pytest

from vita.errors import RemoteReadError, RemoteWriteError
from vita.store.binding import BindingState, RemoteFileBinding
from conftest import DOC_NAME, FakeRemote


class LostResponseRemote(FakeRemote):
    """The first create is stored remotely but the caller sees a failure."""

    async def create(self, name: str, content: bytes) -> str:
        file_id = await super().create(name, content)
        if len(self.creates) == 1:
            raise RemoteWriteError("connection reset", status=None)
        return file_id


class TestResolve:
    @pytest.mark.asyncio
    async def test_absent_does_not_create(self, remote: FakeRemote, binding: RemoteFileBinding):
        assert binding.state is BindingState.UNRESOLVED
        assert await binding.resolve() is None
        assert binding.state is BindingState.ABSENT
        assert remote.creates == []

    @pytest.mark.asyncio
    async def test_binds_first_match(self, remote: FakeRemote, binding: RemoteFileBinding):
        file_id = remote.seed({"version": "1.4"})
        remote.seed({"version": "1.4"})  # a stray duplicate
        assert await binding.resolve() == file_id
        assert binding.state is BindingState.BOUND
        assert binding.file_id == file_id

    @pytest.mark.asyncio
    async def test_memoized_once_bound(self, remote: FakeRemote, binding: RemoteFileBinding):
        remote.seed({})
        await binding.resolve()
        await binding.resolve()
        assert remote.calls.count(("find", DOC_NAME)) == 1

    @pytest.mark.asyncio
    async def test_ignores_other_names(self, remote: FakeRemote, binding: RemoteFileBinding):
        remote.seed({}, name="something-else.json")
        assert await binding.resolve() is None


class TestRead:
    @pytest.mark.asyncio
    async def test_read_unbound_raises(self, binding: RemoteFileBinding):
        with pytest.raises(RemoteReadError):
            await binding.read()

    @pytest.mark.asyncio
    async def test_read_bound(self, remote: FakeRemote, binding: RemoteFileBinding):
        remote.seed(b'{"version": "1.4"}')
        await binding.resolve()
        assert await binding.read() == b'{"version": "1.4"}'


class TestWrite:
    @pytest.mark.asyncio
    async def test_create_then_update(self, remote: FakeRemote, binding: RemoteFileBinding):
        await binding.resolve()
        first = await binding.write(b"{}")
        second = await binding.write(b'{"a": 1}')

        assert first == second
        assert len(remote.creates) == 1
        assert remote.updates == [("update", first, b'{"a": 1}')]

    @pytest.mark.asyncio
    async def test_unresolved_write_looks_up_first(
        self, remote: FakeRemote, binding: RemoteFileBinding
    ):
        file_id = remote.seed({})
        assert await binding.write(b"{}") == file_id
        assert remote.creates == []
        assert remote.calls[0] == ("find", DOC_NAME)

    @pytest.mark.asyncio
    async def test_concurrent_writes_create_once(
        self, remote: FakeRemote, binding: RemoteFileBinding
    ):
        await binding.resolve()
        ids = await asyncio.gather(*(binding.write(b"{}") for _ in range(5)))

        assert len(set(ids)) == 1
        assert len(remote.creates) == 1
        assert len(remote.updates) == 4
        assert remote.max_in_flight == 1

    @pytest.mark.asyncio
    async def test_failed_create_resolves_again(
        self, remote: FakeRemote, binding: RemoteFileBinding
    ):
        remote.fail_status = 403
        await binding.resolve()
        with pytest.raises(RemoteWriteError):
            await binding.write(b"{}")
        assert binding.state is BindingState.UNRESOLVED

        remote.fail_status = None
        file_id = await binding.write(b"{}")
        assert binding.state is BindingState.BOUND
        assert binding.file_id == file_id
        assert remote.calls.count(("find", DOC_NAME)) == 2

    @pytest.mark.asyncio
    async def test_create_landed_but_response_lost(self):
        remote = LostResponseRemote()
        binding = RemoteFileBinding(remote, DOC_NAME)
        await binding.resolve()
        with pytest.raises(RemoteWriteError):
            await binding.write(b"{}")

        file_id = await binding.write(b'{"a": 1}')
        assert len(remote.creates) == 1
        assert [name for name, _ in remote.files.values()] == [DOC_NAME]
        assert remote.updates == [("update", file_id, b'{"a": 1}')]
