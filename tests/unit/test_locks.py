"""Tests for the keyed order lock."""

import asyncio

import pytest

from orderdesk.application.locks import KeyedLock, get_order_locks


class TestKeyedLock:
    @pytest.mark.asyncio
    async def test_same_key_serializes(self):
        locks = KeyedLock()
        events: list[str] = []

        async def worker(name: str):
            async with locks.hold(("sale", "1")):
                events.append(f"{name}-in")
                await asyncio.sleep(0.01)
                events.append(f"{name}-out")

        await asyncio.gather(worker("a"), worker("b"))

        assert events in (
            ["a-in", "a-out", "b-in", "b-out"],
            ["b-in", "b-out", "a-in", "a-out"],
        )

    @pytest.mark.asyncio
    async def test_different_keys_overlap(self):
        locks = KeyedLock()
        inside = asyncio.Event()
        release = asyncio.Event()

        async def first():
            async with locks.hold(("sale", "1")):
                inside.set()
                await release.wait()

        async def second():
            await inside.wait()
            async with locks.hold(("social_order", "1")):
                release.set()

        await asyncio.wait_for(asyncio.gather(first(), second()), timeout=1)

    @pytest.mark.asyncio
    async def test_lock_dropped_after_use(self):
        locks = KeyedLock()
        async with locks.hold("k"):
            assert len(locks) == 1
        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_lock_dropped_after_error(self):
        locks = KeyedLock()
        with pytest.raises(RuntimeError):
            async with locks.hold("k"):
                raise RuntimeError("boom")
        assert len(locks) == 0

    def test_process_registry_is_singleton(self):
        assert get_order_locks() is get_order_locks()
