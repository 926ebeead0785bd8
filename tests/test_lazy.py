"""Tests for the once-initialized async holder."""

import asyncio

import pytest

from cosmos_adapter.lazy import AsyncLazy


@pytest.mark.asyncio
async def test_concurrent_first_calls_share_one_build():
    builds = []

    async def factory():
        builds.append(1)
        await asyncio.sleep(0.01)
        return object()

    lazy = AsyncLazy(factory)
    first, second, third = await asyncio.gather(lazy.get(), lazy.get(), lazy.get())

    assert first is second is third
    assert len(builds) == 1
    assert lazy.peek() is first


@pytest.mark.asyncio
async def test_failed_build_is_retried():
    attempts = []

    async def factory():
        attempts.append(1)
        if len(attempts) == 1:
            raise RuntimeError("first attempt fails")
        return "ready"

    lazy = AsyncLazy(factory)
    with pytest.raises(RuntimeError):
        await lazy.get()
    assert not lazy.initialized

    assert await lazy.get() == "ready"
    assert len(attempts) == 2


@pytest.mark.asyncio
async def test_reset_returns_previous_value():
    async def factory():
        return "value"

    lazy = AsyncLazy(factory)
    assert await lazy.reset() is None

    await lazy.get()
    assert await lazy.reset() == "value"
    assert lazy.peek() is None
    assert not lazy.initialized


@pytest.mark.asyncio
async def test_reset_waits_for_build_in_progress():
    """A value finished during reset is returned to the caller, not cached."""
    release = asyncio.Event()

    async def factory():
        await release.wait()
        return "session"

    lazy = AsyncLazy(factory)
    building = asyncio.ensure_future(lazy.get())
    await asyncio.sleep(0)
    resetting = asyncio.ensure_future(lazy.reset())
    await asyncio.sleep(0)
    assert not resetting.done()

    release.set()
    assert await building == "session"
    assert await resetting == "session"
    assert lazy.peek() is None
    assert not lazy.initialized


def test_holder_created_outside_event_loop():
    """The lock binds to the loop that first awaits it."""
    builds = []

    async def factory():
        builds.append(1)
        await asyncio.sleep(0)
        return "value"

    lazy = AsyncLazy(factory)

    async def use():
        return await asyncio.gather(lazy.get(), lazy.get())

    assert asyncio.run(use()) == ["value", "value"]
    assert len(builds) == 1
