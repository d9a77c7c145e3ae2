from __future__ import annotations

import anyio
import pytest

from strata.exceptions import NextCalledMultipleTimes
from strata.routing import compose

pytestmark = pytest.mark.anyio


async def run_element(element, next):
    await element(next)


async def test_empty_stack_runs_fallback():
    calls: list[str] = []

    async def last():
        calls.append("last")

    await compose([], run_element, last)

    assert calls == ["last"]


async def test_empty_stack_without_fallback_is_a_noop():
    await compose([], run_element)


@pytest.mark.parametrize("size", [1, 2, 5])
async def test_every_element_runs_once_in_order_before_fallback(size):
    calls: list[object] = []

    def element(index):
        async def run(next):
            calls.append(index)
            await next()

        return run

    async def last():
        calls.append("last")

    await compose([element(index) for index in range(size)], run_element, last)

    assert calls == [*range(size), "last"]


@pytest.mark.parametrize("size", [1, 2, 5])
async def test_next_called_twice_raises(size):
    async def passthrough(next):
        await next()

    async def twice(next):
        await next()
        await next()

    stack = [passthrough] * (size - 1) + [twice]

    with pytest.raises(NextCalledMultipleTimes):
        await compose(stack, run_element)


async def test_next_called_twice_by_first_element_of_longer_stack():
    async def twice(next):
        await next()
        await next()

    async def passthrough(next):
        await next()

    with pytest.raises(NextCalledMultipleTimes):
        await compose([twice, passthrough, passthrough], run_element)


async def test_element_not_calling_next_stops_the_chain():
    calls: list[str] = []

    async def stop(next):
        calls.append("stop")

    async def never(next):  # pragma: no cover
        calls.append("never")

    async def last():  # pragma: no cover
        calls.append("last")

    await compose([stop, never], run_element, last)

    assert calls == ["stop"]


async def test_waits_for_async_work_before_completing():
    calls: list[str] = []

    async def slow(next):
        await anyio.sleep(0.01)
        calls.append("slow")
        await next()
        await anyio.sleep(0.01)
        calls.append("slow:after")

    async def fast(next):
        calls.append("fast")
        await next()

    await compose([slow, fast], run_element)

    assert calls == ["slow", "fast", "slow:after"]


async def test_failure_propagates():
    async def failing(next):
        raise ValueError("broken")

    with pytest.raises(ValueError, match="broken"):
        await compose([failing], run_element)


async def test_stack_is_snapshotted():
    calls: list[str] = []
    stack = []

    async def first(next):
        calls.append("first")
        stack.append(second)
        await next()

    async def second(next):  # pragma: no cover
        calls.append("second")

    stack.append(first)

    await compose(stack, run_element)

    assert calls == ["first"]
