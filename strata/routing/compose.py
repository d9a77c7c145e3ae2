from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from strata.exceptions import NextCalledMultipleTimes
from strata.types import Next

T = TypeVar("T")


async def compose(
    stack: Sequence[T],
    step: Callable[[T, Next], Awaitable[None]],
    last: Next | None = None,
) -> None:
    """
    Runs `stack` in onion order.

    `step(element, next)` is awaited for the first element; awaiting `next()`
    inside it runs the following element, and so on. Once the stack is
    exhausted `last()` runs, when given. An element that never awaits `next()`
    ends the chain there.

    Args:
        stack (Sequence[T]): The elements to run, snapshotted at call time.
        step (Callable): Knows how to run one element with its continuation.
        last (Next | None): Continuation to run after the last element.

    Raises:
        NextCalledMultipleTimes: When a continuation is invoked a second time.
    """
    if not stack:
        if last is not None:
            await last()
        return

    elements = tuple(stack)
    reached = -1

    async def dispatch(index: int) -> None:
        nonlocal reached

        if index <= reached:
            raise NextCalledMultipleTimes()
        reached = index

        if index == len(elements):
            if last is not None:
                await last()
            return

        async def call_next() -> None:
            await dispatch(index + 1)

        await step(elements[index], call_next)

    await dispatch(0)
