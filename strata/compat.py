from __future__ import annotations

import functools
import inspect
from collections.abc import Awaitable, Callable
from typing import Any

import anyio


def is_async_callable(obj: Any) -> bool:
    """
    Validates if a given object is an async callable or not.
    """
    while isinstance(obj, functools.partial):
        obj = obj.func

    return inspect.iscoroutinefunction(obj) or (
        callable(obj) and inspect.iscoroutinefunction(obj.__call__)
    )


async def run_handler(
    handler: Callable[..., Any], ctx: Any, call_next: Callable[[], Awaitable[None]], *args: Any
) -> Any:
    """
    Invokes a handler that may be either sync or async as
    `handler(ctx, next, *args)`.

    Sync handlers run inline on the event loop. Any awaitable they return,
    usually the continuation (`lambda ctx, next: next()`), is awaited before
    this call completes. A continuation a sync handler started without
    returning it (`def mw(ctx, next): next()`) is awaited afterwards, so the
    chain still runs.
    """
    if is_async_callable(handler):
        return await handler(ctx, call_next, *args)

    started: list[Any] = []

    def tracked_next() -> Awaitable[None]:
        continuation = call_next()
        started.append(continuation)
        return continuation

    result = handler(ctx, tracked_next, *args)
    if inspect.isawaitable(result):
        result = await result

    for continuation in started:
        if inspect.iscoroutine(continuation) and (
            inspect.getcoroutinestate(continuation) == inspect.CORO_CREATED
        ):
            await continuation
    return result


def run_sync(fn: Callable[..., Any] | Awaitable, *args: Any, **kwargs: Any) -> Any:
    """
    Run an async function or coroutine object from sync code.

    - `run_sync(router.emit, "GET", "/")` calls `anyio.run(router.emit, "GET", "/")`.
    - `run_sync(router.emit("GET", "/"))` runs the coroutine object directly.
    """
    if inspect.iscoroutine(fn):
        wrapper_fn: Callable[[], Awaitable[Any]] = lambda: fn  # noqa: E731
    elif inspect.iscoroutinefunction(fn):
        wrapper_fn = lambda: fn(*args, **kwargs)  # noqa: E731
    else:
        raise TypeError(
            f"run_sync() expects an async function or coroutine object; got {type(fn)}"
        )
    return anyio.run(wrapper_fn)
