"""
Handler variants accepted by a layer stack.

A stack element is either a `Plain` handler, called as `handler(ctx, next)`,
or a `Mount`, called as `handler(ctx, next, prefix)` and standing for a whole
embedded router. Registration wraps bare callables into `Plain`; the layer
picks the calling convention with an `isinstance` check at dispatch time.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from strata.exceptions import ImproperlyConfigured
from strata.routing.types import get_name
from strata.types import Handler, MountHandler


@dataclass(frozen=True, slots=True)
class Plain:
    handler: Handler

    @property
    def name(self) -> str:
        return get_name(self.handler)


@dataclass(frozen=True, slots=True)
class Mount:
    handler: MountHandler
    name: str | None = None


Middleware = Plain | Mount


def mount(handler: MountHandler, name: str | None = None) -> Mount:
    """
    Tags any `(ctx, next, prefix)` callable as mountable.
    """
    if not callable(handler):
        raise ImproperlyConfigured(detail=f"{handler!r} is not callable and cannot be mounted.")
    return Mount(handler=handler, name=name or get_name(handler))


def as_middleware(value: Middleware | Callable[..., Any]) -> Middleware:
    """
    Normalises a registration argument into a stack element.
    """
    if isinstance(value, (Plain, Mount)):
        return value
    if callable(value):
        return Plain(handler=value)
    raise ImproperlyConfigured(
        detail=f"Handlers must be callables or mounts, got {type(value).__name__}."
    )
