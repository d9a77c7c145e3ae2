from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any


def get_name(handler: Callable[..., Any]) -> str:
    """
    Returns the name of a given handler.
    """
    if hasattr(handler, "func"):
        handler = handler.func

    return (
        handler.__name__
        if inspect.isroutine(handler) or inspect.isclass(handler)
        else handler.__class__.__name__
    )
