from __future__ import annotations

from typing import Any


class StrataException(Exception):
    def __init__(self, *args: Any, detail: str = ""):
        self.detail = detail
        super().__init__(*(str(arg) for arg in args if arg), self.detail)

    def __repr__(self) -> str:  # pragma: no cover
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return "".join(self.args).strip()


class ImproperlyConfigured(StrataException, ValueError):
    """
    Raised when a router, layer or setting is registered with values
    that can never dispatch correctly.
    """


class NextCalledMultipleTimes(StrataException, RuntimeError):
    """
    Raised when a handler invokes the same continuation more than once,
    typically by both awaiting `next()` and falling through to it again.
    """

    detail = "next() called multiple times"

    def __init__(self, *args: Any, detail: str | None = None) -> None:
        super().__init__(*args, detail=detail or self.detail)


class NoMatchFound(StrataException, LookupError):
    """
    Raised by `Router.named(name)` if no layer was registered with the given name.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(detail=f'No layer exists for name "{name}".')
