from __future__ import annotations

from copy import copy
from dataclasses import dataclass
from typing import Any


class State:
    """
    An object that can be used to store arbitrary state.

    Used for `context.state`, where handlers leave values for the
    handlers running after them.
    """

    _state: dict[str, Any]

    def __init__(self, state: dict[str, Any] | None = None):
        if state is None:
            state = {}
        super().__setattr__("_state", state)

    def __setattr__(self, key: Any, value: Any) -> None:
        object.__getattribute__(self, "_state")[key] = value

    def __getattribute__(self, key: Any) -> Any:
        state = object.__getattribute__(self, "_state")

        if key in state:
            return state[key]

        return object.__getattribute__(self, key)

    def __delattr__(self, key: Any) -> None:
        del self._state[key]

    def __copy__(self) -> State:
        return self.__class__(copy(self._state))

    def __len__(self) -> int:
        return len(self._state)

    def __contains__(self, key: str) -> bool:
        return key in self._state

    def __getitem__(self, key: str) -> Any:
        return self._state[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._state[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self._state.get(key, default)

    def copy(self) -> State:
        return copy(self)


@dataclass(frozen=True)
class ServerRequest:
    """
    The minimum a transport has to hand over for a request to be dispatched.

    `url` may be absolute (`http://localhost:8080/foo?x=1`) or just a path.
    """

    method: str
    url: str
