from collections.abc import Awaitable, Callable
from typing import Any

from typing_extensions import Doc as Doc

RouteParams = dict[str, str]

Next = Callable[[], Awaitable[None]]

Handler = Callable[[Any, Next], Awaitable[None] | None]
MountHandler = Callable[[Any, Next, str | None], Awaitable[None]]

Responder = Callable[[Any], Awaitable[Any] | Any]
