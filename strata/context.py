from __future__ import annotations

import inspect
import warnings
from typing import Annotated, Any
from urllib.parse import urlsplit

from strata.datastructures import ServerRequest, State
from strata.types import Doc, Responder, RouteParams


class Context:
    """
    `Context` is the per-request carrier threaded through every layer
    and handler of a dispatch.

    The transport creates one per inbound request, hands it to
    `Router.dispatch` and drops it once the chain completes. Layers merge
    the parameters they extract into `params`; handlers share data through
    `state` and finish the request with `respond()`.

    **Example**

    ```python
    from strata.context import Context
    from strata.datastructures import ServerRequest


    async def send(response): ...


    context = Context(ServerRequest("GET", "http://localhost/users/1"), responder=send)
    await router.dispatch(context)
    ```
    """

    def __init__(
        self,
        request: Annotated[
            ServerRequest | Any,
            Doc(
                """
                The inbound request. Anything exposing `method` and `url`
                attributes is accepted.
                """
            ),
        ],
        responder: Annotated[
            Responder | None,
            Doc(
                """
                Callable used by `respond()` to hand the response back to the transport.
                Its return value (awaited when awaitable) is the completion signal.
                """
            ),
        ] = None,
        state: Annotated[
            dict[str, Any] | None,
            Doc(
                """
                Initial values for `context.state`.
                """
            ),
        ] = None,
    ) -> None:
        self.request = request
        self.method: str = str(request.method).upper()
        self.url: str = str(request.url)
        self.path: str = urlsplit(self.url).path or "/"
        self.params: RouteParams = {}
        self.state = State(state)
        self.responder = responder
        self.response: Any = None
        self.responded: bool = False

    async def respond(self, response: Any) -> Any:
        """
        Hands the response to the transport and returns its completion signal.

        Calling it more than once is allowed; the last response wins.
        """
        self.response = response
        self.responded = True
        if self.responder is None:
            return None

        result = self.responder(response)
        if inspect.isawaitable(result):
            return await result
        return result

    def add_to_context(
        self,
        key: Annotated[
            str,
            Doc(
                """
                The attribute name to be added to the context.
                """
            ),
        ],
        value: Annotated[
            Any,
            Doc(
                """
                The value to be attached under `key`.
                """
            ),
        ],
    ) -> None:
        """
        Attaches an extra attribute to the context.

        Useful when the transport wants to expose its own objects (the raw
        event, a connection) to the handlers.
        """
        if key in self.__dict__:
            warnings.warn(
                f"The key: '{key}' already exists in context and it will be overwritten.",
                stacklevel=2,
            )
        setattr(self, key, value)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(method={self.method!r}, path={self.path!r})"
