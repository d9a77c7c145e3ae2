from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from strata._internal._path import WILDCARD
from strata.enums import WRITE_METHODS, HTTPMethod

PathOrPaths = str | Sequence[str]


class RoutingMethodsMixin:
    """
    Per-verb registration sugar over `register`.

    Every method accepts a path (or a list of paths) followed by handlers and
    returns the router, so calls can be chained. Called without handlers they
    return a decorator instead:

    ```python
    router = Router().get("/", home).post("/users", create_user)


    @router.get("/users/:id", name="user")
    async def show_user(ctx, next): ...
    ```
    """

    def head(self, path: PathOrPaths, *handlers: Any, name: str | None = None) -> Any:
        """
        Registers handlers for `HEAD` requests.
        """
        return self.forward_route(path, handlers, [HTTPMethod.HEAD.value], name=name)

    def options(self, path: PathOrPaths, *handlers: Any, name: str | None = None) -> Any:
        """
        Registers handlers for `OPTIONS` requests.
        """
        return self.forward_route(path, handlers, [HTTPMethod.OPTIONS.value], name=name)

    def get(self, path: PathOrPaths, *handlers: Any, name: str | None = None) -> Any:
        """
        Registers handlers for `GET` requests.
        """
        return self.forward_route(path, handlers, [HTTPMethod.GET.value], name=name)

    def put(self, path: PathOrPaths, *handlers: Any, name: str | None = None) -> Any:
        """
        Registers handlers for `PUT` requests.
        """
        return self.forward_route(path, handlers, [HTTPMethod.PUT.value], name=name)

    def patch(self, path: PathOrPaths, *handlers: Any, name: str | None = None) -> Any:
        """
        Registers handlers for `PATCH` requests.
        """
        return self.forward_route(path, handlers, [HTTPMethod.PATCH.value], name=name)

    def post(self, path: PathOrPaths, *handlers: Any, name: str | None = None) -> Any:
        """
        Registers handlers for `POST` requests.
        """
        return self.forward_route(path, handlers, [HTTPMethod.POST.value], name=name)

    def delete(self, path: PathOrPaths, *handlers: Any, name: str | None = None) -> Any:
        """
        Registers handlers for `DELETE` requests.
        """
        return self.forward_route(path, handlers, [HTTPMethod.DELETE.value], name=name)

    def all(self, path: PathOrPaths, *handlers: Any, name: str | None = None) -> Any:
        """
        Registers handlers for `DELETE`, `GET`, `POST` and `PUT` requests.

        `HEAD`, `OPTIONS` and `PATCH` are not part of the set.
        """
        return self.forward_route(path, handlers, sorted(WRITE_METHODS), name=name)

    def use(self, path_or_handler: Any = None, *handlers: Any) -> Any:
        """
        Registers handlers for every method, matching the path as a prefix
        so that deeper paths reach them too.

        The path is optional and defaults to the catch-all wildcard:

        ```python
        router.use(timing)
        router.use("/admin", require_login, admin_router.routes())
        ```
        """
        if path_or_handler is None:
            path: PathOrPaths = WILDCARD
        elif isinstance(path_or_handler, (str, list, tuple)):
            path = path_or_handler
        else:
            path = WILDCARD
            handlers = (path_or_handler, *handlers)
        return self.forward_route(path, handlers, [], end=False)

    def forward_route(
        self,
        path: PathOrPaths,
        handlers: Sequence[Any],
        methods: list[str],
        name: str | None = None,
        end: bool | None = None,
    ) -> Any:
        if handlers:
            return self.register(path, list(handlers), methods, name=name, end=end)

        def wrapper(func: Callable[..., Any]) -> Callable[..., Any]:
            self.register(path, [func], methods, name=name, end=end)
            return func

        return wrapper

    def register(
        self,
        path: PathOrPaths,
        middleware: Sequence[Any],
        methods: Sequence[str],
        *,
        name: str | None = None,
        end: bool | None = None,
    ) -> Any:
        raise NotImplementedError()  # pragma: no cover
