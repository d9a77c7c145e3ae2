from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Annotated, Any

from strata._internal._representation import Repr
from strata.conf import settings
from strata.context import Context
from strata.datastructures import ServerRequest
from strata.exceptions import ImproperlyConfigured, NoMatchFound
from strata.logging import logger
from strata.protocols.matcher import MatcherFactory
from strata.routing.compose import compose
from strata.routing.handlers import Middleware, Mount, Plain, as_middleware
from strata.routing.layer import Layer
from strata.routing.mixins import PathOrPaths, RoutingMethodsMixin
from strata.types import Doc, Next, Responder


@dataclass(frozen=True)
class RouterOptions:
    """
    Options applied to every layer a router creates.
    """

    prefix: str | None = None
    delimiter: str = "/"
    sensitive: bool = False
    strict: bool = False
    cache: bool = True
    matcher: MatcherFactory | None = None


class Router(RoutingMethodsMixin, Repr):
    """
    An ordered registry of layers.

    Registration order is dispatch priority. A router only aggregates: every
    bit of matching happens in its layers, and `routes()` turns the whole
    router into a single mountable handler for another router.

    **Example**

    ```python
    from strata.routing import Router

    users = Router().get("/:id", show_user)

    router = (
        Router()
        .use(timing)
        .use("/users", users.routes())
        .get("(.*)", not_found)
    )

    await router.dispatch(context)
    ```
    """

    __slots__ = ("route_options", "_stack")
    __repr_fields__ = ("route_options",)

    def __init__(
        self,
        prefix: Annotated[
            str | None,
            Doc(
                """
                A path prefix prepended to the pattern of every layer registered
                in this router.
                """
            ),
        ] = None,
        delimiter: Annotated[
            str | None,
            Doc(
                """
                The segment delimiter. Defaults to `settings.default_delimiter`.
                """
            ),
        ] = None,
        *,
        sensitive: Annotated[
            bool | None,
            Doc(
                """
                Match paths case sensitively. Defaults to `settings.case_sensitive`.
                """
            ),
        ] = None,
        strict: Annotated[
            bool | None,
            Doc(
                """
                Reject paths with a trailing delimiter the pattern does not declare.
                Defaults to `settings.strict_slashes`.
                """
            ),
        ] = None,
        cache: Annotated[
            bool | None,
            Doc(
                """
                Memoise match results per layer. Defaults to `settings.enable_match_cache`.
                """
            ),
        ] = None,
        matcher: Annotated[
            MatcherFactory | None,
            Doc(
                """
                The factory compiling path patterns. Defaults to
                `strata._internal._path.compile_path`.
                """
            ),
        ] = None,
    ) -> None:
        self.route_options = RouterOptions(
            prefix=prefix,
            delimiter=settings.default_delimiter if delimiter is None else delimiter,
            sensitive=settings.case_sensitive if sensitive is None else sensitive,
            strict=settings.strict_slashes if strict is None else strict,
            cache=settings.enable_match_cache if cache is None else cache,
            matcher=matcher,
        )
        if not self.route_options.delimiter:
            raise ImproperlyConfigured(detail="The router delimiter cannot be empty.")
        self._stack: list[Layer] = []

    @property
    def layers(self) -> tuple[Layer, ...]:
        return tuple(self._stack)

    def register(
        self,
        path: PathOrPaths,
        middleware: Sequence[Any],
        methods: Sequence[str],
        *,
        name: str | None = None,
        end: bool | None = None,
    ) -> Router:
        """
        Registers handlers for the given path(s) and methods.

        A list of paths registers the same handlers once per path. Within one
        registration, consecutive plain handlers share a layer while every
        mount gets a layer of its own, matching as a prefix.

        Args:
            path (str | Sequence[str]): The path pattern(s).
            middleware (Sequence[Any]): Handlers, `Plain`/`Mount` values or bare callables.
            methods (Sequence[str]): The methods to match. Empty matches any method.
            name (str | None): Optional name carried by the created layers.
            end (bool | None): Whether plain layers must match the whole path.

        Returns:
            Router: The router itself, for chaining.
        """
        if not isinstance(path, str):
            paths = list(path)
            if not paths:
                raise ImproperlyConfigured(detail="At least one path must be provided.")
            for value in paths:
                self.register(value, middleware, methods, name=name, end=end)
            return self

        if not middleware:
            raise ImproperlyConfigured(detail=f"No handlers were given for the path '{path}'.")

        run: list[Middleware] = []
        for value in middleware:
            element = as_middleware(value)
            if isinstance(element, Plain):
                run.append(element)
                continue

            if run:
                self.add_layer(path, run, methods, name=name, end=end)
                run = []
            self.add_layer(path, [element], methods, name=name, end=False)

        if run:
            self.add_layer(path, run, methods, name=name, end=end)
        return self

    def add_layer(
        self,
        path: str,
        middleware: Sequence[Middleware],
        methods: Sequence[str],
        *,
        name: str | None = None,
        end: bool | None = None,
    ) -> Layer:
        options = self.route_options
        layer = Layer(
            path,
            methods,
            middleware,
            prefix=options.prefix,
            delimiter=options.delimiter,
            end=True if end is None else end,
            strict=options.strict,
            sensitive=options.sensitive,
            name=name,
            matcher=options.matcher,
            cache=options.cache,
        )
        self._stack.append(layer)
        logger.debug("Registered %r", layer)
        return layer

    async def dispatch(
        self,
        ctx: Context,
        last: Next | None = None,
        prefix: str | None = None,
    ) -> None:
        """
        Runs the context through every layer, in registration order.

        Args:
            ctx (Context): The request context.
            last (Next | None): Continuation to run when the layers are exhausted.
            prefix (str | None): The prefix accumulated by the parent routers,
                when mounted.
        """

        async def step(layer: Layer, call_next: Next) -> None:
            await layer.dispatch(ctx, call_next, prefix)

        await compose(self._stack, step, last)

    def routes(self, name: str | None = None) -> Mount:
        """
        Returns a mountable handler dispatching into this router.
        """

        async def dispatch(ctx: Context, call_next: Next, prefix: str | None = None) -> None:
            await self.dispatch(ctx, call_next, prefix)

        return Mount(handler=dispatch, name=name or self.__class__.__name__)

    def create_context(
        self,
        method: str,
        path: str,
        *,
        responder: Responder | None = None,
        **extra: Any,
    ) -> Context:
        """
        Builds a context for a synthetic request, attaching `extra` as
        attributes.
        """
        ctx = Context(ServerRequest(method=method, url=path), responder=responder)
        for key, value in extra.items():
            ctx.add_to_context(key, value)
        return ctx

    async def emit(
        self,
        method: str,
        path: str,
        *,
        responder: Responder | None = None,
        **extra: Any,
    ) -> Context:
        """
        Dispatches a synthetic request and returns its context.
        """
        ctx = self.create_context(method, path, responder=responder, **extra)
        await self.dispatch(ctx)
        return ctx

    def named(self, name: str) -> Layer:
        """
        Returns the first layer registered with `name` in this router.

        Raises:
            NoMatchFound: When no layer carries that name.
        """
        for layer in self._stack:
            if layer.name == name:
                return layer
        raise NoMatchFound(name)

    def __iter__(self) -> Iterator[Layer]:
        return iter(tuple(self._stack))

    def __len__(self) -> int:
        return len(self._stack)
