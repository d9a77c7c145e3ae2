from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from strata._internal._path import (
    WILDCARD,
    compile_path,
    decode_component,
    raise_for_duplicate_params,
)
from strata._internal._representation import Repr
from strata.compat import run_handler
from strata.context import Context
from strata.logging import logger
from strata.protocols.matcher import MatcherFactory, PathMatcherProtocol
from strata.routing.cache import NO_MATCH, MatchCache, MatchResult
from strata.routing.compose import compose
from strata.routing.handlers import Middleware, Mount, as_middleware
from strata.types import Next, RouteParams


class Layer(Repr):
    """
    One registered route: a method set, a path pattern and the ordered
    stack of handlers that runs when both match.

    An empty method set matches any method. Layers created for mounted
    routers are built with `end=False` so that every sub-path under the
    pattern reaches them.

    **Example**

    ```python
    from strata.routing import Layer

    layer = Layer("/users/:id", ["GET"], [show_user])
    layer.match("GET", "/users/42").params  # {"id": "42"}
    ```
    """

    __slots__ = (
        "path",
        "pattern",
        "methods",
        "stack",
        "name",
        "delimiter",
        "end",
        "strict",
        "sensitive",
        "matcher",
        "cache",
        "wildcard",
    )
    __repr_fields__ = ("name", "path", "methods", "end")

    def __init__(
        self,
        path: str,
        methods: Iterable[str] | None = None,
        middleware: Sequence[Any] = (),
        *,
        prefix: str | None = None,
        delimiter: str = "/",
        end: bool = True,
        strict: bool = False,
        sensitive: bool = False,
        name: str | None = None,
        matcher: MatcherFactory | None = None,
        cache: bool = True,
    ) -> None:
        self.path = path
        # A wildcard layer contributes nothing to the pattern but its router prefix.
        self.wildcard = path == WILDCARD
        self.pattern = (prefix or "") if self.wildcard else f"{prefix or ''}{path}"
        self.methods: frozenset[str] = frozenset(str(method).upper() for method in methods or ())
        self.stack: tuple[Middleware, ...] = tuple(as_middleware(value) for value in middleware)
        self.name = name
        self.delimiter = delimiter
        self.end = end
        self.strict = strict
        self.sensitive = sensitive
        self.matcher: MatcherFactory = matcher or compile_path
        self.cache = MatchCache(enabled=cache)

        if self.pattern:
            # Names are unique per registration. A mount prefix may repeat them and
            # the innermost capture wins.
            matcher = self.compile(self.pattern, end and not self.wildcard)
            names = [str(key.name) for key in matcher.keys]
            raise_for_duplicate_params(
                self.pattern, {name for name in names if names.count(name) > 1}
            )

    def match(
        self,
        method: str | None = None,
        path: str | None = None,
        prefix: str | None = None,
    ) -> MatchResult:
        """
        Matches a request method and path against this layer.

        Args:
            method (str | None): The request method. `None` skips the method filter.
            path (str | None): The request path.
            prefix (str | None): The prefix accumulated by the routers this
                layer is mounted under.

        Returns:
            MatchResult: Whether the layer matched and the extracted parameters.
        """
        if method is not None and self.methods and method.upper() not in self.methods:
            return NO_MATCH

        prefix = prefix or ""
        path = path or ""
        pattern = f"{prefix}{self.pattern}"

        if self.wildcard:
            if not pattern:
                return MatchResult(matched=True)
            end = False
        else:
            end = self.end

        return self.cache.get_or_compute(
            (prefix, self.pattern, path), lambda: self.compute_match(pattern, path, end)
        )

    def compile(self, pattern: str, end: bool) -> PathMatcherProtocol:
        return self.matcher(
            pattern,
            delimiter=self.delimiter,
            end=end,
            strict=self.strict,
            sensitive=self.sensitive,
        )

    def compute_match(self, pattern: str, path: str, end: bool) -> MatchResult:
        matcher = self.compile(pattern, end)
        captures = matcher.test(path)
        if captures is None:
            return NO_MATCH

        params: RouteParams = {}
        for key, value in zip(matcher.keys, captures, strict=False):
            if value is not None:
                params[str(key.name)] = decode_component(value)
        return MatchResult(matched=True, params=params)

    async def dispatch(
        self,
        ctx: Context,
        last: Next | None = None,
        prefix: str | None = None,
    ) -> None:
        """
        Runs the stack of this layer when it matches the context.

        An unmatched layer hands control straight to `last`. A matched one
        merges its parameters into `ctx.params` and runs its stack, falling
        through to `last` once the stack is exhausted.
        """
        result = self.match(ctx.method, ctx.path, prefix)

        if not result.matched:
            if last is not None:
                await last()
            return

        ctx.params.update(result.params)

        async def step(middleware: Middleware, call_next: Next) -> None:
            if isinstance(middleware, Mount):
                # Never stored: the same layer can be reached under different prefixes.
                mount_prefix = f"{prefix or ''}{self.pattern}"
                self.log(ctx, mount_prefix, middleware.name)
                await run_handler(middleware.handler, ctx, call_next, mount_prefix)
                return

            self.log(ctx, f"{prefix or ''}{self.pattern}", middleware.name)
            await run_handler(middleware.handler, ctx, call_next)

        await compose(self.stack, step, last)

    def log(self, ctx: Context, prefix: str, name: str | None = None) -> None:
        logger.debug("[%s:%s] %s (%s)", ctx.method, ctx.url, prefix, name or "unknown")
