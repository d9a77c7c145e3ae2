from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class PathMatcherProtocol(Protocol):  # pragma: no cover
    """
    A compiled path pattern as consumed by `Layer.match`.

    `keys` lists the declared parameters in order; each entry only needs a
    `name` attribute. `test()` returns the positional captures of a matching
    path (`None` for groups that did not participate) or `None`.
    """

    keys: Sequence[Any]

    def test(self, path: str) -> Sequence[str | None] | None: ...


class MatcherFactory(Protocol):  # pragma: no cover
    """
    Compiles a pattern into a `PathMatcherProtocol`. The default is
    `strata._internal._path.compile_path`.
    """

    def __call__(
        self,
        pattern: str,
        *,
        delimiter: str,
        end: bool,
        strict: bool,
        sensitive: bool,
    ) -> PathMatcherProtocol: ...
