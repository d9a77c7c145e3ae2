from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import TYPE_CHECKING, Any

from strata.compat import is_async_callable
from strata.conf import _monkay as monkay_for_settings

if TYPE_CHECKING:
    from strata.conf.global_settings import Settings


class override_settings:
    """
    Temporarily overrides Strata settings.

    Works as a context manager, an async context manager and a decorator
    of both sync and async functions.

    ```python
    with override_settings(case_sensitive=True):
        router = Router()


    @override_settings(enable_match_cache=False)
    async def test_without_cache(): ...
    ```
    """

    def __init__(self, **kwargs: Any) -> None:
        self.options = kwargs
        self._innermanager: Any = None

    async def __aenter__(self) -> None:
        return self.__enter__()

    async def __aexit__(self, exc_type: Any, exc_value: Any, traceback: Any) -> None:
        self.__exit__(exc_type, exc_value, traceback)

    def __enter__(self) -> None:
        """
        Builds a copy of the active settings with the overridden values and
        makes it the active one until exit.
        """
        _original_settings: Settings = monkay_for_settings.settings
        opts = _original_settings.dict()
        opts.update(self.options)
        self._innermanager = monkay_for_settings.with_settings(
            _original_settings.__class__(**opts)
        )
        self._innermanager.__enter__()

    def __exit__(self, exc_type: Any, exc_value: Any, traceback: Any) -> None:
        self._innermanager.__exit__(exc_type, exc_value, traceback)

    def __call__(self, func: Callable[..., Any]) -> Callable[..., Any]:
        if is_async_callable(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                async with self:
                    return await func(*args, **kwargs)

            return async_wrapper

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with self:
                return func(*args, **kwargs)

        return sync_wrapper
