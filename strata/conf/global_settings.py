from __future__ import annotations

import os
from types import UnionType
from typing import (
    Annotated,
    Any,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from strata import __version__
from strata.conf.enums import EnvironmentType
from strata.exceptions import ImproperlyConfigured
from strata.logging import LoggingConfig, StandardLoggingConfig
from strata.types import Doc


def safe_get_type_hints(cls: type) -> dict[str, Any]:
    """
    Safely get type hints for a class, falling back to the raw
    annotations when they cannot be resolved.
    """
    try:
        return get_type_hints(cls, include_extras=True)
    except Exception:
        return cls.__annotations__


class BaseSettings:
    """
    Base of all the settings.

    Every annotated attribute can be overridden by an environment variable
    with the same name in upper case (`DEFAULT_DELIMITER=.`), cast to the
    annotated type. Keyword arguments win over both.
    """

    __type_hints__: dict[str, Any] = None
    __truthy__: set[str] = {"true", "1", "yes", "on", "y"}

    def __init__(self, **kwargs: Any) -> None:
        cls = self.__class__
        if cls.__dict__.get("__type_hints__") is None:
            cls.__type_hints__ = safe_get_type_hints(cls)

        for key, typ in cls.__type_hints__.items():
            if key.startswith("__"):
                continue

            if key in kwargs:
                value = kwargs.pop(key)
            else:
                env_value = os.getenv(key.upper(), None)
                if env_value is not None:
                    value = self._cast(env_value, self._extract_base_type(typ))
                else:
                    value = getattr(self, key, None)
            setattr(self, key, value)

        for key, value in kwargs.items():
            setattr(self, key, value)

        self.post_init()

    def post_init(self) -> None:
        """
        Hook called once every field has been resolved.
        """
        ...

    def _extract_base_type(self, typ: Any) -> Any:
        origin = get_origin(typ)
        if origin is Annotated:
            return get_args(typ)[0]
        return typ

    def _cast(self, value: str, typ: type[Any]) -> Any:
        """
        Casts an environment value to the annotated type.

        Raises:
            ValueError: If the value cannot be cast to the specified type.
        """
        origin = get_origin(typ)
        if origin is Union or origin is UnionType:
            non_none_types = [t for t in get_args(typ) if t is not type(None)]
            if len(non_none_types) != 1:
                raise ValueError(f"Cannot cast to ambiguous Union type: {typ}")
            typ = non_none_types[0]

        try:
            if typ is bool or str(typ) == "bool":
                return value.lower() in self.__truthy__
            return typ(value)
        except Exception:
            type_name = getattr(typ, "__name__", str(typ))
            raise ValueError(f"Cannot cast value '{value}' to type '{type_name}'") from None

    def dict(self, exclude_none: bool = False, upper: bool = False) -> dict[str, Any]:
        """
        Dumps all the settings into a python dictionary.
        """
        result = {}
        for key in self.__class__.__type_hints__ or {}:
            if key.startswith("__"):
                continue
            value = getattr(self, key, None)
            if exclude_none and value is None:
                continue
            result[key.upper() if upper else key] = value
        return result


class Settings(BaseSettings):
    debug: Annotated[
        bool,
        Doc(
            """
            Boolean indicating if the application runs in debug mode. When `True`
            the default logging configuration logs at `DEBUG` level, which includes
            every layer registration and handler invocation.
            """
        ),
    ] = False
    environment: Annotated[
        str | None,
        Doc(
            """
            Optional string indicating the environment where the settings are running.
            """
        ),
    ] = EnvironmentType.PRODUCTION
    version: Annotated[
        str,
        Doc(
            """
            The version of the application, defaults to the version of Strata.
            """
        ),
    ] = __version__
    logging_level: Annotated[
        str,
        Doc(
            """
            The logging level used by the `StandardLoggingConfig`.
            """
        ),
    ] = "INFO"
    default_delimiter: Annotated[
        str,
        Doc(
            """
            The segment delimiter used to compile path patterns when a router
            does not specify its own `delimiter`.
            """
        ),
    ] = "/"
    case_sensitive: Annotated[
        bool,
        Doc(
            """
            If path patterns should match case sensitively. Paths are matched
            case insensitively by default.
            """
        ),
    ] = False
    strict_slashes: Annotated[
        bool,
        Doc(
            """
            When `False`, a trailing delimiter on the request path is optional
            (`/users/` matches `/users`).
            """
        ),
    ] = False
    enable_match_cache: Annotated[
        bool,
        Doc(
            """
            Memoise the result of matching a path against a layer. The cache is
            never invalidated, so disable it when paths are unbounded
            (user generated identifiers on a long running process).
            """
        ),
    ] = True

    def post_init(self) -> None:
        if not self.default_delimiter:
            raise ImproperlyConfigured(detail="`default_delimiter` cannot be empty.")

    @property
    def logging_config(self) -> LoggingConfig | None:
        """
        An instance of `LoggingConfig`.

        Default:
            StandardLoggingConfig(level="DEBUG" if debug else logging_level)

        **Example**

        ```python
        from strata.conf.global_settings import Settings
        from strata.logging import LoggingConfig


        class AppSettings(Settings):
            @property
            def logging_config(self) -> LoggingConfig:
                return MyLoguruConfig(level="INFO")
        ```
        """
        level = "DEBUG" if self.debug else self.logging_level
        return StandardLoggingConfig(level=level)
