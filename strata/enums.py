from __future__ import annotations

from strata.conf.enums import StrEnum


class HTTPMethod(StrEnum):
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    GET = "GET"
    PUT = "PUT"
    PATCH = "PATCH"
    POST = "POST"
    DELETE = "DELETE"


# Verbs registered by `Router.all()`.
WRITE_METHODS: frozenset[str] = frozenset(
    {HTTPMethod.DELETE.value, HTTPMethod.GET.value, HTTPMethod.POST.value, HTTPMethod.PUT.value}
)
