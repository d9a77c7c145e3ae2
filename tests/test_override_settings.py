import pytest

from strata.conf import settings
from strata.routing import Router
from strata.testclient.utils import override_settings
from tests.conftest import MockContext

pytestmark = pytest.mark.anyio


@override_settings(environment="test_func")
def test_can_override_settings():
    assert settings.environment == "test_func"


@override_settings(environment="test_func")
def test_name_of_settings():
    assert settings.__class__.__name__ == "TestSettings"


def test_override_is_restored():
    with override_settings(default_delimiter="."):
        assert settings.default_delimiter == "."

    assert settings.default_delimiter == "/"


class TestInClass:
    @override_settings(environment="test_func")
    def test_can_override_settings(self):
        assert settings.environment == "test_func"

    @override_settings(environment="test_func")
    def test_name_of_settings(self):
        assert settings.__class__.__name__ == "TestSettings"


class TestInClassAsync:
    @override_settings(environment="test_func")
    async def test_can_override_settings(self):
        assert settings.environment == "test_func"

    async def test_async_context_manager(self):
        async with override_settings(strict_slashes=True):
            assert settings.strict_slashes is True

        assert settings.strict_slashes is False


@override_settings(case_sensitive=True)
async def test_case_sensitive_router_from_settings():
    calls: list[str] = []

    async def handler(ctx, next):
        calls.append(ctx.path)

    router = Router().get("/Users", handler)

    await router.dispatch(MockContext("GET", "/users"))
    await router.dispatch(MockContext("GET", "/Users"))

    assert calls == ["/Users"]


@override_settings(strict_slashes=True)
async def test_strict_router_from_settings():
    calls: list[str] = []

    async def handler(ctx, next):
        calls.append(ctx.path)

    router = Router().get("/users", handler)

    await router.dispatch(MockContext("GET", "/users/"))
    await router.dispatch(MockContext("GET", "/users"))

    assert calls == ["/users"]


@override_settings(enable_match_cache=False)
def test_match_cache_disabled_from_settings():
    router = Router().get("/users/:id", lambda ctx, next: None)
    layer = router.layers[0]

    layer.match("GET", "/users/1")

    assert not layer.cache.enabled
    assert len(layer.cache) == 0


@override_settings(default_delimiter=".")
def test_default_delimiter_from_settings():
    router = Router()

    assert router.route_options.delimiter == "."


def test_router_arguments_win_over_settings():
    with override_settings(case_sensitive=True, strict_slashes=True):
        router = Router(sensitive=False, strict=False)

    assert router.route_options.sensitive is False
    assert router.route_options.strict is False
