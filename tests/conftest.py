from __future__ import annotations

import os

import pytest

os.environ.setdefault("STRATA_SETTINGS_MODULE", "tests.settings.TestSettings")

from strata.context import Context  # noqa: E402
from strata.datastructures import ServerRequest  # noqa: E402


@pytest.fixture(params=["asyncio", "trio"])
def anyio_backend(request):
    return request.param


class MockContext(Context):
    def __init__(self, method: str, path: str, **kwargs) -> None:
        super().__init__(
            ServerRequest(method=method.upper(), url=f"http://localhost:8080{path}"), **kwargs
        )


@pytest.fixture
def context_factory():
    return MockContext
