"""Global test configuration for all tests."""

import os
from collections.abc import Callable

import httpx
import pytest

from pbs_mcp.settings import PbsApiSettings, PbsMcpSettings

TEST_BASE_URL = "https://pbs.test/pbs/api/v3"
TEST_SUBSCRIPTION_KEY = "test-subscription-key"


@pytest.fixture(autouse=True)
def isolate_environment():
    """Isolate environment variables for each test.

    Captures the environment before a test and restores it after, and drops
    any PBS/PORT variables from the developer's shell so defaults apply.
    """
    original_env = os.environ.copy()

    for key in list(os.environ):
        if key.startswith(("PBS_", "PORT")):
            del os.environ[key]

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def api_settings() -> PbsApiSettings:
    return PbsApiSettings(base_url=TEST_BASE_URL, subscription_key=TEST_SUBSCRIPTION_KEY)


@pytest.fixture
def settings(api_settings: PbsApiSettings) -> PbsMcpSettings:
    return PbsMcpSettings(pbs_api=api_settings)


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def make_transport(
    recorded_requests: list[httpx.Request],
) -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.MockTransport]:
    """Build a deterministic upstream that records every request it receives."""

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.MockTransport:
        def record(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return handler(request)

        return httpx.MockTransport(record)

    return factory
