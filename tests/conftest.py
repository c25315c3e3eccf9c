"""
Pytest configuration and fixtures for optimizely-client tests.

Provides clients wired to a recording requester or to an httpx.MockTransport,
so tests run without network access or real credentials.
"""

import os
from typing import Any, Callable, List

import httpx
import pytest

from optimizely_client.integrations.rest_client import OptimizelyClient
from tests.mocks.optimizely_mock import RecordingRequester

BASE_URL = "https://api.example.com/experiment/v1/"


@pytest.fixture
def requester():
    """
    Fixture providing an empty RecordingRequester.

    Usage:
        def test_something(client, requester):
            await client.get_project("5")
            assert requester.call_count == 1
    """
    return RecordingRequester()


@pytest.fixture
def client(requester):
    """OptimizelyClient backed by the recording requester."""
    return OptimizelyClient("test-token", address=BASE_URL, requester=requester)


@pytest.fixture
def http_client_factory():
    """
    Factory fixture for clients that go through httpx with a MockTransport.

    Usage:
        def test_something(http_client_factory):
            client, seen = http_client_factory(lambda request: httpx.Response(200, json=[]))
    """

    def _create_client(
        handler: Callable[[httpx.Request], Any], **kwargs: Any
    ):
        seen: List[httpx.Request] = []

        def recording_handler(request: httpx.Request):
            seen.append(request)
            return handler(request)

        transport = httpx.MockTransport(recording_handler)
        http_client = OptimizelyClient(
            "test-token", address=BASE_URL, transport=transport, **kwargs
        )
        return http_client, seen

    return _create_client


# Environment variable management for tests
@pytest.fixture(autouse=True)
def preserve_env():
    """
    Automatically preserve and restore environment variables for each test.

    This ensures tests don't pollute each other's environment.
    """
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)
