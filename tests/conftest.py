"""Shared fixtures for the waypoint test suite."""

import pytest


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
