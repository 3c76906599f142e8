"""
Shared pytest fixtures and configuration for cursorstream tests.

This module provides an in-memory search backend, an event recorder and a
factory for clients wired to both.
"""

from collections.abc import Callable
from typing import Any

import pytest

from cursorstream import SearchClient
from tests.helpers.fake_search import EventRecorder, FakeSearch, make_items


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests with in-memory search backends")


@pytest.fixture
def items() -> list[dict[str, Any]]:
    """Five items sorted by `created` = 1..5."""
    return make_items(1, 2, 3, 4, 5)


@pytest.fixture
def fake_search(items) -> FakeSearch:
    return FakeSearch(items)


@pytest.fixture
def client_factory() -> Callable[..., tuple[SearchClient, EventRecorder]]:
    """
    Builds a SearchClient for a search function and attaches an EventRecorder.

    Usage:
        client, recorder = client_factory(fake_search, chunk_size=2)
    """

    def factory(search_fn, **options: Any) -> tuple[SearchClient, EventRecorder]:
        client = SearchClient(search_fn, **options)
        return client, EventRecorder(client.events)

    return factory
