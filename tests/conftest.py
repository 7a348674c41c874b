"""
Shared pytest fixtures for Pro access tests.
"""

import pytest

from pro_access.errors import SubscriptionFetchError

from tests.fakes import TENANT_ID, make_store


@pytest.fixture
def pro_store():
    return make_store("active", "completed")


@pytest.fixture
def free_store():
    return make_store(payload=None)


@pytest.fixture
def failing_store():
    return make_store(error=SubscriptionFetchError(TENANT_ID, "boom", status_code=503))
