# tests/integration/conftest.py
"""
Integration test fixtures.

These tests require a running Cosdata server.

Required environment variables:
    COSDATA_TEST_HOST: Server URL, e.g. http://127.0.0.1:8443

Optional:
    COSDATA_TEST_USERNAME / COSDATA_TEST_PASSWORD (default: admin / admin)
"""

from __future__ import annotations

import os
import uuid

import pytest

from cosdata import Client


def pytest_collection_modifyitems(items):
    """Mark every test in this directory as integration."""
    for item in items:
        if "/integration/" in str(item.fspath) or "\\integration\\" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def live_client():
    """Client for the server named by COSDATA_TEST_HOST."""
    client = Client(
        host=os.environ["COSDATA_TEST_HOST"],
        username=os.environ.get("COSDATA_TEST_USERNAME", "admin"),
        password=os.environ.get("COSDATA_TEST_PASSWORD", "admin"),
    )
    yield client
    client.close()


@pytest.fixture
def collection_name() -> str:
    """Unique collection name so runs do not collide."""
    return f"test_{uuid.uuid4().hex[:12]}"
