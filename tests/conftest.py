import os
from pathlib import Path

import pytest

# Settings are read at import time
os.environ.setdefault("CSRF_ENABLED", "false")
os.environ.setdefault("API_BASE_URL", "http://remote.test")
os.environ.setdefault("BASE_URL", "http://shop.test")
os.environ.setdefault("CLAMP_NEGATIVE_TOTALS", "false")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def remote():
    from tests.fakes import FakeRemote

    return FakeRemote()


@pytest.fixture
def api(remote):
    from config.api import create_client

    client = create_client("test-token", transport=remote.transport())
    yield client
    client.close()


@pytest.fixture
def draft_store():
    from modules.checkout.session import draft_store as store

    store._sessions.clear()
    yield store
    store._sessions.clear()


@pytest.fixture
def client(remote, draft_store):
    """TestClient whose remote calls go to the fake service."""
    from fastapi.testclient import TestClient

    from config.api import create_client, get_api
    from config.settings import AUTH_COOKIE
    from main import app

    def _fake_api():
        api_client = create_client("test-token", transport=remote.transport())
        try:
            yield api_client
        finally:
            api_client.close()

    app.dependency_overrides[get_api] = _fake_api
    with TestClient(app, cookies={AUTH_COOKIE: "test-token"}) as test_client:
        yield test_client
    app.dependency_overrides.clear()
