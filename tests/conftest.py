"""
Global pytest fixtures for the Short Link service test suite.

Responsibilities:
    - Provide explicit Settings with a small allow-list
    - Provide an isolated in-memory Storage per test
    - Provide a LinkManager and a FastAPI TestClient wired to that Storage

Why an app factory?
    `create_app(settings, storage)` gives each test fresh state and lets the
    suite run without a MongoDB server.

LLM Prompt Example:
    "Show how to structure pytest fixtures so the HTTP layer and the manager
    share the same in-memory store, letting tests assert what was persisted."
"""

import pytest
from fastapi.testclient import TestClient

from main import create_app
from shortlink_platform.config import Settings
from shortlink_platform.manager.domains import AllowList
from shortlink_platform.manager.link_manager import LinkManager
from shortlink_platform.storage.storage import Storage

ALLOWED = ["example.com", "vocdoni.app"]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        allowed_domains=AllowList.of(ALLOWED),
        mongo_uri="mongodb://unused:27017",
        mongo_db="shortlinks_test",
    )


@pytest.fixture
def storage() -> Storage:
    """Fresh in-memory Storage backend."""
    return Storage()


@pytest.fixture
def manager(storage: Storage, settings: Settings) -> LinkManager:
    return LinkManager(storage=storage, allowed_domains=settings.allowed_domains)


@pytest.fixture
def client(settings: Settings, storage: Storage) -> TestClient:
    """
    TestClient over a new app instance that does not follow redirects,
    so tests can inspect the 302 and its Location header.
    """
    app = create_app(settings=settings, storage=storage)
    return TestClient(app, follow_redirects=False)
