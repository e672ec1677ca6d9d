import pytest
from fastapi.testclient import TestClient

from taskdesk.auth import AllowAllChecker
from taskdesk.db import init_db
from taskdesk.main import create_app


@pytest.fixture
def client():
    """Client against a fresh in-memory database with auth disabled."""
    app = create_app("sqlite://", checker=AllowAllChecker())
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db():
    session = init_db("sqlite://")()
    try:
        yield session
    finally:
        session.close()
