import pytest
from fastapi.testclient import TestClient


@pytest.fixture(scope="session")
def client() -> TestClient:
    """Test client for the API; directory calls are patched per test."""
    from echoboard.app.app import app

    return TestClient(app)
