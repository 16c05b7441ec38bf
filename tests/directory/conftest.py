from contextlib import contextmanager
from unittest.mock import MagicMock

import pytest

DIRECTORY_MODULES = [
    "echoboard.directory.users",
    "echoboard.directory.projects",
    "echoboard.directory.memberships",
]


@pytest.fixture
def mock_cursor(monkeypatch) -> MagicMock:
    """Stand in for the transaction every directory operation opens."""
    cursor = MagicMock()

    @contextmanager
    def fake_get_db_cursor():
        yield cursor

    for module in DIRECTORY_MODULES:
        monkeypatch.setattr(f"{module}.get_db_cursor", fake_get_db_cursor)
    return cursor
