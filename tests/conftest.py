"""Shared fixtures: Flask test client with a signed-in user."""

from unittest.mock import MagicMock, patch

import pytest

from wellness_journal.journal import drafts
from wellness_journal.main import create_app

USER_ID = "user-1"


@pytest.fixture
def app():
    app = create_app()
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers():
    return {"Authorization": "Bearer test-token"}


@pytest.fixture
def signed_in():
    """Patch token lookup so every request runs as USER_ID."""
    db = MagicMock()
    with patch("wellness_journal.services.supabase.get_user", return_value=(USER_ID, None)), \
            patch("wellness_journal.services.supabase.user_client", return_value=db):
        yield db
    drafts.clear(USER_ID)
