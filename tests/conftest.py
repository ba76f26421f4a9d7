"""Shared test fixtures for the contact relay test suite.

Provides:
- app: Flask app configured for testing (fake Resend key, fixed allow-list)
- client: Flask test client
- cli_app: function-scoped app for CLI runner tests
- mock_resend: patched requests.post answering like Resend does on success
- valid_submission: a JSON body that passes every check
"""

from unittest.mock import MagicMock, patch

import pytest

from contact_relay import create_app


@pytest.fixture(scope="session")
def app():
    """Create the Flask application configured for testing."""
    app = create_app("testing")
    yield app


@pytest.fixture
def cli_app():
    """Fresh app for CLI tests. test_cli_runner() overwrites app.debug on load."""
    return create_app("testing")


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def mock_resend():
    """Patch the outbound Resend call. Tests can change .return_value.status_code."""
    with patch("contact_relay.services.email_service.requests.post") as mock_post:
        resp = MagicMock()
        resp.status_code = 200
        resp.text = '{"id": "4ef9a417-02e9-4d39-ad75-9611e0fcc33c"}'
        resp.json.return_value = {"id": "4ef9a417-02e9-4d39-ad75-9611e0fcc33c"}
        mock_post.return_value = resp
        yield mock_post


@pytest.fixture
def valid_submission():
    return {
        "name": "Jane Visitor",
        "email": "jane@visitor.example",
        "phone": "555-0100",
        "message": "Hello there.\nI'd like a quote.",
    }
