"""Shared fixtures: an app bound to an in-memory database."""

import pytest

from educert.app import create_app

ISSUER_KEY = "test-issuer-secret"


@pytest.fixture
def app():
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "MASTER_KEY": "test-master-key",
        "ISSUER_SECRET": ISSUER_KEY,
        "ISSUER_NAME": "Test Authority",
        "NETWORK_DELAY": 0,
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def registry(app):
    with app.app_context():
        yield app.extensions["educert"].registry


@pytest.fixture
def jane():
    return {
        "student_name": "Jane Doe",
        "student_email": "jane@x.com",
        "course_name": "Intro",
        "institution_name": "Acme U",
        "issue_date": "2024-01-01",
    }
