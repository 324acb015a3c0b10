import shutil
from datetime import datetime

import pytest

from app import create_app
from app.extensions import db
from config import TestConfig


class FrozenClock:
    """Stand-in for the app clock; tests move it explicitly."""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FrozenClock(datetime(2026, 3, 10, 9, 30, 0))


@pytest.fixture
def app(clock):
    app = create_app(TestConfig)
    app.config["CLOCK"] = clock

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()

    shutil.rmtree(app.config["UPLOAD_FOLDER"], ignore_errors=True)


@pytest.fixture
def client(app):
    return app.test_client()


def register(client, email="alvin@example.com", password="Password123!", name="Alvin"):
    return client.post("/api/auth/register", json={"name": name, "email": email, "password": password})


@pytest.fixture
def auth_client(client):
    response = register(client)
    assert response.status_code == 201
    return client


@pytest.fixture
def other_client(app):
    """A second, independent user with its own cookie jar."""
    other = app.test_client()
    response = register(other, email="other@example.com", name="Other")
    assert response.status_code == 201
    return other


def make_application(client, **overrides):
    payload = {
        "company": "PT Example",
        "role": "Backend Developer",
        "location": "Jakarta",
        "workSetup": "Hybrid",
        "status": "applied",
        "appliedAt": "2026-03-01",
    }
    payload.update(overrides)
    response = client.post("/api/applications", json=payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()["application"]["id"]
