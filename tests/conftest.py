import pytest

from eunoia.app import create_app
from eunoia.config import TestConfig
from eunoia.models import db


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.drop_all()
    app.extensions["eunoia.store"].close()


@pytest.fixture
def store(app):
    with app.app_context():
        yield app.extensions["eunoia.store"]


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


def register(client, username="alice", password="secret1"):
    return client.post("/api/auth/register", json={"username": username, "password": password})


@pytest.fixture
def alice(app):
    c = app.test_client()
    assert register(c, "alice").status_code == 201
    return c


@pytest.fixture
def bob(app):
    c = app.test_client()
    assert register(c, "bob").status_code == 201
    return c
