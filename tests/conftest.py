# tests/conftest.py
"""Shared fixtures: an in-memory SQLite registry and a recording change publisher."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import create_tables, get_db
from app.services.change_publisher import ChangePublisher


class RecordingPublisher(ChangePublisher):
    def __init__(self):
        super().__init__(root="test")
        self.messages = []

    def publish(self, topic, payload):
        self.messages.append((topic, payload))

    def topics(self):
        return [topic for topic, _ in self.messages]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def client(engine, publisher):
    from fastapi.testclient import TestClient
    from app.main import app

    TestSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    def override_get_db():
        session = TestSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    previous = app.state.publisher
    app.state.publisher = publisher
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    app.state.publisher = previous
