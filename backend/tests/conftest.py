import os

# The app module builds its engine at import time; keep tests off PostgreSQL.
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from trainsched.api.deps import get_db
from trainsched.core.security import UserRole
from trainsched.db.base import Base
from trainsched.main import app

from helpers import auth_headers


def _memory_engine():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture()
def client():
    engine = _memory_engine()
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture()
def db_session():
    engine = _memory_engine()
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
def admin_headers():
    return auth_headers(UserRole.admin)


@pytest.fixture()
def trainer_headers():
    return auth_headers(UserRole.trainer)


@pytest.fixture()
def reference_data(client, admin_headers):
    """Three trainers, one establishment with three rooms and one track."""
    trainers = {}
    for index, name in enumerate(("Alice", "Bob", "Carol"), start=1):
        response = client.post(
            "/api/trainers",
            json={"matricule": f"M00{index}", "name": name, "email": f"{name.lower()}@example.com"},
            headers=admin_headers,
        )
        assert response.status_code == 201
        trainers[name] = response.json()

    establishment = client.post(
        "/api/establishments",
        json={"name": "Campus Nord", "rooms": ["Salle 1", "Salle 2", "Salle 3"]},
        headers=admin_headers,
    )
    assert establishment.status_code == 201

    track = client.post(
        "/api/tracks",
        json={
            "name": "DEV",
            "establishment_id": establishment.json()["id"],
            "groups": [{"name": "DEV101"}, {"name": "DEV102"}, {"name": "DEV103"}],
            "modules": [{"name": "Python"}, {"name": "SQL"}],
        },
        headers=admin_headers,
    )
    assert track.status_code == 201

    return {
        "trainers": trainers,
        "establishment": establishment.json(),
        "track": track.json(),
    }


