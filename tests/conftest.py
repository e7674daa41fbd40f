import os
from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

# Set testing environment before the app reads its settings
os.environ["TESTING"] = "1"
os.environ["BCRYPT_ROUNDS"] = "4"

from dental_api.api.deps import get_booking_lock, get_store  # noqa: E402
from dental_api.core.database import create_store_engine, init_db  # noqa: E402
from dental_api.core.locks import LocalDateLock  # noqa: E402
from dental_api.core.store import DocumentStore  # noqa: E402
from dental_api.main import app  # noqa: E402

API = "/api/v1"


@pytest.fixture
def store():
    """Fresh in-memory document store per test."""
    engine = create_store_engine("sqlite://")
    init_db(bind=engine)
    yield DocumentStore(sessionmaker(autocommit=False, autoflush=False, bind=engine))
    engine.dispose()


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    booking_lock = LocalDateLock()
    app.dependency_overrides[get_booking_lock] = lambda: booking_lock
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def future_date():
    return (date.today() + timedelta(days=7)).isoformat()


def user_payload(email="patient@example.com", role="user", **overrides):
    data = {
        "name": "Ana",
        "lastname": "Lopez",
        "email": email,
        "password": "secret123",
        "phone": "+54 11 5555-1234",
        "birthdate": "1990-05-17",
        "role": role,
    }
    data.update(overrides)
    return data


def register(client, **kwargs):
    response = client.post(f"{API}/auth/register", json=user_payload(**kwargs))
    assert response.status_code == 201, response.text
    body = response.json()
    return body["user"], {"Authorization": f"Bearer {body['token']}"}


@pytest.fixture
def professional(client):
    """A registered professional and their auth headers."""
    return register(client, email="dentist@example.com", role="professional", name="Luis")


@pytest.fixture
def patient(client):
    """A registered patient and their auth headers."""
    return register(client)


@pytest.fixture
def treatment(client, professional):
    _, headers = professional
    response = client.post(
        f"{API}/treatments",
        json={"name": "Cleaning", "description": "Routine cleaning", "price": 40.0, "duration": 30},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["treatment"]
