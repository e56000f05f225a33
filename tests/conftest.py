import sys
from pathlib import Path

import pytest

# Ensure the repository root (which contains main.py and the locallens package) is importable in tests.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from main import create_app  # noqa: E402
from tests.fakes import FakeGeocoder, MemoryStore  # noqa: E402

ITHACA = (42.4430, -76.5019)
KNOWN_ADDRESSES = {
    "215 N Cayuga St, Ithaca, NY": ITHACA,
    "Cornell University, Ithaca, NY": (42.4534, -76.4735),
}


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def geocoder():
    return FakeGeocoder(KNOWN_ADDRESSES)


@pytest.fixture
def app(store, geocoder):
    app = create_app(
        overrides={
            "TESTING": True,
            "JWT_SECRET_KEY": "test-secret-key-with-enough-length-for-hs256",
            "FALLBACK_TO_CENTROID": False,
        },
        store=store,
        geocoder=geocoder,
    )
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register(client):
    def _register(email="owner@example.com", address=None, category="RESTAURANTS", name="Cafe One"):
        payload = {
            "email": email,
            "password": "hunter22",
            "businessName": name,
            "category": category,
        }
        if address:
            payload["address"] = address
        resp = client.post("/api/auth/register", json=payload)
        assert resp.status_code == 201, resp.get_json()
        body = resp.get_json()
        return body, {"Authorization": f"Bearer {body['token']}"}

    return _register
