import os
import tempfile
from datetime import date

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["PASSWORD_HASH_ROUNDS"] = "1000"
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="lostfound-storage-")
os.environ["STORAGE_BASE_URL"] = "http://testserver/storage"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from lostfound.db.db import get_engine
from lostfound.db.gateway import Gateway
from lostfound.main import create_app
from lostfound.realtime.feed import RealtimeFeed
from lostfound.services.auth import SessionProvider
from lostfound.services.claims import ClaimWorkflow
from lostfound.services.items import ItemService
from lostfound.services.messaging import MessagingService
from lostfound.services.notifications import NotificationService
from lostfound.services.notifier import build_event_bus
from lostfound.services.profiles import ProfileService
from lostfound.utils.dependencies import get_feed, get_storage
from lostfound.utils.storage_service import LocalStorage, store_image

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64

BACKPACK = {
    "title": "Blue Backpack",
    "description": "Navy blue backpack with a laptop sleeve",
    "category": "accessories",
    "type": "lost",
    "location": "Main Library",
    "date": date(2024, 5, 1),
}


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture()
def feed():
    return RealtimeFeed()


@pytest.fixture()
def gateway(session, feed):
    return Gateway(session, feed)


@pytest.fixture()
def bus(gateway):
    return build_event_bus(gateway)


@pytest.fixture()
def storage(tmp_path):
    return LocalStorage(tmp_path / "storage", "http://testserver/storage")


@pytest.fixture()
def provider(gateway):
    return SessionProvider(gateway)


@pytest.fixture()
def make_user(provider):
    def _make(email, password="secret123", full_name=None):
        provider.sign_up(email, password, full_name=full_name)
        return provider.sign_in(email, password)

    return _make


@pytest.fixture()
def alice(make_user):
    return make_user("alice@campus.edu", full_name="Alice Adams")


@pytest.fixture()
def bob(make_user):
    return make_user("bob@campus.edu", full_name="Bob Brown")


@pytest.fixture()
def carol(make_user):
    return make_user("carol@campus.edu", full_name="Carol Chen")


@pytest.fixture()
def items(gateway, bus):
    return ItemService(gateway, bus)


@pytest.fixture()
def claims(gateway, bus, storage):
    return ClaimWorkflow(gateway, bus, storage)


@pytest.fixture()
def messaging(gateway, bus):
    return MessagingService(gateway, bus)


@pytest.fixture()
def notifications(gateway):
    return NotificationService(gateway)


@pytest.fixture()
def profiles(gateway):
    return ProfileService(gateway)


@pytest.fixture()
def backpack(items, alice):
    """Alice's lost backpack."""
    return items.report_item(alice, BACKPACK)


@pytest.fixture()
def upload_proof(storage):
    def _upload(context):
        return store_image(storage, "proofs", context.user_id, "image/png", PNG_BYTES)

    return _upload


@pytest.fixture()
def client(engine, feed, storage):
    app = create_app()

    app.dependency_overrides[get_engine] = lambda: engine
    app.dependency_overrides[get_feed] = lambda: feed
    app.dependency_overrides[get_storage] = lambda: storage

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def register(client):
    """Sign a user up and in through the API; returns (user_id, auth headers)."""

    def _register(email, password="secret123", full_name=None):
        response = client.post("/auth/sign-up", json={
            "email": email,
            "password": password,
            "full_name": full_name,
        })
        assert response.status_code == 201, response.text

        response = client.post("/auth/sign-in", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        body = response.json()
        return body["user_id"], {"Authorization": f"Bearer {body['access_token']}"}

    return _register
