from __future__ import annotations

from pathlib import Path

import mongomock
import pytest
from pymongo.errors import ServerSelectionTimeoutError

from pmc_site.config import Settings
from pmc_site.database.database_sessions import ContactStore
from pmc_site.dispatch import NotificationDispatcher
from pmc_site.email.email import Emailer, MailDeliveryError, OutgoingMail


class TrackingMongoClient(mongomock.MongoClient):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.close_calls = 0

    def close(self):
        self.close_calls += 1


class RecordingTransport:
    def __init__(self) -> None:
        self.sent: list[OutgoingMail] = []

    def send(self, message: OutgoingMail) -> None:
        self.sent.append(message)


class FailingTransport(RecordingTransport):
    def send(self, message: OutgoingMail) -> None:
        self.sent.append(message)
        raise MailDeliveryError("mail server rejected the message", status_code=550)


def unreachable_client(uri: str):
    raise ServerSelectionTimeoutError("localhost:27017: [Errno 111] Connection refused")


@pytest.fixture
def mongo_client() -> TrackingMongoClient:
    return TrackingMongoClient("mongodb://localhost:27017")


@pytest.fixture
def contacts(mongo_client: TrackingMongoClient):
    return mongo_client["pmc_website"]["contacts"]


@pytest.fixture
def store(mongo_client: TrackingMongoClient) -> ContactStore:
    return ContactStore(uri="mongodb://localhost:27017", db_name="pmc_website",
                        client_factory=lambda uri: mongo_client)


@pytest.fixture
def per_request_store(mongo_client: TrackingMongoClient) -> ContactStore:
    return ContactStore(uri="mongodb://localhost:27017", db_name="pmc_website", shared=False,
                        client_factory=lambda uri: mongo_client)


@pytest.fixture
def unreachable_store() -> ContactStore:
    return ContactStore(uri="mongodb://localhost:27017", db_name="pmc_website", client_factory=unreachable_client)


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def emailer(transport: RecordingTransport) -> Emailer:
    return Emailer(sender_email="site@pmc.test", recipient_email="office@pmc.test", transport=transport)


@pytest.fixture
def dispatcher(store: ContactStore, emailer: Emailer) -> NotificationDispatcher:
    return NotificationDispatcher(store=store, emailer=emailer)


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    public = tmp_path / "public"
    public.mkdir()
    (public / "index.html").write_text("<h1>Home</h1>")
    (public / "foo.html").write_text("<h1>Foo</h1>")
    (public / "contact.html").write_text("<form method='post'></form>")
    (public / "styles.css").write_text("body { color: black; }")
    (public / "logo.bin").write_bytes(b"\x00\x01")
    (public / "section.html").mkdir()
    return tmp_path


@pytest.fixture
def settings(site_root: Path) -> Settings:
    return Settings(SITE_ROOT=str(site_root))
