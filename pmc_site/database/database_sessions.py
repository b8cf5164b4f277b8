import threading
from contextlib import contextmanager
from typing import Callable, Iterator

from pymongo import MongoClient
from pymongo.collection import Collection

from pmc_site.config import DatabaseSettings

ClientFactory = Callable[[str], MongoClient]


class ContactStore:
    """
        Hands out the contacts collection to callers.

        shared=True keeps one lazily created client for the lifetime of the process,
        shared=False opens a client for every scope and closes it when the scope exits.
    """

    def __init__(self, uri: str, db_name: str, collection_name: str = "contacts",
                 shared: bool = True, client_factory: ClientFactory = MongoClient):
        self.uri = uri
        self.db_name = db_name
        self.collection_name = collection_name
        self.shared = shared
        self._client_factory = client_factory
        self._client: MongoClient | None = None
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: DatabaseSettings, shared: bool = True,
                      client_factory: ClientFactory = MongoClient) -> "ContactStore | None":
        """returns None when no connection string is configured"""
        if not settings.is_configured:
            return None
        return cls(uri=settings.MONGODB_URI, db_name=settings.DB_NAME,
                   collection_name=settings.COLLECTION_NAME, shared=shared, client_factory=client_factory)

    def _shared_client(self) -> MongoClient:
        with self._lock:
            if self._client is None:
                self._client = self._client_factory(self.uri)
            return self._client

    @contextmanager
    def collection(self) -> Iterator[Collection]:
        if self.shared:
            yield self._shared_client()[self.db_name][self.collection_name]
            return

        client = self._client_factory(self.uri)
        try:
            yield client[self.db_name][self.collection_name]
        finally:
            client.close()

    def ping(self) -> None:
        """raises pymongo.errors.PyMongoError when the server cannot be reached"""
        if self.shared:
            self._shared_client().admin.command("ping")
            return
        client = self._client_factory(self.uri)
        try:
            client.admin.command("ping")
        finally:
            client.close()

    def close(self) -> None:
        with self._lock:
            if self._client is not None:
                self._client.close()
                self._client = None
