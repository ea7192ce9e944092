"""MongoDB-backed session store: one document per weekday."""

from __future__ import annotations

import logging
from typing import Any

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from timetable.core.config import Settings
from timetable.domain.bus import EventBus
from timetable.domain.errors import StoreError
from timetable.domain.models import Weekday
from timetable.repos.documents import DocumentSessionStore

log = logging.getLogger(__name__)


class MongoSessionStore(DocumentSessionStore):
    """Day documents keyed by ``_id`` = weekday name.

    Writes are ``replace_one(..., upsert=True)`` with no version filter, which
    keeps the last-write-wins contract of ``replace_day``.
    """

    def __init__(self, collection: Collection, bus: EventBus | None = None) -> None:
        super().__init__(bus)
        self.collection = collection

    def _read_document(self, day: Weekday) -> dict[str, Any] | None:
        try:
            return self.collection.find_one({"_id": str(day)})
        except PyMongoError as exc:
            log.error("Reading %s from Mongo failed: %s", day, exc)
            raise StoreError(f"Could not load {day}: {exc}") from exc

    def _write_document(self, day: Weekday, document: dict[str, Any]) -> None:
        data = dict(document)
        data["_id"] = str(day)
        try:
            self.collection.replace_one({"_id": str(day)}, data, upsert=True)
        except PyMongoError as exc:
            log.error("Writing %s to Mongo failed: %s", day, exc)
            raise StoreError(f"Could not save {day}: {exc}") from exc


def create_mongo_store(settings: Settings, bus: EventBus | None = None) -> MongoSessionStore:
    """Connect with the configured URI and return a store on the timetable collection."""
    client: MongoClient = MongoClient(
        settings.mongo_uri, serverSelectionTimeoutMS=settings.mongo_timeout_ms
    )
    collection = client[settings.mongo_db][settings.mongo_collection]
    log.info("Mongo session store ready (%s.%s)", settings.mongo_db, settings.mongo_collection)
    return MongoSessionStore(collection, bus=bus)
