"""
Storage factory – build the production storage backend from settings
=====================================================================

Centralizes startup of the MongoDB backend so the rest of the app only sees a
`BaseStorage`. The backend is verified before it is handed out: the primary
must answer a ping and the `shortLink` index must exist. Either failure is
fatal for the process.
"""

import logging

from ..config import Settings
from .base import StorageError
from .mongo_storage import MongoStorage

log = logging.getLogger("shortlink.storage")


def get_storage(settings: Settings) -> MongoStorage:
    """
    Return a connected, indexed MongoStorage.

    Raises
    ------
    StorageError
        If the server cannot be pinged or the index cannot be created.
    """
    storage = MongoStorage(uri=settings.mongo_uri, db_name=settings.mongo_db)
    try:
        storage.ping()
        index_name = storage.ensure_index()
    except StorageError:
        storage.close()
        raise
    log.info("MongoDB ready: db=%s index=%s", settings.mongo_db, index_name)
    return storage
