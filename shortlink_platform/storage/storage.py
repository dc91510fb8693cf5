"""
Storage module for the Short Link service (in-memory implementation).

Design:
    - Reference implementation of the BaseStorage contract, kept simple so
      unit and integration tests stay fast and deterministic.
    - Mirrors the MongoDB collection semantics: documents are appended in
      insertion order, duplicates are allowed, lookups return the first match.
"""

import threading
from typing import Any, Dict, List, Optional

from .base import BaseStorage, LinkMapping, StorageError


class Storage(BaseStorage):
    def __init__(self):
        """
        Initialize an empty document list.

        Internal schema:
            self.documents = [{"shortLink": str, "longLink": str}, ...]
        """
        self.documents: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def save_link(self, mapping: LinkMapping) -> None:
        """Append the mapping; empty links are rejected like a schema error."""
        if not mapping.short_link or not mapping.long_link:
            raise StorageError("Refusing to store an empty link")
        with self._lock:
            self.documents.append(mapping.to_document())

    def get_link(self, short_link: str) -> Optional[LinkMapping]:
        with self._lock:
            for doc in self.documents:
                if doc["shortLink"] == short_link:
                    return LinkMapping.from_document(doc)
        return None

    def count(self, short_link: Optional[str] = None) -> int:
        """Number of stored documents, optionally only those for `short_link`."""
        with self._lock:
            if short_link is None:
                return len(self.documents)
            return sum(1 for doc in self.documents if doc["shortLink"] == short_link)
