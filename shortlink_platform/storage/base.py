"""
Base storage interface for the Short Link service.

Purpose:
    Define the small contract the link manager relies on: insert a mapping,
    fetch a mapping by short link. Backends (MongoDB, in-memory) implement it
    without the manager knowing where data lives.

Testing & Coverage:
    Abstract methods are annotated with `# pragma: no cover`.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


class StorageError(RuntimeError):
    """Raised by backends when the store rejects or fails an operation."""


@dataclass(frozen=True)
class LinkMapping:
    """A persisted short link -> long link mapping."""
    short_link: str
    long_link: str

    def to_document(self) -> Dict[str, Any]:
        return {"shortLink": self.short_link, "longLink": self.long_link}

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "LinkMapping":
        return cls(short_link=doc["shortLink"], long_link=doc["longLink"])


class BaseStorage(ABC):
    """Abstract base class for storage backends."""

    @abstractmethod  # pragma: no cover
    def save_link(self, mapping: LinkMapping) -> None:
        """
        Insert a mapping unconditionally.

        No existence check and no upsert: writing the same short link twice
        stores two documents.

        Raises:
            StorageError: If the store rejects the write for any reason.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def get_link(self, short_link: str) -> Optional[LinkMapping]:
        """
        Retrieve the first mapping stored under `short_link`.

        Returns:
            Optional[LinkMapping]: The mapping, or None when absent.

        Raises:
            StorageError: If the lookup itself fails.
        """
        raise NotImplementedError
