"""
LinkManager module for the Short Link service.

Responsibilities:
    - Parse creation paths of the form /add/<domain>/<rest...>
    - Enforce the domain allow-list
    - Derive short links (content-derived or random, see strategies.py)
    - Persist mappings and resolve them back for redirects

Design notes:
    - Storage and allow-list are injected; the manager holds no other state.
    - Writes are unconditional inserts. A short link that already exists is
      not detected here; whatever the store decides is surfaced as-is.
    - Errors are ValueError subclasses carrying the HTTP status the API layer
      should answer with.
"""

import logging
from typing import Optional

from ..config import FALLBACK_URL, SHORT_LINK_LENGTH
from ..storage.base import BaseStorage, LinkMapping, StorageError
from .domains import AllowList
from .strategies import derive_short_link

log = logging.getLogger("shortlink.manager")


class LinkError(ValueError):
    """Base class for per-request failures; `str(exc)` is the client-facing message."""
    status_code = 400


class InvalidRequestError(LinkError):
    status_code = 400


class DomainNotAllowedError(LinkError):
    status_code = 400


class SaveLinkError(LinkError):
    status_code = 500


class LinkNotFoundError(LinkError):
    status_code = 404


class LinkManager:
    """Coordinates creation and resolution of short links."""

    def __init__(
        self,
        storage: BaseStorage,
        allowed_domains: AllowList,
        fallback_url: str = FALLBACK_URL,
    ):
        self.storage = storage
        self.allowed_domains = allowed_domains
        self.fallback_url = fallback_url

    def create_link(self, path: str) -> LinkMapping:
        """
        Create and store a short link for a creation path.

        Args:
            path (str): Request path, e.g. "/add/example.com/foo/bar".

        Returns:
            LinkMapping: The stored mapping; long_link is https://<domain>/<rest>.

        Raises:
            InvalidRequestError: Fewer than 3 "/"-separated segments.
            DomainNotAllowedError: Domain segment not in the allow-list.
            SaveLinkError: The store rejected the insert.
        """
        log.info("Request: %s", path)

        parts = path.split("/")
        if len(parts) < 3:
            raise InvalidRequestError("Invalid request")

        domain = parts[2]
        rest = parts[3:]
        if not self.allowed_domains.is_allowed(domain):
            raise DomainNotAllowedError("Domain not allowed")

        short_link, strategy = derive_short_link(rest)
        mapping = LinkMapping(
            short_link=short_link,
            long_link="https://{}/{}".format(domain, "/".join(rest)),
        )

        try:
            self.storage.save_link(mapping)
        except StorageError as exc:
            log.error("saving %s failed: %s", short_link, exc)
            raise SaveLinkError("Error saving to database") from exc

        log.info("new link type %s %s => %s", strategy, mapping.short_link, mapping.long_link)
        return mapping

    def resolve_link(self, short_link: str) -> str:
        """
        Return the URL a short link should redirect to.

        Candidates shorter than SHORT_LINK_LENGTH bytes (including "") resolve
        to the fallback URL without touching the store. Matching is exact.

        Raises:
            LinkNotFoundError: No mapping exists or the lookup failed.
        """
        if len(short_link.encode("utf-8")) < SHORT_LINK_LENGTH:
            return self.fallback_url

        try:
            mapping: Optional[LinkMapping] = self.storage.get_link(short_link)
        except StorageError as exc:
            log.warning("lookup of %s failed: %s", short_link, exc)
            mapping = None

        if mapping is None:
            raise LinkNotFoundError("Link not found")
        return mapping.long_link
