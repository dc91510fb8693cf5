"""
Unit tests for LinkManager.

Covers:
    - Path parsing (segment count, long link reconstruction)
    - Allow-list enforcement (nothing written on rejection)
    - Strategy selection and idempotence of process-id links
    - Save failures surfaced as SaveLinkError
    - Resolution: fallback, not found, lookup failure, exact match
"""

import base64

import pytest
from blake3 import blake3

from shortlink_platform.config import FALLBACK_URL
from shortlink_platform.manager.domains import AllowList
from shortlink_platform.manager.link_manager import (
    DomainNotAllowedError,
    InvalidRequestError,
    LinkManager,
    LinkNotFoundError,
    SaveLinkError,
)
from shortlink_platform.storage.base import BaseStorage, LinkMapping, StorageError

PROCESS_ID = "aa" * 32


class FailingStorage(BaseStorage):
    """Storage double whose every operation fails."""

    def save_link(self, mapping):
        raise StorageError("write rejected")

    def get_link(self, short_link):
        raise StorageError("read timed out")


# -------------------------
# Creation
# -------------------------

def test_create_link_random(manager, storage):
    mapping = manager.create_link("/add/example.com/foo/bar")
    assert len(mapping.short_link) == 8
    assert mapping.long_link == "https://example.com/foo/bar"
    assert storage.documents == [{"shortLink": mapping.short_link, "longLink": "https://example.com/foo/bar"}]


def test_create_link_domain_only(manager):
    assert manager.create_link("/add/example.com").long_link == "https://example.com/"
    assert manager.create_link("/add/example.com/").long_link == "https://example.com/"


def test_create_link_process_id(manager):
    mapping = manager.create_link(f"/add/vocdoni.app/process/{PROCESS_ID}/results")
    digest = blake3(bytes.fromhex(PROCESS_ID)).digest()
    assert mapping.short_link == base64.b64encode(digest).decode()[:8]
    assert mapping.long_link == f"https://vocdoni.app/process/{PROCESS_ID}/results"


def test_process_id_links_are_idempotent_across_urls(manager, storage):
    a = manager.create_link(f"/add/example.com/{PROCESS_ID}")
    b = manager.create_link(f"/add/vocdoni.app/elections/{PROCESS_ID}/view")
    assert a.short_link == b.short_link
    # Both inserts happen; the first document wins on lookup.
    assert storage.count(a.short_link) == 2
    assert manager.resolve_link(a.short_link) == a.long_link


def test_random_links_differ(manager):
    a = manager.create_link("/add/example.com/same")
    b = manager.create_link("/add/example.com/same")
    assert a.short_link != b.short_link


@pytest.mark.parametrize("path", ["", "/", "add", "/add"])
def test_create_link_invalid_request(manager, storage, path):
    with pytest.raises(InvalidRequestError, match="Invalid request"):
        manager.create_link(path)
    assert storage.count() == 0


@pytest.mark.parametrize("domain", ["evil.com", "Example.com", " example.com", "sub.example.com", ""])
def test_create_link_domain_not_allowed(manager, storage, domain):
    with pytest.raises(DomainNotAllowedError, match="Domain not allowed"):
        manager.create_link(f"/add/{domain}/x")
    assert storage.count() == 0


def test_create_link_save_failure():
    manager = LinkManager(storage=FailingStorage(), allowed_domains=AllowList.of(["example.com"]))
    with pytest.raises(SaveLinkError, match="Error saving to database") as err:
        manager.create_link("/add/example.com/x")
    assert err.value.status_code == 500


# -------------------------
# Resolution
# -------------------------

@pytest.mark.parametrize("candidate", ["", "a", "abcdefg"])
def test_resolve_short_candidates_fall_back(manager, storage, candidate):
    storage.save_link(LinkMapping("abcdefg", "https://example.com/never"))
    assert manager.resolve_link(candidate) == FALLBACK_URL


def test_resolve_counts_bytes_not_characters(manager):
    # 4 characters, 8 bytes in UTF-8
    with pytest.raises(LinkNotFoundError):
        manager.resolve_link("éééé")


def test_resolve_found(manager):
    created = manager.create_link("/add/example.com/foo")
    assert manager.resolve_link(created.short_link) == "https://example.com/foo"


def test_resolve_is_exact(manager, storage):
    storage.save_link(LinkMapping("AbCdEfGh", "https://example.com/x"))
    for candidate in ("abcdefgh", "AbCdEfGh/", "AbCdEfGhi"):
        with pytest.raises(LinkNotFoundError):
            manager.resolve_link(candidate)


def test_resolve_not_found(manager):
    with pytest.raises(LinkNotFoundError, match="Link not found") as err:
        manager.resolve_link("deadbeef")
    assert err.value.status_code == 404


def test_resolve_lookup_failure_is_not_found():
    manager = LinkManager(storage=FailingStorage(), allowed_domains=AllowList.of(["example.com"]))
    with pytest.raises(LinkNotFoundError):
        manager.resolve_link("deadbeef")
