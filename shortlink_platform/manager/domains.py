"""
Domain allow-list for link creation.

The list is loaded once at startup and never reloaded. Matching is exact:
no trimming, no lower-casing, no wildcard subdomains.
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterable


@dataclass(frozen=True)
class AllowList:
    """Immutable set of domains permitted as redirect targets."""
    domains: FrozenSet[str]

    @classmethod
    def from_csv(cls, raw: str) -> "AllowList":
        """Split a comma separated value as-is (entries are not stripped)."""
        return cls.of(raw.split(","))

    @classmethod
    def of(cls, domains: Iterable[str]) -> "AllowList":
        return cls(frozenset(domains))

    def is_allowed(self, domain: str) -> bool:
        return domain in self.domains

    def __str__(self) -> str:
        return ",".join(sorted(self.domains))
